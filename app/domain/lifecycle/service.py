"""Lifecycle service - public surface of the client lifecycle engine"""

import logging
from datetime import datetime
from typing import Callable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import ActivityLog, Client, ClientFollowup, User
from ...services.notification_service import NotificationDispatcher
from ...shared.timeutils import utcnow
from .assignment import TrainerAssignmentService
from .errors import NotFound, StoreFailure
from .first_meeting import FirstMeetingTracker
from .purchase_outcome import PurchaseOutcomeRecorder
from .repository import LifecycleRepository
from .schemas import LifecycleResult, PurchaseType
from .settings import SettingsResolver, TenantSettings

logger = logging.getLogger(__name__)


class LifecycleService:
    """
    Orchestrates the client lifecycle operations.

    Holds no state between calls: each operation re-reads the client, runs
    the gate and preconditions, compares the row version, commits one
    primary write, then runs its side effects. Fatal problems raise a
    LifecycleError subclass; side-effect failures come back as warnings on
    the result.
    """

    def __init__(
        self,
        db: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.repo = LifecycleRepository()
        self.clock = clock or utcnow
        self.dispatcher = dispatcher or NotificationDispatcher(db)
        self.settings = SettingsResolver(db)
        self.assignment = TrainerAssignmentService(db, self.dispatcher, self.clock)
        self.first_meeting = FirstMeetingTracker(db)
        self.purchase_outcome = PurchaseOutcomeRecorder(db, self.settings, self.clock)

    def _load_client(self, client_id: int, acting_user: User) -> Client:
        try:
            client = self.repo.get_client_by_id(self.db, client_id, acting_user.gym_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to load client {client_id}: {e}")
            raise StoreFailure() from e

        if not client:
            raise NotFound("Client not found")
        return client

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def assign_trainer(
        self,
        client_id: int,
        trainer_id: int,
        notes: Optional[str],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        client = self._load_client(client_id, acting_user)
        return self.assignment.assign(client, trainer_id, notes, acting_user, expected_version)

    def set_meeting_date(
        self,
        client_id: int,
        date: Optional[datetime],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        client = self._load_client(client_id, acting_user)
        return self.first_meeting.set_meeting_date(client, date, acting_user, expected_version)

    def mark_completed(
        self,
        client_id: int,
        acting_user: User,
        date: Optional[datetime] = None,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        client = self._load_client(client_id, acting_user)
        return self.first_meeting.mark_completed(client, acting_user, date, expected_version)

    def record_outcome(
        self,
        client_id: int,
        purchase_type: Union[PurchaseType, str],
        notes: Optional[str],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        client = self._load_client(client_id, acting_user)
        return self.purchase_outcome.record(
            client, purchase_type, notes, acting_user, expected_version
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_settings(self, acting_user: User) -> TenantSettings:
        return self.settings.resolve(acting_user.gym_id)

    def get_followups(self, client_id: int, acting_user: User) -> list[ClientFollowup]:
        client = self._load_client(client_id, acting_user)
        return self.repo.get_followups(self.db, client.id)

    def get_activity(self, client_id: int, acting_user: User) -> list[ActivityLog]:
        client = self._load_client(client_id, acting_user)
        return self.repo.get_activity(self.db, client.id, client.gym_id)
