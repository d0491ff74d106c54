"""First-meeting tracker"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, User
from ...shared.timeutils import to_naive_utc
from .activity import ActivityLogger
from .errors import DateRequired
from .permissions import ensure_can_edit
from .repository import LifecycleRepository
from .schemas import LifecycleResult
from .side_effects import SideEffectBatch

logger = logging.getLogger(__name__)


class FirstMeetingTracker:
    def __init__(self, db: Session):
        self.db = db
        self.repo = LifecycleRepository()
        self.activity = ActivityLogger(db)

    def set_meeting_date(
        self,
        client: Client,
        date: Optional[datetime],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        """Schedule (or reschedule) the first meeting"""
        ensure_can_edit(acting_user, client)
        if date is None:
            raise DateRequired("A first meeting date is required")

        meeting_date = to_naive_utc(date)
        self.repo.update_client(
            self.db, client, expected_version=expected_version, first_meeting_date=meeting_date
        )
        logger.info(f"📅 Client {client.id} first meeting set to {meeting_date.isoformat()}")

        batch = SideEffectBatch(self.db, self.activity)
        batch.log_activity(
            "first_meeting_date_updated",
            client.id,
            acting_user.id,
            client.gym_id,
            f"First meeting date updated to {meeting_date:%Y-%m-%d}",
        )
        return LifecycleResult(client=client, warnings=batch.warnings)

    def mark_completed(
        self,
        client: Client,
        acting_user: User,
        date: Optional[datetime] = None,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        """
        Mark the first meeting as held.

        A date passed alongside re-stamps first_meeting_date. Repeating the
        call on a completed client is a successful no-op.
        """
        ensure_can_edit(acting_user, client)

        meeting_date = to_naive_utc(date) if date is not None else client.first_meeting_date
        if meeting_date is None:
            raise DateRequired()

        if client.first_meeting_completed and meeting_date == client.first_meeting_date:
            logger.info(f"ℹ️ Client {client.id} first meeting already completed")
            return LifecycleResult(client=client)

        self.repo.update_client(
            self.db,
            client,
            expected_version=expected_version,
            first_meeting_completed=True,
            first_meeting_date=meeting_date,
        )
        logger.info(f"✅ Client {client.id} first meeting completed by user {acting_user.id}")

        batch = SideEffectBatch(self.db, self.activity)
        batch.log_activity(
            "first_meeting_completed",
            client.id,
            acting_user.id,
            client.gym_id,
            "First meeting completed",
        )
        return LifecycleResult(client=client, warnings=batch.warnings)
