"""Trainer assignment - (re)assigns a client and notifies the new trainer"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Client, User
from ...services.notification_service import NotificationDispatcher
from .activity import ActivityLogger
from .errors import InvalidTrainer, StoreFailure
from .permissions import is_trainer
from .repository import LifecycleRepository
from .schemas import LifecycleResult
from .side_effects import SideEffectBatch

logger = logging.getLogger(__name__)


class TrainerAssignmentService:
    def __init__(
        self,
        db: Session,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime],
    ):
        self.db = db
        self.repo = LifecycleRepository()
        self.activity = ActivityLogger(db)
        self.dispatcher = dispatcher
        self.clock = clock

    def assign(
        self,
        client: Client,
        trainer_id: int,
        notes: Optional[str],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        # Reassignment is open to any staff member of the gym, no edit gate
        try:
            trainer = self.repo.get_user_by_id(self.db, trainer_id, client.gym_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to look up trainer {trainer_id}: {e}")
            raise StoreFailure() from e
        if not is_trainer(trainer):
            logger.warning(f"⚠️ Assignment of client {client.id} rejected: user {trainer_id} is not a trainer")
            raise InvalidTrainer()

        previous_trainer_id = client.assigned_to
        self.repo.update_client(
            self.db, client, expected_version=expected_version, assigned_to=trainer.id
        )
        logger.info(
            f"✅ Client {client.id} assigned to trainer {trainer.id} "
            f"(was {previous_trainer_id}) by user {acting_user.id}"
        )

        trainer_name = trainer.full_name or trainer.email or f"#{trainer.id}"
        client_name = client.full_name

        batch = SideEffectBatch(self.db, self.activity)
        batch.log_activity(
            "trainer_assigned",
            client.id,
            acting_user.id,
            client.gym_id,
            notes or f"Client assigned to trainer {trainer_name}",
        )
        followup = batch.run(
            "followup",
            "Trainer assigned, but the follow-up could not be created",
            lambda: self.repo.create_followup(
                self.db,
                client_id=client.id,
                trainer_id=trainer.id,
                followup_type="in_app",
                scheduled_at=self.clock(),
                notes=notes or "Client assigned to trainer",
            ),
        )
        batch.run(
            "notification",
            "Trainer assigned, but the trainer could not be notified",
            lambda: self.dispatcher.notify(
                trainer.id,
                "New client assigned",
                f"{client_name} has been assigned to you.",
            ),
        )

        return LifecycleResult(
            client=client,
            warnings=batch.warnings,
            followup_id=followup.id if followup else None,
        )
