"""
Purchase outcome recorder
Records the result of the first meeting, derives the next confirmation date
from gym settings and schedules an automatic follow-up when nothing was bought
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Client, User
from .activity import ActivityLogger
from .errors import InvalidPurchaseType, MeetingNotCompleted, StoreFailure
from .permissions import ensure_can_edit
from .repository import LifecycleRepository
from .schemas import PURCHASE_TYPE_LABELS, LifecycleResult, PurchaseType
from .settings import SettingsResolver, TenantSettings
from .side_effects import SideEffectBatch

logger = logging.getLogger(__name__)

DEFAULT_FOLLOWUP_NOTES = "Automatic follow-up after first meeting without purchase"


def next_confirmation_due(
    settings: TenantSettings, purchase_type: PurchaseType, now: datetime
) -> Optional[datetime]:
    days = settings.confirmation_days_for(purchase_type.value)
    if days is None:
        return None
    return now + timedelta(days=days)


class PurchaseOutcomeRecorder:
    def __init__(
        self,
        db: Session,
        settings: SettingsResolver,
        clock: Callable[[], datetime],
    ):
        self.db = db
        self.repo = LifecycleRepository()
        self.activity = ActivityLogger(db)
        self.settings = settings
        self.clock = clock

    def record(
        self,
        client: Client,
        purchase_type: Union[PurchaseType, str],
        notes: Optional[str],
        acting_user: User,
        expected_version: Optional[int] = None,
    ) -> LifecycleResult:
        ensure_can_edit(acting_user, client)
        if not client.first_meeting_completed:
            logger.warning(f"⚠️ Outcome for client {client.id} rejected: first meeting not completed")
            raise MeetingNotCompleted()

        try:
            purchase_type = PurchaseType(purchase_type)
        except ValueError as e:
            raise InvalidPurchaseType() from e

        try:
            settings = self.settings.resolve(client.gym_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to load settings for gym {client.gym_id}: {e}")
            raise StoreFailure() from e
        now = self.clock()

        # Re-recording overwrites the previous outcome and recomputes the date
        updates = {
            "purchase_type": purchase_type.value,
            "next_confirmation_due": next_confirmation_due(settings, purchase_type, now),
        }
        if notes:
            updates["internal_notes"] = notes
        if client.purchase_type and client.purchase_type != purchase_type.value:
            logger.info(
                f"ℹ️ Client {client.id} outcome changes from {client.purchase_type} to {purchase_type.value}"
            )
        self.repo.update_client(self.db, client, expected_version=expected_version, **updates)
        logger.info(f"✅ Client {client.id} purchase outcome recorded: {purchase_type.value}")

        batch = SideEffectBatch(self.db, self.activity)
        followup = None
        if purchase_type is PurchaseType.NONE:
            followup = batch.run(
                "followup",
                "Outcome saved, but the follow-up could not be scheduled",
                lambda: self.repo.create_followup(
                    self.db,
                    client_id=client.id,
                    trainer_id=client.assigned_to,
                    followup_type="post_first_meeting",
                    scheduled_at=now + timedelta(days=settings.days_to_first_followup),
                    notes=notes or DEFAULT_FOLLOWUP_NOTES,
                ),
            )
            if followup:
                logger.info(f"📅 Follow-up {followup.id} scheduled for {followup.scheduled_at.isoformat()}")

        batch.log_activity(
            "purchase_outcome_recorded",
            client.id,
            acting_user.id,
            client.gym_id,
            f"First meeting outcome recorded: {PURCHASE_TYPE_LABELS[purchase_type]}",
        )

        return LifecycleResult(
            client=client,
            warnings=batch.warnings,
            followup_id=followup.id if followup else None,
            require_default_template_assignment=settings.require_default_template_assignment,
        )
