"""Best-effort side effects run after the primary write has been committed"""

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from .activity import ActivityLogger
from .schemas import SideEffectWarning

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SideEffectBatch:
    """Runs side effects one by one and collects their failures as warnings"""

    def __init__(self, db: Session, activity: ActivityLogger):
        self.db = db
        self.activity = activity
        self.warnings: list[SideEffectWarning] = []

    def run(self, source: str, failure_message: str, action: Callable[[], T]) -> Optional[T]:
        """Run action; on any exception roll back, record a warning and return None"""
        try:
            return action()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Side effect '{source}' failed: {e}")
            self.warnings.append(SideEffectWarning(source=source, message=failure_message))
            return None

    def log_activity(
        self,
        action: str,
        target_id: int,
        acting_user_id: Optional[int],
        gym_id: Optional[int],
        notes: Optional[str] = None,
    ) -> bool:
        recorded = self.activity.record(
            action=action,
            target_id=target_id,
            target_type="client",
            acting_user_id=acting_user_id,
            gym_id=gym_id,
            notes=notes,
        )
        if not recorded:
            self.warnings.append(
                SideEffectWarning(
                    source="activity_log",
                    message="Changes saved, but the activity could not be recorded",
                )
            )
        return recorded
