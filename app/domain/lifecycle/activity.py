"""Activity logger - append-only audit entries, never raises into the caller"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogger:
    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        action: str,
        target_id: Optional[int],
        target_type: str,
        acting_user_id: Optional[int],
        gym_id: Optional[int],
        notes: Optional[str] = None,
    ) -> bool:
        """
        Append one activity entry.

        Returns False (soft failure) when gym_id is missing or the write fails.
        """
        if not gym_id:
            logger.error(f"❌ Activity '{action}' on {target_type} {target_id} skipped: gym_id missing")
            return False

        try:
            entry = ActivityLog(
                action=action,
                target_id=target_id,
                target_type=target_type,
                user_id=acting_user_id,
                gym_id=gym_id,
                notes=notes,
            )
            self.db.add(entry)
            self.db.commit()
            logger.debug(f"📝 Activity logged: {action} on {target_type} {target_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error logging activity '{action}' for {target_type} {target_id}: {e}")
            return False
