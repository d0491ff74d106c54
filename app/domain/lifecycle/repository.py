"""Lifecycle repository - Database operations for client lifecycle"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ...models import ActivityLog, Client, ClientFollowup, User
from .errors import Conflict, StoreFailure

logger = logging.getLogger(__name__)


class LifecycleRepository:
    """Repository for lifecycle database operations"""

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, gym_id: int) -> Optional[Client]:
        """Get a client scoped to a gym"""
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.gym_id == gym_id)
            .first()
        )

    @staticmethod
    def get_user_by_id(db: Session, user_id: int, gym_id: int) -> Optional[User]:
        """Get a staff member scoped to a gym"""
        return db.query(User).filter(User.id == user_id, User.gym_id == gym_id).first()

    @staticmethod
    def update_client(
        db: Session, client: Client, expected_version: Optional[int] = None, **updates
    ) -> Client:
        """
        Apply a partial update and commit it.

        Only the named columns are touched; None is written as-is so callers
        can clear a column. Raises Conflict when expected_version does not
        match or the row version went stale, StoreFailure on any other
        database error.
        """
        if expected_version is not None and client.version != expected_version:
            logger.warning(
                f"⚠️ Version mismatch on client {client.id}: "
                f"expected {expected_version}, found {client.version}"
            )
            raise Conflict()

        try:
            for key, value in updates.items():
                setattr(client, key, value)
            db.commit()
            db.refresh(client)
            return client
        except StaleDataError as e:
            db.rollback()
            logger.warning(f"⚠️ Stale update on client {client.id}: {e}")
            raise Conflict() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to update client {client.id}: {e}")
            raise StoreFailure() from e

    @staticmethod
    def create_followup(
        db: Session,
        client_id: int,
        trainer_id: Optional[int],
        followup_type: str,
        scheduled_at: datetime,
        notes: Optional[str] = None,
    ) -> ClientFollowup:
        """Insert a follow-up and commit it"""
        followup = ClientFollowup(
            client_id=client_id,
            trainer_id=trainer_id,
            type=followup_type,
            scheduled_at=scheduled_at,
            notes=notes,
        )
        db.add(followup)
        db.commit()
        db.refresh(followup)
        return followup

    @staticmethod
    def get_followups(db: Session, client_id: int) -> list[ClientFollowup]:
        """Get follow-ups for a client, oldest first"""
        return (
            db.query(ClientFollowup)
            .filter(ClientFollowup.client_id == client_id)
            .order_by(ClientFollowup.scheduled_at.asc(), ClientFollowup.id.asc())
            .all()
        )

    @staticmethod
    def get_activity(db: Session, client_id: int, gym_id: int) -> list[ActivityLog]:
        """Get activity entries for a client, newest first"""
        return (
            db.query(ActivityLog)
            .filter(
                ActivityLog.target_type == "client",
                ActivityLog.target_id == client_id,
                ActivityLog.gym_id == gym_id,
            )
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .all()
        )
