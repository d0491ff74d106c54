"""Client service - Business logic for client intake and lookup"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Client, User
from ..lifecycle.activity import ActivityLogger
from ..lifecycle.permissions import is_trainer
from .repository import ClientRepository
from .schemas import ClientCreate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()
        self.activity = ActivityLogger(db)

    def get_clients(self, user: User) -> list[Client]:
        """Trainers see their assigned clients; other staff see the whole gym"""
        if is_trainer(user):
            return self.repo.get_clients(self.db, user.gym_id, assigned_to=user.id)
        return self.repo.get_clients(self.db, user.gym_id)

    def get_client(self, client_id: int, user: User) -> Client:
        """Get a specific client"""
        client = self.repo.get_client_by_id(self.db, client_id, user.gym_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate, user: User) -> Client:
        """Register a new, unassigned client"""
        logger.info(f"📥 Creating client for gym_id: {user.gym_id} by user {user.id}")

        client_data = {
            "first_name": data.firstName,
            "last_name": data.lastName,
            "email": data.email,
            "phone": data.phone,
            "source": data.source,
            "internal_notes": data.internalNotes,
        }

        try:
            client = self.repo.create_client(self.db, user.gym_id, **client_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create client for gym {user.gym_id}: {e}")
            raise HTTPException(status_code=503, detail="Could not save client") from e

        self.activity.record(
            action="client_created",
            target_id=client.id,
            target_type="client",
            acting_user_id=user.id,
            gym_id=client.gym_id,
            notes=f"Client {client.full_name} registered",
        )
        return client
