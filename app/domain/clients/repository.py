"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, gym_id: int, assigned_to: Optional[int] = None) -> list[Client]:
        """Get clients of a gym, optionally only those assigned to one trainer"""
        query = db.query(Client).filter(Client.gym_id == gym_id)

        if assigned_to is not None:
            query = query.filter(Client.assigned_to == assigned_to)

        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, gym_id: int) -> Optional[Client]:
        """Get a specific client by ID"""
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.gym_id == gym_id)
            .first()
        )

    @staticmethod
    def create_client(db: Session, gym_id: int, **client_data) -> Client:
        """Create a new client"""
        client = Client(gym_id=gym_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client
