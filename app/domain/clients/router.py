"""Client router - FastAPI endpoints for client intake and lookup"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Client, User
from ..lifecycle.permissions import can_edit
from .schemas import ClientCreate, ClientResponse
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


def to_response(client: Client, current_user: User) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        firstName=client.first_name,
        lastName=client.last_name,
        email=client.email,
        phone=client.phone,
        source=client.source,
        assignedTo=client.assigned_to,
        firstMeetingDate=client.first_meeting_date,
        firstMeetingCompleted=bool(client.first_meeting_completed),
        purchaseType=client.purchase_type,
        nextConfirmationDue=client.next_confirmation_due,
        version=client.version,
        canEdit=can_edit(current_user, client),
        created_at=client.created_at,
    )


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Get clients visible to the current user"""
    return [to_response(c, current_user) for c in service.get_clients(current_user)]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Get a specific client"""
    return to_response(service.get_client(client_id, current_user), current_user)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Register a new client"""
    client = service.create_client(data, current_user)
    return to_response(client, current_user)
