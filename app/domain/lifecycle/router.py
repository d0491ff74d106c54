"""Lifecycle router - FastAPI endpoints for the client lifecycle engine"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .permissions import can_edit
from .schemas import (
    AssignTrainerRequest,
    CompleteMeetingRequest,
    LifecycleClientResponse,
    LifecycleResponse,
    LifecycleResult,
    MeetingDateRequest,
    PurchaseOutcomeRequest,
    TenantSettingsResponse,
)
from .service import LifecycleService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Client Lifecycle"])


def get_lifecycle_service(db: Session = Depends(get_db)) -> LifecycleService:
    """Dependency injection for LifecycleService"""
    return LifecycleService(db)


def to_response(result: LifecycleResult, current_user: User) -> LifecycleResponse:
    return LifecycleResponse(
        ok=result.ok,
        warnings=result.warnings,
        client=LifecycleClientResponse.from_client(
            result.client, can_edit(current_user, result.client)
        ),
        followupId=result.followup_id,
        requireDefaultTemplateAssignment=result.require_default_template_assignment,
    )


# ============================================================================
# LIFECYCLE OPERATIONS
# ============================================================================


@router.post("/clients/{client_id}/assign-trainer", response_model=LifecycleResponse)
async def assign_trainer(
    client_id: int,
    data: AssignTrainerRequest,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Assign (or reassign) a client to a trainer"""
    result = service.assign_trainer(
        client_id, data.trainerId, data.notes, current_user, data.expectedVersion
    )
    return to_response(result, current_user)


@router.put("/clients/{client_id}/first-meeting", response_model=LifecycleResponse)
async def set_first_meeting_date(
    client_id: int,
    data: MeetingDateRequest,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Schedule or reschedule the first meeting"""
    result = service.set_meeting_date(client_id, data.date, current_user, data.expectedVersion)
    return to_response(result, current_user)


@router.post("/clients/{client_id}/first-meeting/complete", response_model=LifecycleResponse)
async def complete_first_meeting(
    client_id: int,
    data: CompleteMeetingRequest,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Mark the first meeting as completed"""
    result = service.mark_completed(
        client_id, current_user, date=data.date, expected_version=data.expectedVersion
    )
    return to_response(result, current_user)


@router.post("/clients/{client_id}/purchase-outcome", response_model=LifecycleResponse)
async def record_purchase_outcome(
    client_id: int,
    data: PurchaseOutcomeRequest,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Record the first meeting outcome and schedule confirmation/follow-up"""
    result = service.record_outcome(
        client_id, data.purchaseType, data.notes, current_user, data.expectedVersion
    )
    return to_response(result, current_user)


# ============================================================================
# READS
# ============================================================================


@router.get("/clients/{client_id}/followups")
async def get_client_followups(
    client_id: int,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Get follow-ups scheduled for a client"""
    followups = service.get_followups(client_id, current_user)
    return [
        {
            "id": f.id,
            "trainerId": f.trainer_id,
            "type": f.type,
            "scheduledAt": f.scheduled_at.isoformat() if f.scheduled_at else None,
            "notes": f.notes,
            "outcome": f.outcome,
        }
        for f in followups
    ]


@router.get("/clients/{client_id}/activity")
async def get_client_activity(
    client_id: int,
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Get the audit trail for a client"""
    entries = service.get_activity(client_id, current_user)
    return [
        {
            "id": e.id,
            "action": e.action,
            "userId": e.user_id,
            "notes": e.notes,
            "createdAt": e.created_at.isoformat() if e.created_at else None,
        }
        for e in entries
    ]


@router.get("/settings/lifecycle", response_model=TenantSettingsResponse)
async def get_lifecycle_settings(
    current_user: User = Depends(get_current_user),
    service: LifecycleService = Depends(get_lifecycle_service),
):
    """Get the resolved lifecycle settings for the current gym"""
    settings = service.get_settings(current_user)
    return TenantSettingsResponse(
        gymId=settings.gym_id,
        daysToFirstFollowup=settings.days_to_first_followup,
        packageConfirmationDays=settings.package_confirmation_days,
        customPlanConfirmationDays=settings.custom_plan_confirmation_days,
        requireDefaultTemplateAssignment=settings.require_default_template_assignment,
    )
