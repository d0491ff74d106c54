"""Lifecycle domain schemas - requests, responses and operation results"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Client
from ...shared.validators import clean_notes


class PurchaseType(str, Enum):
    PACKAGE = "package"
    CUSTOM_PLAN = "custom_plan"
    NONE = "none"


PURCHASE_TYPE_LABELS = {
    PurchaseType.PACKAGE: "Package purchased",
    PurchaseType.CUSTOM_PLAN: "Custom plan purchased",
    PurchaseType.NONE: "No purchase",
}


class SideEffectWarning(BaseModel):
    """Non-fatal failure of a best-effort step; the operation still succeeded"""

    code: str = "side_effect_failure"
    source: str  # activity_log, followup, notification
    message: str


@dataclass
class LifecycleResult:
    client: Client
    warnings: list[SideEffectWarning] = field(default_factory=list)
    followup_id: Optional[int] = None
    require_default_template_assignment: Optional[bool] = None
    ok: bool = True


# ============================================================================
# REQUESTS
# ============================================================================


class AssignTrainerRequest(BaseModel):
    trainerId: int
    notes: Optional[str] = None
    expectedVersion: Optional[int] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_notes(v)


class MeetingDateRequest(BaseModel):
    date: Optional[datetime] = None
    expectedVersion: Optional[int] = None


class CompleteMeetingRequest(BaseModel):
    date: Optional[datetime] = None
    expectedVersion: Optional[int] = None


class PurchaseOutcomeRequest(BaseModel):
    purchaseType: PurchaseType
    notes: Optional[str] = None
    expectedVersion: Optional[int] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_notes(v)


# ============================================================================
# RESPONSES
# ============================================================================


class LifecycleClientResponse(BaseModel):
    id: int
    firstName: str
    lastName: str
    assignedTo: Optional[int] = None
    firstMeetingDate: Optional[datetime] = None
    firstMeetingCompleted: bool
    purchaseType: Optional[str] = None
    internalNotes: Optional[str] = None
    nextConfirmationDue: Optional[datetime] = None
    version: int
    canEdit: bool

    @classmethod
    def from_client(cls, client: Client, can_edit: bool) -> "LifecycleClientResponse":
        return cls(
            id=client.id,
            firstName=client.first_name,
            lastName=client.last_name,
            assignedTo=client.assigned_to,
            firstMeetingDate=client.first_meeting_date,
            firstMeetingCompleted=bool(client.first_meeting_completed),
            purchaseType=client.purchase_type,
            internalNotes=client.internal_notes,
            nextConfirmationDue=client.next_confirmation_due,
            version=client.version,
            canEdit=can_edit,
        )


class LifecycleResponse(BaseModel):
    ok: bool = True
    warnings: list[SideEffectWarning] = []
    client: LifecycleClientResponse
    followupId: Optional[int] = None
    requireDefaultTemplateAssignment: Optional[bool] = None


class TenantSettingsResponse(BaseModel):
    gymId: int
    daysToFirstFollowup: int
    packageConfirmationDays: int
    customPlanConfirmationDays: int
    requireDefaultTemplateAssignment: bool
