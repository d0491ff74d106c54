"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_notes, validate_email, validate_phone


class ClientCreate(BaseModel):
    """Schema for client intake"""

    firstName: str
    lastName: str
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    internalNotes: Optional[str] = None

    @field_validator("firstName", "lastName")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("internalNotes")
    @classmethod
    def validate_notes(cls, v):
        return clean_notes(v)


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: int
    firstName: str
    lastName: str
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    assignedTo: Optional[int] = None
    firstMeetingDate: Optional[datetime] = None
    firstMeetingCompleted: bool = False
    purchaseType: Optional[str] = None
    nextConfirmationDue: Optional[datetime] = None
    version: int
    canEdit: bool
    created_at: Optional[datetime] = None
