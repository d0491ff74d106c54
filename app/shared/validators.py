"""Shared validation utilities"""

import re
from typing import Optional

MAX_NOTES_LENGTH = 5000


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number to E.164.

    Numbers without an international prefix are rejected, since gyms are not
    tied to a single country.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    stripped = phone.strip()
    if stripped.startswith("00"):
        stripped = "+" + stripped[2:]
    if not stripped.startswith("+"):
        raise ValueError("Phone number must include the international prefix (e.g. +39)")

    digits = re.sub(r"\D", "", stripped)
    if not 8 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 8 and 15 digits")

    return f"+{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def clean_notes(notes: Optional[str]) -> Optional[str]:
    """Trim free-text notes; blank becomes None"""
    if notes is None:
        return None
    notes = notes.strip()
    if not notes:
        return None
    if len(notes) > MAX_NOTES_LENGTH:
        raise ValueError(f"Notes must be at most {MAX_NOTES_LENGTH} characters")
    return notes
