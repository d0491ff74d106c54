"""Authorization gate for client edits"""

import logging
from enum import Enum
from typing import Optional

from ...models import Client, User
from .errors import Unauthorized

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    OPERATOR = "operator"
    TRAINER = "trainer"
    ASSISTANT = "assistant"
    INSTRUCTOR = "instructor"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        try:
            return cls(value)
        except ValueError:
            return None


# Roles that may edit any client of their gym
STAFF_EDITORS = {Role.ADMIN, Role.OPERATOR}


def can_edit(acting_user: User, client: Client) -> bool:
    """
    Whether acting_user may mutate client.

    Admins and operators always can. A trainer can only when the client is
    currently assigned to them. Every other role is read-only.
    """
    role = Role.parse(acting_user.role)
    if role in STAFF_EDITORS:
        return True
    if role is Role.TRAINER:
        return client.assigned_to is not None and client.assigned_to == acting_user.id
    return False


def is_trainer(user: Optional[User]) -> bool:
    return user is not None and Role.parse(user.role) is Role.TRAINER


def ensure_can_edit(acting_user: User, client: Client) -> None:
    """Raise Unauthorized unless acting_user may edit client"""
    if not can_edit(acting_user, client):
        logger.warning(
            f"⚠️ User {acting_user.id} ({acting_user.role}) denied edit on client {client.id}"
        )
        raise Unauthorized()
