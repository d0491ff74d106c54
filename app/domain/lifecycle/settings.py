"""Settings resolver - read-only snapshot of a gym's lifecycle parameters"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import (
    DEFAULT_CUSTOM_PLAN_CONFIRMATION_DAYS,
    DEFAULT_DAYS_TO_FIRST_FOLLOWUP,
    DEFAULT_PACKAGE_CONFIRMATION_DAYS,
    DEFAULT_REQUIRE_TEMPLATE_ASSIGNMENT,
)
from ...models import GymSettings
from .errors import NotFound, StoreFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantSettings:
    gym_id: int
    days_to_first_followup: int
    package_confirmation_days: int
    custom_plan_confirmation_days: int
    require_default_template_assignment: bool

    def confirmation_days_for(self, purchase_type: str) -> Optional[int]:
        """Confirmation window for a purchase type, None when it has no window"""
        if purchase_type == "package":
            return self.package_confirmation_days
        if purchase_type == "custom_plan":
            return self.custom_plan_confirmation_days
        return None

    def to_dict(self) -> dict:
        return asdict(self)


def _non_negative(value: Optional[int], default: int) -> int:
    if value is None:
        return default
    return max(int(value), 0)


class SettingsResolver:
    """Resolves GymSettings rows into immutable TenantSettings"""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, gym_id: int) -> TenantSettings:
        try:
            row = self.db.query(GymSettings).filter(GymSettings.gym_id == gym_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to read gym_settings for gym {gym_id}: {e}")
            raise StoreFailure() from e
        if not row:
            logger.warning(f"⚠️ No gym_settings row for gym {gym_id}")
            raise NotFound("Gym settings not found")

        return TenantSettings(
            gym_id=gym_id,
            days_to_first_followup=_non_negative(
                row.days_to_first_followup, DEFAULT_DAYS_TO_FIRST_FOLLOWUP
            ),
            package_confirmation_days=_non_negative(
                row.package_confirmation_days, DEFAULT_PACKAGE_CONFIRMATION_DAYS
            ),
            custom_plan_confirmation_days=_non_negative(
                row.custom_plan_confirmation_days, DEFAULT_CUSTOM_PLAN_CONFIRMATION_DAYS
            ),
            require_default_template_assignment=(
                DEFAULT_REQUIRE_TEMPLATE_ASSIGNMENT
                if row.require_default_template_assignment is None
                else bool(row.require_default_template_assignment)
            ),
        )
