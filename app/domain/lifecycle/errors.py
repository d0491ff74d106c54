"""Typed failures for lifecycle operations"""

from typing import Optional


class LifecycleError(Exception):
    """Fatal error: the operation was rejected and nothing was written"""

    code = "lifecycle_error"
    status_code = 400
    default_detail = "Lifecycle operation failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.detail}


class Unauthorized(LifecycleError):
    code = "unauthorized"
    status_code = 403
    default_detail = "You are not allowed to edit this client"


class InvalidTrainer(LifecycleError):
    code = "invalid_trainer"
    status_code = 422
    default_detail = "Selected user is not a trainer"


class MeetingNotCompleted(LifecycleError):
    code = "meeting_not_completed"
    status_code = 409
    default_detail = "The first meeting must be completed before recording an outcome"


class DateRequired(LifecycleError):
    code = "date_required"
    status_code = 422
    default_detail = "Set a first meeting date first"


class NotFound(LifecycleError):
    code = "not_found"
    status_code = 404
    default_detail = "Record not found"


class Conflict(LifecycleError):
    code = "conflict"
    status_code = 409
    default_detail = "Client was modified by someone else, reload and retry"


class StoreFailure(LifecycleError):
    code = "store_failure"
    status_code = 503
    default_detail = "Could not save changes, please try again"


class InvalidPurchaseType(LifecycleError):
    code = "invalid_purchase_type"
    status_code = 422
    default_detail = "Purchase type must be one of: package, custom_plan, none"
