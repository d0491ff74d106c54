"""Client lifecycle domain - assignment, first meeting, purchase outcome, follow-ups"""

from .errors import LifecycleError
from .router import router
from .service import LifecycleService

__all__ = ["LifecycleError", "LifecycleService", "router"]
