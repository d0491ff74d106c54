"""Clients domain - intake and lookup"""

from .router import router

__all__ = ["router"]
