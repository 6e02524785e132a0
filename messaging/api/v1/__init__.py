"""API v1 package."""

from .conversations import router as conversations_router
from .profiles import router as profiles_router

__all__ = ["conversations_router", "profiles_router"]
