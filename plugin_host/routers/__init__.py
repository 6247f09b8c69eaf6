"""API routers package."""

from .plugins import router as plugins_router
from .sessions import router as sessions_router

__all__ = ["plugins_router", "sessions_router"]
