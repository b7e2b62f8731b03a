"""API routers."""

from .cards import router as cards_router
from .health import router as health_router

__all__ = [
    "cards_router",
    "health_router",
]
