"""
Cards router package.

Exports the router for card endpoints.
"""

from .cards_router import router

__all__ = ["router"]
