"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from cardbase.boundary.db.CRUD import card_crud

    card = await card_crud.get_by_id(db, card_id)
"""

from cardbase.boundary.db.CRUD.base_crud import BaseCRUD
from cardbase.boundary.db.CRUD.card_crud import (
    CardCRUD,
    CardFilters,
    FullTextHit,
    FullTextPage,
    card_crud,
)
from cardbase.boundary.db.CRUD.collision_crud import CardCollisionCRUD, collision_crud

__all__ = [
    "BaseCRUD",
    "CardCRUD",
    "CardFilters",
    "FullTextHit",
    "FullTextPage",
    "card_crud",
    "CardCollisionCRUD",
    "collision_crud",
]
