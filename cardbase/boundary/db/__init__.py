"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - CardModel, CardCollisionModel: Domain entities
  - card_crud, collision_crud: CRUD operation singletons

Dependencies: sqlalchemy, cardbase.configs
System role: Metadata store adapter (source of truth for cards)
"""

from cardbase.boundary.db.base import Base, TimestampMixin, UUIDMixin
from cardbase.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from cardbase.boundary.db.models import CardCollisionModel, CardModel
from cardbase.boundary.db.CRUD import (
    BaseCRUD,
    CardCollisionCRUD,
    CardCRUD,
    CardFilters,
    card_crud,
    collision_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "CardModel",
    "CardCollisionModel",
    # CRUD
    "BaseCRUD",
    "CardCRUD",
    "CardCollisionCRUD",
    "CardFilters",
    "card_crud",
    "collision_crud",
]
