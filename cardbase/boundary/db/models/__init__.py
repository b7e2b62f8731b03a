"""
Database models package.

Exports:
  - CardModel: Card metadata ORM model
  - CardCollisionModel: Audit record of a rejected duplicate submission

Dependencies: sqlalchemy, cardbase.boundary.db.base
System role: Database model definitions for domain entities
"""

from cardbase.boundary.db.models.card_model import CardModel
from cardbase.boundary.db.models.collision_model import CardCollisionModel

__all__ = [
    "CardModel",
    "CardCollisionModel",
]
