"""
Card collision CRUD operations.

Dependencies: sqlalchemy, cardbase.boundary.db.models
System role: Duplicate submission audit persistence
"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.base_crud import BaseCRUD
from cardbase.boundary.db.models.collision_model import CardCollisionModel


class CardCollisionCRUD(BaseCRUD[CardCollisionModel]):
    """CRUD operations for CardCollisionModel."""

    def __init__(self) -> None:
        """Initialize CardCollisionCRUD with CardCollisionModel."""
        super().__init__(CardCollisionModel)

    async def get_by_card_id(
        self,
        session: AsyncSession,
        card_id: UUID,
    ) -> Sequence[CardCollisionModel]:
        """
        Retrieve collision records for a rejected card.

        Args:
            session: Async database session
            card_id: Rejected card's ID

        Returns:
            Sequence of CardCollisionModels
        """
        stmt = select(CardCollisionModel).where(CardCollisionModel.card_id == card_id)
        result = await session.execute(stmt)
        return result.scalars().all()


collision_crud = CardCollisionCRUD()
