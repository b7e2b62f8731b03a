"""
Generic row operations shared by the card CRUD classes.

None of these methods commit. Services decide when a unit of work ends,
which lets ingestion hold a flushed card row open while the vector write
is in flight.

Dependencies: sqlalchemy
System role: Shared persistence primitives for the metadata store
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations for one mapped model.

    Attributes:
        model: Mapped class the queries target
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Add a row and flush it so generated values are populated.

        Args:
            session: Async database session (transaction left open)
            **values: Column values

        Returns:
            The persistent instance, refreshed from the database
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Row with primary key ``id``, or None."""
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete the row with primary key ``id``.

        Returns:
            bool: False when no row matched
        """
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def count(self, session: AsyncSession) -> int:
        """Number of rows in the model's table."""
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())
