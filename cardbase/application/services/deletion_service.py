"""
Card deletion orchestrator.

Author-only removal of a card from both stores. The vector is deleted
first and the metadata row second, so a failure between the two leaves
a card row without a vector (still visible to lexical search, dropped
from semantic results) rather than an orphaned vector.

Dependencies: sqlalchemy, cardbase.boundary.db, cardbase.boundary.vdb
System role: Card deletion use case
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.boundary.vdb.vector_schemas import VectorIndex
from cardbase.core.exceptions import (
    CardNotFoundError,
    MetadataStoreError,
    NotCardAuthorError,
)
from cardbase.core.point_ref import Linked, point_ref_from

logger = logging.getLogger(__name__)


class DeletionService:
    """Card deletion orchestrator."""

    def __init__(self, db: AsyncSession, vector_store: VectorIndex) -> None:
        """
        Args:
            db: Async SQLAlchemy session
            vector_store: Vector index holding card vectors
        """
        self.db = db
        self.vector_store = vector_store

    async def delete_card(self, card_id: UUID, requester_id: UUID) -> None:
        """
        Delete a card and its vector.

        Args:
            card_id: Card to delete
            requester_id: Signed-in user asking for the deletion

        Raises:
            CardNotFoundError: Card does not exist
            NotCardAuthorError: Requester is not the author (nothing is deleted)
            VectorStoreError: Vector delete failed (metadata untouched)
            MetadataStoreError: Metadata delete failed after the vector was removed
        """
        try:
            card = await card_crud.get_by_id(self.db, card_id)
        except SQLAlchemyError as e:
            raise MetadataStoreError(
                "Failed to load card",
                operation="select",
                details={"error": str(e), "card_id": str(card_id)},
            ) from e

        if card is None:
            raise CardNotFoundError(str(card_id))
        if card.author_id != requester_id:
            raise NotCardAuthorError(str(card_id), str(requester_id))

        point = point_ref_from(card.vector_point_id)
        if isinstance(point, Linked):
            await self.vector_store.delete_points([point.point_id])

        try:
            await card_crud.delete_by_id(self.db, card_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Card row delete failed after its vector was removed",
                extra={"card_id": str(card_id), "point": str(point)},
            )
            raise MetadataStoreError(
                "Failed to delete card",
                operation="delete",
                details={"error": str(e), "card_id": str(card_id)},
            ) from e

        logger.info(
            "Card deleted",
            extra={"card_id": str(card_id), "point": str(point)},
        )
