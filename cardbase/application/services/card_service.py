"""
Card lookup service.

Dependencies: sqlalchemy, cardbase.boundary.db
System role: Single-card reads and counts
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.boundary.db.models.card_model import CardModel
from cardbase.core.exceptions import (
    AuthenticationRequiredError,
    CardAccessForbiddenError,
    CardNotFoundError,
    MetadataStoreError,
)

logger = logging.getLogger(__name__)


class CardService:
    """Card read operations."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def get_card(self, card_id: UUID, current_user_id: UUID | None) -> CardModel:
        """
        Get a card the caller may read.

        Args:
            card_id: Card UUID
            current_user_id: Requesting user, None when anonymous

        Returns:
            CardModel: The card

        Raises:
            CardNotFoundError: Card does not exist
            AuthenticationRequiredError: Private card, anonymous caller
            CardAccessForbiddenError: Private card, caller is not the author
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

        if card.private:
            if current_user_id is None:
                raise AuthenticationRequiredError(
                    "You must be signed in to view this card",
                    {"card_id": str(card_id)},
                )
            if card.author_id != current_user_id:
                raise CardAccessForbiddenError(str(card_id))

        return card

    async def count_cards(self) -> int:
        """Total number of stored cards."""
        try:
            return await card_crud.count(self.db)
        except SQLAlchemyError as e:
            logger.error("Failed to count cards", extra={"error": str(e)})
            raise MetadataStoreError(
                "Failed to count cards",
                operation="count",
                details={"error": str(e)},
            ) from e
