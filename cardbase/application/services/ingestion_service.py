"""
Card ingestion orchestrator.

Validates, deduplicates and persists a new card across the metadata store
and the vector index.

Write ordering (there is no transaction spanning both stores):
  1. Insert the metadata row and flush, without committing.
  2. Upsert the vector under a fresh point ID.
  3. Commit the metadata row.
If step 2 fails the metadata row is rolled back. If step 3 fails the
vector is deleted again; when that compensation also fails the vector is
left as an orphan for the reconciliation sweep.

Dependencies: sqlalchemy, cardbase.boundary.db, cardbase.boundary.vdb
System role: Card creation use case
"""

import logging
import time
import uuid
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.dedup_checker import DedupChecker
from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.boundary.db.CRUD.collision_crud import collision_crud
from cardbase.boundary.vdb.vector_schemas import VectorIndex, VectorPoint, build_payload
from cardbase.configs.cards import CardSettings
from cardbase.core.dedup_outcome import Collision
from cardbase.core.exceptions import (
    CardValidationError,
    DuplicateCardError,
    MetadataStoreError,
    StoreError,
)
from cardbase.core.point_ref import point_id_or_none
from cardbase.core.similarity import has_minimum_words
from cardbase.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class IngestionService:
    """Card creation orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        dedup_checker: DedupChecker,
        vector_store: VectorIndex,
        settings: CardSettings,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            db: Async SQLAlchemy session
            dedup_checker: Two-stage duplicate gate
            vector_store: Vector index receiving new card vectors
            settings: Card pipeline settings
        """
        self.db = db
        self.dedup_checker = dedup_checker
        self.vector_store = vector_store
        self.settings = settings

    async def create_card(
        self,
        content: str,
        author_id: UUID,
        card_html: str | None = None,
        link: str | None = None,
        oc_file_path: str | None = None,
        is_private: bool = False,
    ) -> UUID:
        """
        Create a card.

        Args:
            content: Card text body
            author_id: Submitting user
            card_html: Rendered form of the content
            link: Source URL
            oc_file_path: Source file path
            is_private: Restrict visibility to the author

        Returns:
            UUID: Created card ID

        Raises:
            CardValidationError: Content below the minimum word count
            DuplicateCardError: Content collides with an existing card
            StoreError: A backend failed
        """
        if not has_minimum_words(content, self.settings.min_words):
            raise CardValidationError(
                f"Card content must be at least {self.settings.min_words} words long",
                field="content",
            )

        outcome = await self.dedup_checker.check(content, card_html)

        if isinstance(outcome, Collision):
            await self._handle_collision(
                outcome,
                content=content,
                author_id=author_id,
                card_html=card_html,
                link=link,
                oc_file_path=oc_file_path,
                is_private=is_private,
            )

        point_id = uuid.uuid4()
        card_id = await self._insert_row(
            content=content,
            author_id=author_id,
            card_html=card_html,
            link=link,
            oc_file_path=oc_file_path,
            private=is_private,
            vector_point_id=point_id,
        )

        try:
            await self.vector_store.upsert_point(
                VectorPoint(
                    point_id=point_id,
                    embedding=outcome.embedding,
                    payload=build_payload(
                        is_private,
                        author_id,
                        oc_file_path=oc_file_path,
                        link=link,
                        created_at=time.time(),
                    ),
                )
            )
        except StoreError:
            await self.db.rollback()
            logger.error(
                "Vector upsert failed, card row rolled back",
                extra={"card_id": str(card_id), "point_id": str(point_id)},
            )
            raise

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self._compensate_vector(point_id)
            raise MetadataStoreError(
                "Failed to commit card",
                operation="insert",
                details={"error": str(e)},
            ) from e

        logger.info(
            "Card created",
            extra={
                "card_id": str(card_id),
                "point_id": str(point_id),
                "private": is_private,
            },
        )
        return card_id

    async def _insert_row(self, **fields) -> UUID:
        try:
            card = await card_crud.create(self.db, **fields)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise MetadataStoreError(
                "Failed to insert card",
                operation="insert",
                details={"error": str(e)},
            ) from e
        return card.id

    async def _handle_collision(
        self,
        collision: Collision,
        **fields,
    ) -> None:
        """Apply the duplicate policy, then raise DuplicateCardError."""
        collision_point_id = point_id_or_none(collision.point)
        recorded_card_id = None

        if self.settings.duplicate_policy == "record":
            try:
                card = await card_crud.create(
                    self.db,
                    content=fields["content"],
                    author_id=fields["author_id"],
                    card_html=fields["card_html"],
                    link=fields["link"],
                    oc_file_path=fields["oc_file_path"],
                    private=fields["is_private"],
                    vector_point_id=None,
                )
                await collision_crud.create(
                    self.db,
                    card_id=card.id,
                    collision_point_id=collision_point_id,
                    matched_card_id=collision.matched_card_id,
                    stage=collision.stage.value,
                    score=collision.score,
                )
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise MetadataStoreError(
                    "Failed to record duplicate card",
                    operation="insert",
                    details={"error": str(e)},
                ) from e
            recorded_card_id = str(card.id)

        logger.warning(
            "Card rejected as duplicate",
            extra={
                "stage": collision.stage.value,
                "score": collision.score,
                "policy": self.settings.duplicate_policy,
                "recorded_card_id": recorded_card_id,
            },
        )
        raise DuplicateCardError(
            stage=collision.stage.value,
            score=collision.score,
            collision_point_id=str(collision_point_id) if collision_point_id else None,
            recorded_card_id=recorded_card_id,
        )

    async def _compensate_vector(self, point_id: UUID) -> None:
        try:
            await self.vector_store.delete_points([point_id])
        except StoreError as e:
            log_exception_with_context(
                logger,
                "Compensating vector delete failed, vector left orphaned",
                e,
                point_id=point_id,
            )
