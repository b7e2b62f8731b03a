"""
Card retrieval orchestrator.

Semantic mode ranks with the vector index and joins metadata afterwards;
lexical mode delegates ranking and join to the full-text index. Both
return the same page shape.

Dependencies: sqlalchemy, cardbase.boundary.db, cardbase.boundary.vdb
System role: Card search use case
"""

import logging
import math
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.card_crud import CardFilters, card_crud, total_pages
from cardbase.boundary.db.models.card_model import CardModel
from cardbase.boundary.vdb.embeddings_wrapper import EmbeddingService
from cardbase.boundary.vdb.vector_schemas import VectorIndex, VectorQueryFilter
from cardbase.configs.cards import CardSettings
from cardbase.core.exceptions import (
    CardValidationError,
    LexicalSearchError,
    MetadataStoreError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredCard:
    """A card with the score that ranked it."""

    card: CardModel
    score: float


@dataclass
class SearchPage:
    """
    One page of search results.

    Attributes:
        results: Hits in rank order
        total_pages: Pages available for this query
        orphaned_point_ids: Ranked vector points with no metadata row
            (semantic mode with orphan_policy 'warn' only)
    """

    results: list[ScoredCard]
    total_pages: int
    orphaned_point_ids: list[UUID] | None = field(default=None)


class RetrievalService:
    """Card search orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        vector_store: VectorIndex,
        embedding_service: EmbeddingService,
        settings: CardSettings,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            db: Async SQLAlchemy session
            vector_store: Vector index for semantic ranking
            embedding_service: Embeds the query text
            settings: Page size and orphan policy
        """
        self.db = db
        self.vector_store = vector_store
        self.embedding_service = embedding_service
        self.settings = settings

    @staticmethod
    def _check_page(page: int) -> None:
        if page < 1:
            raise CardValidationError("Page must be at least 1", field="page")

    async def search_semantic(
        self,
        query: str,
        page: int = 1,
        current_user_id: UUID | None = None,
        filters: CardFilters | None = None,
    ) -> SearchPage:
        """
        Semantic search.

        Visibility and the allow-lists are applied by the vector index
        while ranking, so every page is filled with eligible neighbours.
        Results follow the vector index ranking regardless of the order in
        which metadata rows come back. Neighbours with no metadata row are
        orphans and are handled per ``orphan_policy``. The page count is
        capped at the deepest rank the backend can reach.

        Args:
            query: Search text
            page: 1-indexed page number
            current_user_id: Requesting user, None when anonymous
            filters: Optional oc_file_path / link allow-lists

        Returns:
            SearchPage: Ranked hits and total pages

        Raises:
            CardValidationError: Page below 1
            EmbeddingError: Query embedding failed
            VectorStoreError: Vector query failed
            MetadataStoreError: Metadata join failed
        """
        self._check_page(page)
        page_size = self.settings.search_page_size

        filters = filters or CardFilters()

        embedding = await self.embedding_service.embed(query)
        hits = await self.vector_store.query_page(
            embedding,
            page=page,
            page_size=page_size,
            query_filter=VectorQueryFilter(
                viewer_id=current_user_id,
                oc_file_paths=filters.oc_file_paths,
                links=filters.links,
            ),
        )
        point_ids = [hit.point_id for hit in hits]

        try:
            rows = await card_crud.get_visible_by_point_ids(
                self.db, point_ids, current_user_id, filters
            )
            count = await card_crud.count_searchable(self.db, current_user_id, filters)
        except SQLAlchemyError as e:
            raise MetadataStoreError(
                "Failed to join search results",
                operation="select",
                details={"error": str(e)},
            ) from e

        cards_by_point = {row.vector_point_id: row for row in rows}
        results = [
            ScoredCard(card=cards_by_point[hit.point_id], score=hit.score)
            for hit in hits
            if hit.point_id in cards_by_point
        ]

        orphaned: list[UUID] | None = None
        if self.settings.orphan_policy == "warn":
            missing = [pid for pid in point_ids if pid not in cards_by_point]
            try:
                existing = await card_crud.get_existing_point_ids(self.db, missing)
            except SQLAlchemyError as e:
                raise MetadataStoreError(
                    "Failed to check for orphaned vectors",
                    operation="select",
                    details={"error": str(e)},
                ) from e
            orphaned = [pid for pid in missing if pid not in existing]
            if orphaned:
                logger.warning(
                    "Semantic search returned orphaned vectors",
                    extra={"orphan_count": len(orphaned)},
                )

        logger.info(
            "Semantic search completed",
            extra={"page": page, "hits": len(hits), "results": len(results)},
        )
        return SearchPage(
            results=results,
            total_pages=min(
                total_pages(count, page_size),
                math.ceil(self.vector_store.max_top_k / page_size),
            ),
            orphaned_point_ids=orphaned,
        )

    async def search_full_text(
        self,
        query: str,
        page: int = 1,
        current_user_id: UUID | None = None,
        filters: CardFilters | None = None,
    ) -> SearchPage:
        """
        Lexical search.

        Args:
            query: Search text
            page: 1-indexed page number
            current_user_id: Requesting user, None when anonymous
            filters: Optional oc_file_path / link allow-lists

        Returns:
            SearchPage: Ranked hits and total pages

        Raises:
            CardValidationError: Page below 1
            LexicalSearchError: Full-text query failed
        """
        self._check_page(page)
        try:
            found = await card_crud.search_full_text(
                self.db,
                query,
                page=page,
                page_size=self.settings.search_page_size,
                current_user_id=current_user_id,
                filters=filters,
            )
        except SQLAlchemyError as e:
            raise LexicalSearchError(
                "Full-text search failed",
                operation="search",
                details={"error": str(e)},
            ) from e

        return SearchPage(
            results=[ScoredCard(card=hit.card, score=hit.score) for hit in found.hits],
            total_pages=found.total_pages,
        )
