"""
Two-stage near-duplicate detection.

Stage 1 asks the lexical index for the single best full-text match; stage 2
embeds the content and asks the vector index for the nearest neighbour.
Either stage can short-circuit to a Collision. Only publicly visible cards
take part. A Unique outcome carries the embedding so ingestion does not
embed the content twice.

Dependencies: sqlalchemy, cardbase.boundary.db, cardbase.boundary.vdb
System role: Duplicate gate in front of card ingestion
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.html_refresher import HtmlRefresher
from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.boundary.vdb.embeddings_wrapper import EmbeddingService
from cardbase.boundary.vdb.vector_schemas import VectorIndex, VectorQueryFilter
from cardbase.configs.cards import CardSettings
from cardbase.core.dedup_outcome import Collision, DedupOutcome, DedupStage, Unique
from cardbase.core.exceptions import LexicalSearchError
from cardbase.core.point_ref import Linked, point_ref_from
from cardbase.core.similarity import similarity_passes

logger = logging.getLogger(__name__)


class DedupChecker:
    """Decides whether new content duplicates an existing card."""

    def __init__(
        self,
        db: AsyncSession,
        vector_store: VectorIndex,
        embedding_service: EmbeddingService,
        html_refresher: HtmlRefresher,
        settings: CardSettings,
    ) -> None:
        """
        Args:
            db: Async database session (lexical stage)
            vector_store: Vector index (semantic stage)
            embedding_service: Embeds content for the semantic stage
            html_refresher: Refreshes the existing card's HTML on collision
            settings: Thresholds and discount rule
        """
        self.db = db
        self.vector_store = vector_store
        self.embedding_service = embedding_service
        self.html_refresher = html_refresher
        self.settings = settings

    def _passes(self, score: float, content: str, base_threshold: float) -> bool:
        return similarity_passes(
            score,
            len(content),
            base_threshold,
            short_content_chars=self.settings.short_content_chars,
            discount=self.settings.short_content_discount,
        )

    async def _lexical_stage(self, content: str) -> Collision | None:
        try:
            page = await card_crud.search_full_text(
                self.db, content, page=1, page_size=1, current_user_id=None
            )
        except SQLAlchemyError as e:
            raise LexicalSearchError(
                "Full-text search failed",
                operation="dedup_lexical",
                details={"error": str(e)},
            ) from e

        if not page.hits:
            return None
        top = page.hits[0]
        if not self._passes(top.score, content, self.settings.lexical_threshold):
            return None
        return Collision(
            point=point_ref_from(top.card.vector_point_id),
            stage=DedupStage.LEXICAL,
            score=top.score,
            matched_card_id=top.card.id,
        )

    async def check(self, content: str, card_html: str | None) -> DedupOutcome:
        """
        Run both stages against ``content``.

        On Collision the existing card's HTML refresh is scheduled in the
        background; its failure never affects the outcome.

        Args:
            content: Submitted card text
            card_html: Submitted rendering, written onto the existing card on collision

        Returns:
            DedupOutcome: Unique(embedding) or Collision(point, stage, score)

        Raises:
            LexicalSearchError: If the full-text lookup fails
            EmbeddingError: If embedding fails
            VectorStoreError: If the nearest-neighbour query fails
        """
        collision = await self._lexical_stage(content)

        if collision is None:
            embedding = await self.embedding_service.embed(content)
            nearest = await self.vector_store.nearest(embedding, VectorQueryFilter())
            if nearest is None or not self._passes(
                nearest.score, content, self.settings.semantic_threshold
            ):
                return Unique(embedding=embedding)
            collision = Collision(
                point=Linked(nearest.point_id),
                stage=DedupStage.SEMANTIC,
                score=nearest.score,
            )

        logger.info(
            "Duplicate content detected",
            extra={
                "stage": collision.stage.value,
                "score": collision.score,
                "point": str(collision.point),
            },
        )
        self.html_refresher.schedule(collision.point, card_html)
        return collision
