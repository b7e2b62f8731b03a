"""
Test suite for RetrievalService.

Tests rank preservation across the metadata join, orphan policies,
pagination and the full-text delegation.

System role: Verification of card search orchestration
"""

import random
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.retrieval_service import RetrievalService
from cardbase.boundary.db.CRUD.card_crud import CardFilters, FullTextHit, FullTextPage
from cardbase.boundary.vdb.vector_schemas import VectorHit, VectorQueryFilter
from cardbase.core.exceptions import CardValidationError
from tests.factories import make_card

CARD_CRUD = "cardbase.application.services.retrieval_service.card_crud"


@pytest.fixture
def retrieval_service(card_settings, mock_vector_store, mock_embedding_service):
    return RetrievalService(
        db=AsyncMock(spec=AsyncSession),
        vector_store=mock_vector_store,
        embedding_service=mock_embedding_service,
        settings=card_settings,
    )


def ranked_hits(count: int) -> list[VectorHit]:
    return [
        VectorHit(point_id=uuid.uuid4(), score=0.9 - i * 0.1)
        for i in range(count)
    ]


class TestSemanticSearch:
    """Vector-ranked search with metadata join."""

    @pytest.mark.asyncio
    async def test_preserves_vector_rank_order(self, retrieval_service, mock_vector_store) -> None:
        hits = ranked_hits(3)
        mock_vector_store.query_page.return_value = hits
        rows = [make_card(vector_point_id=hit.point_id) for hit in hits]
        shuffled = list(reversed(rows))

        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=shuffled)), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=3)
        ):
            page = await retrieval_service.search_semantic("query text")

        assert [result.card.vector_point_id for result in page.results] == [h.point_id for h in hits]
        assert [result.score for result in page.results] == [h.score for h in hits]
        assert page.total_pages == 1
        assert page.orphaned_point_ids is None

    @pytest.mark.asyncio
    async def test_rank_order_survives_random_fetch_order(
        self, retrieval_service, mock_vector_store
    ) -> None:
        hits = ranked_hits(8)
        mock_vector_store.query_page.return_value = hits
        rows = [make_card(vector_point_id=hit.point_id) for hit in hits]
        random.Random(7).shuffle(rows)

        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=rows)), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=8)
        ):
            page = await retrieval_service.search_semantic("query text")

        scores = [result.score for result in page.results]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_visibility_and_filters_applied_while_ranking(
        self, retrieval_service, mock_vector_store, user_id
    ) -> None:
        filters = CardFilters(oc_file_paths=["b.docx"], links=["https://example.com"])
        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=[])), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=0)
        ):
            await retrieval_service.search_semantic("query")
            assert mock_vector_store.query_page.call_args.kwargs["query_filter"] == VectorQueryFilter()

            await retrieval_service.search_semantic(
                "query", current_user_id=user_id, filters=filters
            )
            assert mock_vector_store.query_page.call_args.kwargs["query_filter"] == VectorQueryFilter(
                viewer_id=user_id,
                oc_file_paths=["b.docx"],
                links=["https://example.com"],
            )

    @pytest.mark.asyncio
    async def test_skip_policy_drops_missing_rows(self, retrieval_service, mock_vector_store) -> None:
        hits = ranked_hits(3)
        mock_vector_store.query_page.return_value = hits
        rows = [make_card(vector_point_id=hits[0].point_id), make_card(vector_point_id=hits[2].point_id)]
        existing = AsyncMock()

        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=rows)), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=2)
        ), patch(f"{CARD_CRUD}.get_existing_point_ids", new=existing):
            page = await retrieval_service.search_semantic("query")

        assert [r.card.vector_point_id for r in page.results] == [hits[0].point_id, hits[2].point_id]
        assert page.orphaned_point_ids is None
        existing.assert_not_called()

    @pytest.mark.asyncio
    async def test_warn_policy_reports_only_true_orphans(
        self, retrieval_service, mock_vector_store
    ) -> None:
        retrieval_service.settings = retrieval_service.settings.model_copy(
            update={"orphan_policy": "warn"}
        )
        hits = ranked_hits(3)
        mock_vector_store.query_page.return_value = hits
        visible = [make_card(vector_point_id=hits[0].point_id)]
        # hits[1] belongs to someone else's private card, hits[2] has no row
        existing = AsyncMock(return_value={hits[1].point_id})

        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=visible)), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=1)
        ), patch(f"{CARD_CRUD}.get_existing_point_ids", new=existing):
            page = await retrieval_service.search_semantic("query")

        assert len(page.results) == 1
        assert page.orphaned_point_ids == [hits[2].point_id]
        assert existing.call_args.args[1] == [hits[1].point_id, hits[2].point_id]

    @pytest.mark.asyncio
    async def test_total_pages_from_searchable_count(
        self, retrieval_service, mock_vector_store
    ) -> None:
        filters = CardFilters(oc_file_paths=["a.docx"])
        count = AsyncMock(return_value=21)
        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=[])), patch(
            f"{CARD_CRUD}.count_searchable", new=count
        ):
            page = await retrieval_service.search_semantic("query", page=2, filters=filters)

        assert page.total_pages == 3
        assert count.call_args.args[2] is filters
        assert mock_vector_store.query_page.call_args.kwargs["page"] == 2
        assert mock_vector_store.query_page.call_args.kwargs["page_size"] == 10

    @pytest.mark.asyncio
    async def test_total_pages_capped_at_backend_depth(
        self, retrieval_service, mock_vector_store
    ) -> None:
        mock_vector_store.max_top_k = 50
        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=[])), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=500)
        ):
            page = await retrieval_service.search_semantic("query")

        assert page.total_pages == 5

    @pytest.mark.asyncio
    async def test_total_pages_includes_partial_last_page_at_backend_depth(
        self, retrieval_service, mock_vector_store
    ) -> None:
        retrieval_service.settings = retrieval_service.settings.model_copy(
            update={"search_page_size": 5}
        )
        mock_vector_store.max_top_k = 12
        with patch(f"{CARD_CRUD}.get_visible_by_point_ids", new=AsyncMock(return_value=[])), patch(
            f"{CARD_CRUD}.count_searchable", new=AsyncMock(return_value=40)
        ):
            page = await retrieval_service.search_semantic("query")

        # ranks 11 and 12 still form a third page
        assert page.total_pages == 3

    @pytest.mark.asyncio
    async def test_page_zero_rejected(self, retrieval_service, mock_embedding_service) -> None:
        with pytest.raises(CardValidationError):
            await retrieval_service.search_semantic("query", page=0)
        mock_embedding_service.embed.assert_not_called()


class TestFullTextSearch:
    """Lexical search delegates ranking and join."""

    @pytest.mark.asyncio
    async def test_returns_backend_page(self, retrieval_service, user_id, mock_embedding_service) -> None:
        cards = [make_card(), make_card()]
        found = FullTextPage(
            hits=[FullTextHit(card=cards[0], score=0.8), FullTextHit(card=cards[1], score=0.4)],
            total_pages=4,
        )
        search = AsyncMock(return_value=found)
        with patch(f"{CARD_CRUD}.search_full_text", new=search):
            page = await retrieval_service.search_full_text("query", page=3, current_user_id=user_id)

        assert [r.card for r in page.results] == cards
        assert page.total_pages == 4
        assert search.call_args.kwargs["page"] == 3
        assert search.call_args.kwargs["current_user_id"] == user_id
        mock_embedding_service.embed.assert_not_called()
