"""
Card CRUD operations.

Metadata store and lexical index queries for CardModel: batch lookups by
vector point ID with visibility filtering, HTML refresh by point ID, and
PostgreSQL full-text search scored with pg_trgm word similarity.

Dependencies: sqlalchemy, cardbase.boundary.db.models
System role: Card persistence and full-text retrieval
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import ColumnElement, and_, cast, func, literal, or_, select, update
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.base_crud import BaseCRUD
from cardbase.boundary.db.models.card_model import (
    FULL_TEXT_CONFIG,
    CardModel,
    content_tsvector,
)


@dataclass(frozen=True)
class CardFilters:
    """
    Caller-supplied allow-lists narrowing search results.

    An empty or missing list means no restriction on that field.
    """

    oc_file_paths: list[str] | None = None
    links: list[str] | None = None

    def clauses(self) -> list[ColumnElement[bool]]:
        """SQL conditions for the non-empty allow-lists."""
        conditions: list[ColumnElement[bool]] = []
        if self.oc_file_paths:
            conditions.append(CardModel.oc_file_path.in_(self.oc_file_paths))
        if self.links:
            conditions.append(CardModel.link.in_(self.links))
        return conditions


@dataclass(frozen=True)
class FullTextHit:
    """A card with its lexical score."""

    card: CardModel
    score: float


@dataclass(frozen=True)
class FullTextPage:
    """One page of lexical search results."""

    hits: list[FullTextHit]
    total_pages: int


def visibility_clause(current_user_id: UUID | None) -> ColumnElement[bool]:
    """
    Rows the caller may read: public cards, plus their own private cards.

    Args:
        current_user_id: Requesting user, None when anonymous

    Returns:
        SQL condition
    """
    if current_user_id is None:
        return CardModel.private.is_(False)
    return or_(CardModel.private.is_(False), CardModel.author_id == current_user_id)


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for ``count`` rows."""
    return math.ceil(count / page_size) if count else 0


class CardCRUD(BaseCRUD[CardModel]):
    """
    CRUD operations for CardModel.

    Extends BaseCRUD with point-ID lookups used by the semantic join and the
    reconciliation sweep, and the full-text search used by both retrieval
    and the lexical dedup stage.
    """

    def __init__(self) -> None:
        """Initialize CardCRUD with CardModel."""
        super().__init__(CardModel)

    async def get_visible_by_point_ids(
        self,
        session: AsyncSession,
        point_ids: Sequence[UUID],
        current_user_id: UUID | None,
        filters: CardFilters | None = None,
    ) -> Sequence[CardModel]:
        """
        Batch-fetch cards owning the given vector points.

        Row order is unspecified; callers re-associate rows by point ID.

        Args:
            session: Async database session
            point_ids: Vector point IDs
            current_user_id: Requesting user for visibility filtering
            filters: Optional oc_file_path / link allow-lists

        Returns:
            Sequence of visible CardModels whose vector_point_id is in point_ids
        """
        if not point_ids:
            return []
        filters = filters or CardFilters()
        stmt = select(CardModel).where(
            CardModel.vector_point_id.in_(list(point_ids)),
            visibility_clause(current_user_id),
            *filters.clauses(),
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_existing_point_ids(
        self,
        session: AsyncSession,
        point_ids: Iterable[UUID],
    ) -> set[UUID]:
        """
        Return which of ``point_ids`` are referenced by any card row.

        No visibility filtering; used to tell orphaned vectors apart from
        rows the caller may not see.

        Args:
            session: Async database session
            point_ids: Vector point IDs to check

        Returns:
            set[UUID]: Subset of point_ids that have a metadata row
        """
        ids = list(point_ids)
        if not ids:
            return set()
        stmt = select(CardModel.vector_point_id).where(CardModel.vector_point_id.in_(ids))
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def get_all_point_ids(self, session: AsyncSession) -> set[UUID]:
        """
        Return every vector point ID referenced by a card.

        Args:
            session: Async database session

        Returns:
            set[UUID]: All non-NULL vector_point_id values
        """
        stmt = select(CardModel.vector_point_id).where(CardModel.vector_point_id.is_not(None))
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def count_searchable(
        self,
        session: AsyncSession,
        current_user_id: UUID | None,
        filters: CardFilters | None = None,
    ) -> int:
        """
        Count cards that can appear in semantic search for this caller.

        Args:
            session: Async database session
            current_user_id: Requesting user for visibility filtering
            filters: Optional oc_file_path / link allow-lists

        Returns:
            int: Visible cards owning a vector entry
        """
        filters = filters or CardFilters()
        stmt = (
            select(func.count())
            .select_from(CardModel)
            .where(
                CardModel.vector_point_id.is_not(None),
                visibility_clause(current_user_id),
                *filters.clauses(),
            )
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def update_html_by_point_id(
        self,
        session: AsyncSession,
        point_id: UUID,
        card_html: str | None,
    ) -> int:
        """
        Overwrite the HTML of the card owning ``point_id``.

        Args:
            session: Async database session
            point_id: Vector point ID of the card to refresh
            card_html: New rendering (None clears it)

        Returns:
            int: Number of rows updated (0 or 1)
        """
        stmt = (
            update(CardModel)
            .where(CardModel.vector_point_id == point_id)
            .values(card_html=card_html)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def search_full_text(
        self,
        session: AsyncSession,
        query: str,
        page: int,
        page_size: int,
        current_user_id: UUID | None = None,
        filters: CardFilters | None = None,
        text_config: str = FULL_TEXT_CONFIG,
    ) -> FullTextPage:
        """
        Ranked full-text search over card content.

        A card matches when its tsvector matches the plain tsquery of
        ``query`` or when pg_trgm word similarity passes the operator
        threshold. Score is ``word_similarity(query, content)`` in [0, 1].
        Among equal scores, cards owning a vector rank first, so recorded
        duplicates never shadow the card they duplicated.

        Args:
            session: Async database session
            query: Search text (or new card content during dedup)
            page: 1-indexed page number
            page_size: Results per page
            current_user_id: Requesting user for visibility filtering
            filters: Optional oc_file_path / link allow-lists
            text_config: PostgreSQL text search configuration

        Returns:
            FullTextPage: Hits ordered by descending score, plus total pages
        """
        filters = filters or CardFilters()
        tsquery = func.plainto_tsquery(cast(text_config, REGCONFIG), query)
        matches = or_(
            content_tsvector().op("@@")(tsquery),
            literal(query).op("<%")(CardModel.content),
        )
        conditions = and_(matches, visibility_clause(current_user_id), *filters.clauses())
        score = func.word_similarity(query, CardModel.content).label("score")

        stmt = (
            select(CardModel, score)
            .where(conditions)
            .order_by(
                score.desc(),
                CardModel.vector_point_id.is_(None),
                CardModel.created_at.desc(),
            )
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await session.execute(stmt)
        hits = [FullTextHit(card=row[0], score=float(row[1])) for row in result.all()]

        count_stmt = select(func.count()).select_from(CardModel).where(conditions)
        count = int((await session.execute(count_stmt)).scalar_one())

        return FullTextPage(hits=hits, total_pages=total_pages(count, page_size))


card_crud = CardCRUD()
