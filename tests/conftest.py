"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, card settings, collaborator mocks
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from cardbase.configs.cards import CardSettings


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from cardbase.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def card_settings() -> CardSettings:
    """Card settings with default thresholds, independent of the environment."""
    return CardSettings(
        min_words=70,
        lexical_threshold=0.90,
        semantic_threshold=0.95,
        short_content_chars=200,
        short_content_discount=0.05,
        search_page_size=10,
        duplicate_policy="record",
        orphan_policy="skip",
        html_refresh_enabled=True,
    )


@pytest.fixture
def mock_vector_store() -> AsyncMock:
    """
    Create mock vector index.

    Returns:
        AsyncMock: Vector store with no neighbours by default
    """
    store = AsyncMock()
    store.nearest = AsyncMock(return_value=None)
    store.query_page = AsyncMock(return_value=[])
    store.upsert_point = AsyncMock()
    store.delete_points = AsyncMock()
    store.list_points = AsyncMock(return_value=[])
    store.max_top_k = 100
    return store


@pytest.fixture
def mock_embedding_service() -> MagicMock:
    """Create mock embedding service returning a fixed vector."""
    service = MagicMock()
    service.dimension = 4
    service.embed = AsyncMock(return_value=[0.1, 0.2, 0.3, 0.4])
    return service


@pytest.fixture
def user_id() -> uuid.UUID:
    """Provide a signed-in user's ID."""
    return uuid.uuid4()
