"""
Dependency injection container.

Factory functions for FastAPI dependencies. Process-wide collaborators
(worker pool, embeddings, vector store, HTML refresher) are cached; services
are built per request around the request's database session.

Dependencies: cardbase.configs, cardbase.application, cardbase.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services import (
    CardService,
    DedupChecker,
    DeletionService,
    HtmlRefresher,
    IngestionService,
    RetrievalService,
)
from cardbase.boundary.db import get_async_db, get_async_session_factory
from cardbase.boundary.vdb.embeddings_wrapper import EmbeddingService
from cardbase.configs import get_settings
from cardbase.core.worker_pool import WorkerPool


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._worker_pool = None
        self._embedding_service = None
        self._vector_store = None
        self._html_refresher = None

    @property
    def worker_pool(self) -> WorkerPool:
        """Get cached worker pool."""
        if self._worker_pool is None:
            settings = get_settings()
            self._worker_pool = WorkerPool(max_workers=settings.worker_pool.max_workers)
        return self._worker_pool

    @property
    def embedding_service(self) -> EmbeddingService:
        """Get cached embedding service."""
        if self._embedding_service is None:
            settings = get_settings()
            self._embedding_service = EmbeddingService(
                model=settings.embedding.model,
                dimension=settings.embedding.dimension,
                max_retries=settings.embedding.max_retries,
            )
        return self._embedding_service

    @property
    def vector_store(self):
        """Get cached vector store."""
        if self._vector_store is None:
            from cardbase.boundary.vdb.vector_store_factory import get_vector_store
            self._vector_store = get_vector_store(
                worker_pool=self.worker_pool,
                embedding_service=self.embedding_service,
            )
        return self._vector_store

    @property
    def html_refresher(self) -> HtmlRefresher:
        """Get cached HTML refresher."""
        if self._html_refresher is None:
            self._html_refresher = HtmlRefresher(
                session_factory=get_async_session_factory(),
                enabled=get_settings().cards.html_refresh_enabled,
            )
        return self._html_refresher

    async def close(self) -> None:
        """Drain background work and release the worker pool."""
        if self._html_refresher is not None:
            await self._html_refresher.drain()
        if self._worker_pool is not None:
            self._worker_pool.shutdown(wait=True)

    def clear(self) -> None:
        """Clear all cached instances."""
        self._worker_pool = None
        self._embedding_service = None
        self._vector_store = None
        self._html_refresher = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_ingestion_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        db: Async database session (injected via Depends)
        cache: Process-wide collaborators

    Returns:
        IngestionService: Service with its dedup checker
    """
    settings = get_settings()
    dedup_checker = DedupChecker(
        db=db,
        vector_store=cache.vector_store,
        embedding_service=cache.embedding_service,
        html_refresher=cache.html_refresher,
        settings=settings.cards,
    )
    return IngestionService(
        db=db,
        dedup_checker=dedup_checker,
        vector_store=cache.vector_store,
        settings=settings.cards,
    )


def get_retrieval_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> RetrievalService:
    """Get retrieval service instance."""
    return RetrievalService(
        db=db,
        vector_store=cache.vector_store,
        embedding_service=cache.embedding_service,
        settings=get_settings().cards,
    )


def get_deletion_service(
    db: AsyncSession = Depends(get_async_db),
    cache: ServiceCache = Depends(get_service_cache),
) -> DeletionService:
    """Get deletion service instance."""
    return DeletionService(db=db, vector_store=cache.vector_store)


def get_card_service(db: AsyncSession = Depends(get_async_db)) -> CardService:
    """Get card lookup service instance."""
    return CardService(db=db)
