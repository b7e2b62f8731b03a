"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, cardbase.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardbase.api.deps.dependencies import get_service_cache
from cardbase.api.routers.cards.card_error_handling import card_exception_handler
from cardbase.boundary.db import dispose_engine
from cardbase.configs import get_settings
from cardbase.core.exceptions import CardServiceException
from cardbase.observability.logger import configure_logging
from cardbase.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)
from .routers import cards_router, health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging(get_settings().log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    # Trigger property access to load instances
    _ = cache.worker_pool
    _ = cache.embedding_service
    _ = cache.vector_store
    _ = cache.html_refresher
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    await cache.close()
    cache.clear()
    await dispose_engine()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Cardbase API",
        description="Card ingestion with near-duplicate detection and hybrid search",
        version="0.1.0",
        debug=get_settings().debug,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Errors raised in dependencies (identity) bypass the route decorators
    app.add_exception_handler(CardServiceException, card_exception_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(cards_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "cardbase.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
