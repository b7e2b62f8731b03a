"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/vector-store

Dependencies: cardbase.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.api.deps.dependencies import ServiceCache, get_service_cache
from cardbase.boundary.db import get_async_db

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    response: Response,
    db: AsyncSession = Depends(get_async_db),
) -> HealthResponse:
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", message="Database unreachable")
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(
    response: Response,
    cache: ServiceCache = Depends(get_service_cache),
) -> HealthResponse:
    """Vector store health check."""
    if not await cache.vector_store.health_check():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", message="Vector store unreachable")
    return HealthResponse(status="healthy", message="Vector store accessible")
