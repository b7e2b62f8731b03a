"""
HTTP middleware for request tracing and access logging.

Dependencies: fastapi, starlette, cardbase.observability
System role: Per-request observability for the card API
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cardbase.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access log line per request, with status and latency."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        context = {"method": request.method, "path": request.url.path}

        try:
            response: Response = await call_next(request)
        except Exception as e:
            context["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 2)
            context["error_type"] = type(e).__name__
            logger.exception(f"{request.method} {request.url.path} failed", extra=context)
            raise

        context["status_code"] = response.status_code
        context["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} {response.status_code}",
            extra=context,
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID for the request and echo it in the response.

    Must wrap RequestLoggingMiddleware so access log lines carry the ID.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
