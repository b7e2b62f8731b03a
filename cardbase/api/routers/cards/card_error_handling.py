"""
Card error handling utilities.

Maps domain exceptions to HTTP responses with a ``{"message": ...}`` body.
Client mistakes are 4xx; backend and network failures are 503.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import Request, status
from fastapi.responses import JSONResponse

from cardbase.core.exceptions import (
    AuthenticationRequiredError,
    CardAccessForbiddenError,
    CardNotFoundError,
    CardServiceException,
    CardValidationError,
    DuplicateCardError,
    NotCardAuthorError,
    StoreError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_STATUS_BY_ERROR: list[tuple[type[CardServiceException], int]] = [
    (CardValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateCardError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (NotCardAuthorError, status.HTTP_401_UNAUTHORIZED),
    (CardAccessForbiddenError, status.HTTP_403_FORBIDDEN),
    (CardNotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: CardServiceException) -> int:
    """HTTP status for a domain exception (500 when unmapped)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def card_error_response(exc: CardServiceException) -> JSONResponse:
    """Log a domain exception and build its JSON response."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "Card backend failure",
            extra={"error_type": type(exc).__name__, "error": str(exc)},
        )
        message = "Service temporarily unavailable" if status_code == 503 else exc.message
    else:
        logger.warning(
            "Card request rejected",
            extra={"error_type": type(exc).__name__, "error": str(exc)},
        )
        message = exc.message
    return JSONResponse(status_code=status_code, content={"message": message})


async def card_exception_handler(request: Request, exc: CardServiceException) -> JSONResponse:
    """App-level handler for errors raised outside route bodies (dependencies)."""
    return card_error_response(exc)


def handle_card_errors(func: F) -> F:
    """
    Decorator to handle card errors and transform them into JSON responses.

    This centralizes:
    - Logging of errors with context
    - Mapping domain exceptions to HTTP status codes
    - Ensuring uniform ``{"message": ...}`` error bodies
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except CardServiceException as e:
            return card_error_response(e)

        except Exception as e:
            logger.exception(
                "Unexpected failure in card operation",
                extra={"error": str(e)},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "An internal error occurred"},
            )

    return wrapper  # type: ignore
