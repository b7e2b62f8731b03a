"""
Observability package.

Logging configuration, structured logging helpers, correlation ID
propagation and request middleware.
"""

from cardbase.observability.logger import configure_logging
from cardbase.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
