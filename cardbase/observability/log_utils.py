"""
Structured logging helpers.

Log ``extra`` values are flattened to short strings so UUIDs, point
references and long card content never break a formatter or flood a log
line.

Dependencies: logging (stdlib)
System role: Safe context for card pipeline log records
"""

import logging
from typing import Any

MAX_VALUE_CHARS = 200


def safe_log_value(value: Any, max_length: int = MAX_VALUE_CHARS) -> str:
    """
    Render a value for a log record.

    Collections are summarised by size; other values use ``str`` and are
    truncated to ``max_length`` characters.

    Args:
        value: Any value
        max_length: Truncation limit

    Returns:
        str: Printable representation
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}[{len(value)}]"
    if isinstance(value, dict):
        return f"dict[{len(value)}]"

    text = value if isinstance(value, str) else str(value)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}...(+{len(text) - max_length} chars)"


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log a handled exception at ERROR with its traceback and context.

    Used where an error is deliberately not propagated, such as the
    background HTML refresh and the compensating vector delete.

    Args:
        logger: Destination logger
        message: Log message
        exc: The handled exception
        **context: Identifiers for the failed operation
    """
    extra = {key: safe_log_value(value) for key, value in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
