"""
Request correlation IDs.

The ID lives in a ContextVar, so it follows the request through awaits
and into tasks created while handling it (including background HTML
refreshes). Inbound IDs from callers are reused when they look sane.

Dependencies: contextvars
System role: Request tracing across log records
"""

import re
import uuid
from contextvars import ContextVar

_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(candidate: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Args:
        candidate: ID supplied by the caller; replaced with a fresh UUID
            when missing or malformed

    Returns:
        str: The ID now in effect
    """
    value = candidate if candidate and _ACCEPTED_ID.match(candidate) else uuid.uuid4().hex
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID, or an empty string outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
