"""
Caller identity dependencies.

The session gateway in front of this service authenticates users and
forwards the user ID in a header (AUTH_USER_HEADER, default X-User-Id).

Dependencies: fastapi, cardbase.configs
System role: Identity resolution for card endpoints
"""

import uuid
from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from cardbase.configs import get_settings
from cardbase.core.exceptions import AuthenticationRequiredError
from cardbase.models.identity import UserIdentity

user_header = APIKeyHeader(
    name=get_settings().auth.user_header,
    auto_error=False,  # Anonymous access is allowed on read endpoints
    description="User ID forwarded by the session gateway",
)


async def get_optional_user(
    user_id: Optional[str] = Security(user_header),
) -> Optional[UserIdentity]:
    """
    Resolve the caller, if signed in.

    Raises:
        AuthenticationRequiredError: Header present but not a valid user ID

    Returns:
        UserIdentity, or None for anonymous callers
    """
    if not user_id:
        return None
    try:
        return UserIdentity(id=uuid.UUID(user_id))
    except ValueError as e:
        raise AuthenticationRequiredError("Invalid user identity") from e


async def require_user(
    user: Optional[UserIdentity] = Security(get_optional_user),
) -> UserIdentity:
    """
    Resolve the caller, who must be signed in.

    Raises:
        AuthenticationRequiredError: No user identity on the request
    """
    if user is None:
        raise AuthenticationRequiredError("You must be signed in")
    return user
