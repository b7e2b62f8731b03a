"""
Caller identity.

Dependencies: pydantic
System role: Authenticated user passed from the API layer to services
"""

import uuid

from pydantic import BaseModel, Field


class UserIdentity(BaseModel):
    """Signed-in user resolved by the authentication dependency."""

    id: uuid.UUID = Field(..., description="Opaque user identifier")
