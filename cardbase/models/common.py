"""
Shared response schemas.

Dependencies: pydantic
System role: Common API contracts
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Error or status body returned by the card API."""

    message: str = Field(..., description="Human-readable message")
