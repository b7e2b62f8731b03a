"""
API request/response models.

Dependencies: pydantic
System role: HTTP contracts for the card API
"""

from cardbase.models.card import (
    CardCountResponse,
    CardResponse,
    CreateCardRequest,
    DeleteCardRequest,
    ScoreCard,
    SearchCardRequest,
    SearchCardResponse,
)
from cardbase.models.common import MessageResponse
from cardbase.models.identity import UserIdentity

__all__ = [
    "CardCountResponse",
    "CardResponse",
    "CreateCardRequest",
    "DeleteCardRequest",
    "MessageResponse",
    "ScoreCard",
    "SearchCardRequest",
    "SearchCardResponse",
    "UserIdentity",
]
