"""
Card validation utilities.

Business logic validation not covered by Pydantic models.

Dependencies: cardbase.models.card
System role: Card request validation
"""

from cardbase.core.exceptions import CardValidationError
from cardbase.models.card import SearchCardRequest


def validate_search(request: SearchCardRequest) -> None:
    """
    Validate search request.

    Raises:
        CardValidationError: Query is whitespace-only
    """
    if not request.content.strip():
        raise CardValidationError("Search content cannot be empty", field="content")
