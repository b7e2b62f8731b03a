"""
Exception hierarchy for the card service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CardServiceException(Exception):
    """Base exception for all card service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class CardValidationError(CardServiceException):
    """Raised when submitted card input fails validation."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DuplicateCardError(CardServiceException):
    """Raised when submitted content collides with an existing card."""

    def __init__(
        self,
        stage: str,
        score: float,
        collision_point_id: str | None = None,
        recorded_card_id: str | None = None,
    ) -> None:
        """
        Initialize duplicate error.

        Args:
            stage: Dedup stage that detected the collision (lexical, semantic)
            score: Similarity score that crossed the threshold
            collision_point_id: Point ID of the existing card, if it has one
            recorded_card_id: ID of the audit row written for the rejected card
        """
        self.stage = stage
        self.score = score
        self.collision_point_id = collision_point_id
        self.recorded_card_id = recorded_card_id
        super().__init__(
            "Card already exists",
            {
                "stage": stage,
                "score": score,
                "collision_point_id": collision_point_id,
                "recorded_card_id": recorded_card_id,
            },
        )


class CardNotFoundError(CardServiceException):
    """Raised when a card cannot be found."""

    def __init__(self, card_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["card_id"] = card_id
        super().__init__(f"Card not found: {card_id}", details)


class AuthenticationRequiredError(CardServiceException):
    """Raised when an operation needs a signed-in user and none is present."""

    pass


class NotCardAuthorError(CardServiceException):
    """Raised when someone other than the author tries to modify a card."""

    def __init__(self, card_id: str, requester_id: str) -> None:
        super().__init__(
            "Only the author of a card may delete it",
            {"card_id": card_id, "requester_id": requester_id},
        )


class CardAccessForbiddenError(CardServiceException):
    """Raised when a signed-in user reads another user's private card."""

    def __init__(self, card_id: str) -> None:
        super().__init__(
            "You are not authorized to view this card",
            {"card_id": card_id},
        )


class StoreError(CardServiceException):
    """Base exception for backend (store or network) failures."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store error.

        Args:
            message: Error message
            operation: Operation that failed (insert, upsert, query, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class MetadataStoreError(StoreError):
    """Raised when relational metadata store operations fail."""

    pass


class LexicalSearchError(StoreError):
    """Raised when full-text search fails."""

    pass


class VectorStoreError(StoreError):
    """Raised when vector store operations fail."""

    pass


class EmbeddingError(StoreError):
    """Raised when embedding generation fails."""

    pass
