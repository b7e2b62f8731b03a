"""
API dependencies package.

Exports dependency injection factories and identity resolution.
"""

from cardbase.api.deps.auth import get_optional_user, require_user
from cardbase.api.deps.dependencies import (
    ServiceCache,
    get_card_service,
    get_deletion_service,
    get_ingestion_service,
    get_retrieval_service,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_card_service",
    "get_deletion_service",
    "get_ingestion_service",
    "get_optional_user",
    "get_retrieval_service",
    "get_service_cache",
    "require_user",
]
