"""
Application services package.

Exports:
  - CardService: Card lookup and count
  - DedupChecker: Two-stage duplicate detection
  - DeletionService: Author-only card deletion
  - HtmlRefresher: Background HTML refresh on collision
  - IngestionService: Card creation
  - ReconciliationService: Dual-store orphan sweep
  - RetrievalService: Semantic and full-text search
"""

from cardbase.application.services.card_service import CardService
from cardbase.application.services.dedup_checker import DedupChecker
from cardbase.application.services.deletion_service import DeletionService
from cardbase.application.services.html_refresher import HtmlRefresher
from cardbase.application.services.ingestion_service import IngestionService
from cardbase.application.services.reconciliation_service import (
    ReconciliationReport,
    ReconciliationService,
)
from cardbase.application.services.retrieval_service import (
    RetrievalService,
    ScoredCard,
    SearchPage,
)

__all__ = [
    "CardService",
    "DedupChecker",
    "DeletionService",
    "HtmlRefresher",
    "IngestionService",
    "ReconciliationReport",
    "ReconciliationService",
    "RetrievalService",
    "ScoredCard",
    "SearchPage",
]
