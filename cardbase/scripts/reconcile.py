"""
Orphan sweep between the metadata store and the vector index.

Usage:
    python -m cardbase.scripts.reconcile          # report only
    python -m cardbase.scripts.reconcile --apply  # also delete orphaned vectors

Exit code is 1 when drift remains after the run.

Dependencies: cardbase.application, cardbase.boundary
System role: Operator tool for dual-store consistency
"""

import argparse
import asyncio
import logging
import sys

from cardbase.application.services.reconciliation_service import (
    ReconciliationReport,
    ReconciliationService,
)
from cardbase.boundary.db import dispose_engine, get_async_session_factory
from cardbase.boundary.vdb.embeddings_wrapper import EmbeddingService
from cardbase.boundary.vdb.vector_store_factory import get_vector_store
from cardbase.configs import get_settings
from cardbase.core.worker_pool import WorkerPool
from cardbase.observability.logger import configure_logging

logger = logging.getLogger(__name__)


async def run(apply: bool) -> ReconciliationReport:
    """
    Run one sweep with process-local collaborators.

    Args:
        apply: Delete orphaned vectors

    Returns:
        ReconciliationReport: Drift found
    """
    settings = get_settings()
    pool = WorkerPool(max_workers=settings.worker_pool.max_workers)
    try:
        embedding_service = EmbeddingService(
            model=settings.embedding.model,
            dimension=settings.embedding.dimension,
            max_retries=settings.embedding.max_retries,
        )
        vector_store = get_vector_store(pool, embedding_service, settings)
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            return await ReconciliationService(
                session,
                vector_store,
                grace_seconds=settings.cards.reconcile_grace_seconds,
            ).reconcile(apply=apply)
    finally:
        pool.shutdown(wait=True)
        await dispose_engine()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile card rows and vectors")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Delete vectors that no card references",
    )
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    report = asyncio.run(run(args.apply))

    for point_id in report.orphaned_point_ids:
        print(f"orphaned vector: {point_id}")
    for point_id in report.missing_vector_point_ids:
        print(f"card without vector: {point_id}")
    for point_id in report.recent_point_ids:
        print(f"unreferenced vector inside grace window: {point_id}")
    print(
        f"orphaned={len(report.orphaned_point_ids)} "
        f"missing={len(report.missing_vector_point_ids)} "
        f"deleted={report.deleted_point_count}"
    )

    remaining = len(report.orphaned_point_ids) - report.deleted_point_count
    return 0 if remaining == 0 and not report.missing_vector_point_ids else 1


if __name__ == "__main__":
    sys.exit(main())
