"""
Reconciliation between the metadata store and the vector index.

The two stores are written without a shared transaction, so either can
end up holding an entry the other lacks. This sweep reports both kinds of
drift and can delete orphaned vectors. Cards missing their vector are
only reported.

Ingestion upserts a vector before its card row commits. Points younger
than the grace window are therefore left alone, and every candidate is
checked against the metadata store again right before deletion.

Dependencies: sqlalchemy, cardbase.boundary.db, cardbase.boundary.vdb
System role: Orphan sweep for dual-store drift
"""

import logging
import time
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.boundary.vdb.vector_schemas import VectorIndex

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Drift found by a sweep."""

    orphaned_point_ids: list[UUID] = field(default_factory=list)
    missing_vector_point_ids: list[UUID] = field(default_factory=list)
    recent_point_ids: list[UUID] = field(default_factory=list)
    deleted_point_count: int = 0

    @property
    def in_sync(self) -> bool:
        return not self.orphaned_point_ids and not self.missing_vector_point_ids


class ReconciliationService:
    """Compares point IDs in both stores."""

    def __init__(
        self,
        db: AsyncSession,
        vector_store: VectorIndex,
        grace_seconds: float = 300.0,
    ) -> None:
        """
        Args:
            db: Async database session
            vector_store: Vector index to sweep
            grace_seconds: Minimum age of a point before it may count as orphaned
        """
        self.db = db
        self.vector_store = vector_store
        self.grace_seconds = grace_seconds

    async def reconcile(self, apply: bool = False) -> ReconciliationReport:
        """
        Find drift and optionally delete orphaned vectors.

        Points without an upsert time predate the timestamp and are always
        old enough.

        Args:
            apply: Delete vectors that no card references

        Returns:
            ReconciliationReport: Orphaned, missing and too-recent point IDs
        """
        points = await self.vector_store.list_points()
        card_ids = await card_crud.get_all_point_ids(self.db)
        cutoff = time.time() - self.grace_seconds

        report = ReconciliationReport(
            missing_vector_point_ids=sorted(
                card_ids - {point.point_id for point in points}, key=str
            ),
        )
        for point in sorted(points, key=lambda p: str(p.point_id)):
            if point.point_id in card_ids:
                continue
            if point.created_at is not None and point.created_at > cutoff:
                report.recent_point_ids.append(point.point_id)
            else:
                report.orphaned_point_ids.append(point.point_id)

        if apply and report.orphaned_point_ids:
            # A card may have committed since the first read
            claimed = await card_crud.get_existing_point_ids(
                self.db, report.orphaned_point_ids
            )
            report.orphaned_point_ids = [
                point_id for point_id in report.orphaned_point_ids if point_id not in claimed
            ]
            if report.orphaned_point_ids:
                await self.vector_store.delete_points(report.orphaned_point_ids)
                report.deleted_point_count = len(report.orphaned_point_ids)

        logger.info(
            "Reconciliation finished",
            extra={
                "orphaned": len(report.orphaned_point_ids),
                "missing_vectors": len(report.missing_vector_point_ids),
                "recent": len(report.recent_point_ids),
                "deleted": report.deleted_point_count,
            },
        )
        return report
