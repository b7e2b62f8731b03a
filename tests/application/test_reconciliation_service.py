"""
Test suite for ReconciliationService.

System role: Verification of the dual-store orphan sweep
"""

import time
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.reconciliation_service import ReconciliationService
from cardbase.boundary.vdb.vector_schemas import StoredPoint

CARD_CRUD = "cardbase.application.services.reconciliation_service.card_crud"


@pytest.fixture
def point_ids() -> dict[str, uuid.UUID]:
    return {name: uuid.uuid4() for name in ("shared", "orphan", "missing", "fresh")}


@pytest.fixture
def service(mock_vector_store, point_ids) -> ReconciliationService:
    mock_vector_store.list_points.return_value = [
        StoredPoint(point_id=point_ids["shared"], created_at=time.time() - 3600),
        StoredPoint(point_id=point_ids["orphan"]),
    ]
    return ReconciliationService(
        db=AsyncMock(spec=AsyncSession),
        vector_store=mock_vector_store,
        grace_seconds=300,
    )


@pytest.mark.asyncio
async def test_report_only(service, mock_vector_store, point_ids) -> None:
    with patch(
        f"{CARD_CRUD}.get_all_point_ids",
        new=AsyncMock(return_value={point_ids["shared"], point_ids["missing"]}),
    ):
        report = await service.reconcile(apply=False)

    assert report.orphaned_point_ids == [point_ids["orphan"]]
    assert report.missing_vector_point_ids == [point_ids["missing"]]
    assert report.deleted_point_count == 0
    assert not report.in_sync
    mock_vector_store.delete_points.assert_not_called()


@pytest.mark.asyncio
async def test_apply_deletes_orphans(service, mock_vector_store, point_ids) -> None:
    with patch(
        f"{CARD_CRUD}.get_all_point_ids",
        new=AsyncMock(return_value={point_ids["shared"]}),
    ), patch(f"{CARD_CRUD}.get_existing_point_ids", new=AsyncMock(return_value=set())):
        report = await service.reconcile(apply=True)

    mock_vector_store.delete_points.assert_awaited_once_with([point_ids["orphan"]])
    assert report.deleted_point_count == 1


@pytest.mark.asyncio
async def test_points_inside_grace_window_are_kept(service, mock_vector_store, point_ids) -> None:
    # Vector upserted by an in-flight create whose row has not committed yet
    mock_vector_store.list_points.return_value = [
        StoredPoint(point_id=point_ids["fresh"], created_at=time.time()),
    ]
    with patch(f"{CARD_CRUD}.get_all_point_ids", new=AsyncMock(return_value=set())):
        report = await service.reconcile(apply=True)

    assert report.recent_point_ids == [point_ids["fresh"]]
    assert report.orphaned_point_ids == []
    assert report.in_sync
    mock_vector_store.delete_points.assert_not_called()


@pytest.mark.asyncio
async def test_apply_skips_points_claimed_since_first_read(
    service, mock_vector_store, point_ids
) -> None:
    with patch(
        f"{CARD_CRUD}.get_all_point_ids",
        new=AsyncMock(return_value={point_ids["shared"]}),
    ), patch(
        f"{CARD_CRUD}.get_existing_point_ids",
        new=AsyncMock(return_value={point_ids["orphan"]}),
    ):
        report = await service.reconcile(apply=True)

    mock_vector_store.delete_points.assert_not_called()
    assert report.orphaned_point_ids == []
    assert report.deleted_point_count == 0


@pytest.mark.asyncio
async def test_in_sync(service, point_ids) -> None:
    with patch(
        f"{CARD_CRUD}.get_all_point_ids",
        new=AsyncMock(return_value={point_ids["shared"], point_ids["orphan"]}),
    ):
        report = await service.reconcile(apply=True)

    assert report.in_sync
    assert report.deleted_point_count == 0
