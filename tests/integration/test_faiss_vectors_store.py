"""
Tests for FAISSVectorsStore with deterministic vectors.

System role: Verification of the local vector index
"""

import uuid

import pytest
from langchain_core.embeddings import FakeEmbeddings

from cardbase.boundary.vdb.faiss_vectors_store import FAISSVectorsStore
from cardbase.boundary.vdb.vector_schemas import (
    StoredPoint,
    VectorPoint,
    VectorQueryFilter,
    build_payload,
)
from cardbase.core.worker_pool import WorkerPool


@pytest.fixture
def pool():
    worker_pool = WorkerPool(max_workers=2)
    yield worker_pool
    worker_pool.shutdown(wait=True)


@pytest.fixture
def store(pool, tmp_path) -> FAISSVectorsStore:
    return FAISSVectorsStore(
        embeddings=FakeEmbeddings(size=3),
        worker_pool=pool,
        dimension=3,
        index_dir=str(tmp_path / "faiss"),
        index_name="cards",
    )


@pytest.mark.asyncio
async def test_nearest_returns_cosine_similarity(store) -> None:
    near, far = uuid.uuid4(), uuid.uuid4()
    await store.upsert_point(VectorPoint(point_id=near, embedding=[1.0, 0.0, 0.0]))
    await store.upsert_point(VectorPoint(point_id=far, embedding=[0.0, 1.0, 0.0]))

    hit = await store.nearest([2.0, 0.0, 0.0])

    assert hit.point_id == near
    assert hit.score == pytest.approx(1.0, abs=1e-5)


@pytest.mark.asyncio
async def test_empty_index_has_no_nearest(store) -> None:
    assert await store.nearest([1.0, 0.0, 0.0]) is None


@pytest.mark.asyncio
async def test_private_vectors_visible_to_their_author_only(store) -> None:
    author, other = uuid.uuid4(), uuid.uuid4()
    private = uuid.uuid4()
    payload = build_payload(True, author)
    await store.upsert_point(
        VectorPoint(point_id=private, embedding=[1.0, 0.0, 0.0], payload=payload)
    )

    assert await store.nearest([1.0, 0.0, 0.0]) is None
    assert await store.nearest([1.0, 0.0, 0.0], VectorQueryFilter(viewer_id=other)) is None
    hit = await store.nearest([1.0, 0.0, 0.0], VectorQueryFilter(viewer_id=author))
    assert hit.point_id == private
    assert hit.payload == payload


@pytest.mark.asyncio
async def test_filtered_page_reaches_lower_ranked_matches(store) -> None:
    author = uuid.uuid4()
    top = [uuid.uuid4() for _ in range(10)]
    for point_id in top:
        await store.upsert_point(
            VectorPoint(
                point_id=point_id,
                embedding=[1.0, 0.0, 0.0],
                payload=build_payload(False, author, oc_file_path="a.docx"),
            )
        )
    lower = uuid.uuid4()
    await store.upsert_point(
        VectorPoint(
            point_id=lower,
            embedding=[0.0, 1.0, 0.0],
            payload=build_payload(False, author, oc_file_path="b.docx"),
        )
    )

    hits = await store.query_page(
        [1.0, 0.0, 0.0],
        page=1,
        page_size=5,
        query_filter=VectorQueryFilter(oc_file_paths=["b.docx"]),
    )

    assert [h.point_id for h in hits] == [lower]


@pytest.mark.asyncio
async def test_nearest_public_neighbour_behind_many_private_ones(store) -> None:
    author = uuid.uuid4()
    for _ in range(30):
        await store.upsert_point(
            VectorPoint(
                point_id=uuid.uuid4(),
                embedding=[1.0, 0.0, 0.0],
                payload=build_payload(True, author),
            )
        )
    public = uuid.uuid4()
    await store.upsert_point(
        VectorPoint(
            point_id=public,
            embedding=[0.6, 0.8, 0.0],
            payload=build_payload(False, author),
        )
    )

    hit = await store.nearest([1.0, 0.0, 0.0])

    assert hit.point_id == public
    assert hit.score == pytest.approx(0.6, abs=1e-5)


@pytest.mark.asyncio
async def test_query_page_orders_and_slices(store) -> None:
    ids = [uuid.uuid4() for _ in range(3)]
    vectors = [[1.0, 0.0, 0.0], [0.8, 0.6, 0.0], [0.0, 1.0, 0.0]]
    for point_id, vector in zip(ids, vectors):
        await store.upsert_point(VectorPoint(point_id=point_id, embedding=vector))

    first = await store.query_page([1.0, 0.0, 0.0], page=1, page_size=2)
    second = await store.query_page([1.0, 0.0, 0.0], page=2, page_size=2)

    assert [h.point_id for h in first] == ids[:2]
    assert [h.point_id for h in second] == ids[2:]


@pytest.mark.asyncio
async def test_upsert_replaces_and_delete_ignores_unknown(store) -> None:
    point_id = uuid.uuid4()
    await store.upsert_point(VectorPoint(point_id=point_id, embedding=[1.0, 0.0, 0.0]))
    await store.upsert_point(
        VectorPoint(
            point_id=point_id,
            embedding=[0.0, 0.0, 1.0],
            payload=build_payload(False, uuid.uuid4(), created_at=1700000000.0),
        )
    )

    assert await store.list_points() == [StoredPoint(point_id=point_id, created_at=1700000000.0)]

    await store.delete_points([uuid.uuid4(), point_id])
    assert await store.list_points() == []


@pytest.mark.asyncio
async def test_index_persists_across_instances(store, pool, tmp_path) -> None:
    point_id = uuid.uuid4()
    await store.upsert_point(VectorPoint(point_id=point_id, embedding=[0.0, 1.0, 0.0]))

    reloaded = FAISSVectorsStore(
        embeddings=FakeEmbeddings(size=3),
        worker_pool=pool,
        dimension=3,
        index_dir=str(tmp_path / "faiss"),
        index_name="cards",
    )

    assert [p.point_id for p in await reloaded.list_points()] == [point_id]


@pytest.mark.asyncio
async def test_partial_last_page_at_top_k_limit(pool, tmp_path) -> None:
    store = FAISSVectorsStore(
        embeddings=FakeEmbeddings(size=3),
        worker_pool=pool,
        dimension=3,
        index_dir=str(tmp_path / "limited"),
        index_name="cards",
        max_top_k=3,
    )
    for _ in range(5):
        await store.upsert_point(VectorPoint(point_id=uuid.uuid4(), embedding=[1.0, 0.0, 0.0]))

    assert len(await store.query_page([1.0, 0.0, 0.0], page=2, page_size=2)) == 1
    assert await store.query_page([1.0, 0.0, 0.0], page=3, page_size=2) == []
