"""
S3 Vectors store for production.

Stores card vectors in an Amazon S3 Vectors index (cosine distance) through
the boto3 ``s3vectors`` client. Client calls are blocking and run on the
bounded worker pool; throttling and transient errors are retried.

Dependencies: boto3, botocore, tenacity, cardbase.core.worker_pool
System role: Production vector index for dedup and semantic search
"""

import logging
from typing import Any
from uuid import UUID

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from cardbase.boundary.vdb.vector_schemas import (
    StoredPoint,
    VectorHit,
    VectorPoint,
    VectorQueryFilter,
)
from cardbase.core.exceptions import VectorStoreError
from cardbase.core.worker_pool import WorkerPool

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 500

# Legacy public points were stored without a private flag
PUBLIC_CLAUSES: list[dict[str, Any]] = [
    {"private": {"$exists": False}},
    {"private": {"$eq": False}},
]
PUBLIC_ONLY_FILTER: dict[str, Any] = {"$or": PUBLIC_CLAUSES}


def metadata_filter(query_filter: VectorQueryFilter) -> dict[str, Any]:
    """
    Translate a query filter into an S3 Vectors metadata filter.

    Args:
        query_filter: Viewer and allow-lists

    Returns:
        dict: Filter expression for query_vectors
    """
    if query_filter.viewer_id is None:
        visibility = PUBLIC_ONLY_FILTER
    else:
        visibility = {
            "$or": [*PUBLIC_CLAUSES, {"author_id": {"$eq": str(query_filter.viewer_id)}}]
        }

    clauses = [visibility]
    if query_filter.oc_file_paths:
        clauses.append({"oc_file_path": {"$in": list(query_filter.oc_file_paths)}})
    if query_filter.links:
        clauses.append({"link": {"$in": list(query_filter.links)}})
    return clauses[0] if len(clauses) == 1 else {"$and": clauses}


class S3VectorsStore:
    """
    S3 Vectors store for production.

    Vector keys are point ID strings; the payload is stored as vector
    metadata. Similarity is ``1 - cosine distance``.
    """

    def __init__(
        self,
        worker_pool: WorkerPool,
        vectors_bucket: str = "cardbase-vectors",
        index_name: str = "debate_cards",
        region: str = "us-east-1",
        max_top_k: int = 100,
        max_attempts: int = 5,
        client: Any | None = None,
    ) -> None:
        """
        Initialize S3 Vectors client.

        Args:
            worker_pool: Pool running the blocking boto3 calls
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region
            max_top_k: Largest topK a single query may request
            max_attempts: Attempts per call before raising VectorStoreError
            client: Pre-built boto3 client (tests)
        """
        self._pool = worker_pool
        self._vectors_bucket = vectors_bucket
        self._index_name = index_name
        self._max_top_k = max_top_k
        self._client = client or boto3.client("s3vectors", region_name=region)
        self._max_attempts = max_attempts

    @property
    def max_top_k(self) -> int:
        """Deepest rank a query can reach."""
        return self._max_top_k

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a client operation with retry on transient failures."""
        retrying = Retrying(
            retry=retry_if_exception_type((ClientError, BotoCoreError)),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=10, jitter=1),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry "
                f"{retry_state.attempt_number}/{self._max_attempts}"
            ),
            reraise=True,
        )
        method = getattr(self._client, operation)
        return retrying(
            method,
            vectorBucketName=self._vectors_bucket,
            indexName=self._index_name,
            **kwargs,
        )

    async def _run(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return await self._pool.run(self._call, operation, **kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            raise VectorStoreError(
                f"S3 Vectors {operation} failed",
                operation=operation,
                details={"error": str(e), "index": self._index_name},
            ) from e

    async def upsert_point(self, point: VectorPoint) -> None:
        """
        Insert or replace a vector under its point ID.

        Raises:
            VectorStoreError: If put_vectors fails after retries
        """
        entry: dict[str, Any] = {
            "key": str(point.point_id),
            "data": {"float32": [float(value) for value in point.embedding]},
        }
        if point.payload:
            entry["metadata"] = point.payload
        await self._run("put_vectors", vectors=[entry])

    async def query_page(
        self,
        embedding: list[float],
        page: int,
        page_size: int,
        query_filter: VectorQueryFilter | None = None,
    ) -> list[VectorHit]:
        """
        Return one page of nearest neighbours, best first.

        S3 Vectors has no offset, so the first ``page * page_size``
        neighbours are fetched and sliced. The metadata filter is applied
        by the service during the ranked search.

        Args:
            embedding: Query vector
            page: 1-indexed page number
            page_size: Hits per page
            query_filter: Eligible points (anonymous public view when None)

        Returns:
            list[VectorHit]: Ranked hits for the page

        Raises:
            VectorStoreError: If query_vectors fails after retries
        """
        top_k = min(page * page_size, self._max_top_k)
        start = (page - 1) * page_size
        if start >= top_k:
            return []

        kwargs: dict[str, Any] = {
            "topK": top_k,
            "queryVector": {"float32": [float(value) for value in embedding]},
            "returnMetadata": True,
            "returnDistance": True,
            "filter": metadata_filter(query_filter or VectorQueryFilter()),
        }

        response = await self._run("query_vectors", **kwargs)
        hits = [
            VectorHit(
                point_id=UUID(match["key"]),
                score=1.0 - float(match.get("distance", 1.0)),
                payload=match.get("metadata") or {},
            )
            for match in response.get("vectors", [])
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[start:start + page_size]

    async def nearest(
        self,
        embedding: list[float],
        query_filter: VectorQueryFilter | None = None,
    ) -> VectorHit | None:
        """Return the single nearest eligible neighbour, or None when there is none."""
        hits = await self.query_page(embedding, page=1, page_size=1, query_filter=query_filter)
        return hits[0] if hits else None

    async def delete_points(self, point_ids: list[UUID]) -> None:
        """
        Delete vectors by point ID; unknown keys are a no-op for S3 Vectors.

        Raises:
            VectorStoreError: If delete_vectors fails after retries
        """
        keys = [str(point_id) for point_id in point_ids]
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            await self._run("delete_vectors", keys=keys[start:start + DELETE_BATCH_SIZE])
        if keys:
            logger.info("Deleted card vectors", extra={"point_count": len(keys)})

    async def list_points(self) -> list[StoredPoint]:
        """Return every stored point with its upsert time (paginates list_vectors)."""
        points: list[StoredPoint] = []
        next_token: str | None = None
        while True:
            kwargs: dict[str, Any] = {"maxResults": 1000, "returnMetadata": True}
            if next_token:
                kwargs["nextToken"] = next_token
            response = await self._run("list_vectors", **kwargs)
            points.extend(
                StoredPoint(
                    point_id=UUID(vector["key"]),
                    created_at=(vector.get("metadata") or {}).get("created_at"),
                )
                for vector in response.get("vectors", [])
            )
            next_token = response.get("nextToken")
            if not next_token:
                return points

    async def health_check(self) -> bool:
        """Return True when the index is reachable."""
        try:
            await self._pool.run(
                self._client.get_index,
                vectorBucketName=self._vectors_bucket,
                indexName=self._index_name,
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"{__name__}:health_check - {type(e).__name__}: {e}")
            return False
        return True
