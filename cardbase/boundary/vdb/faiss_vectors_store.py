"""
FAISS vector store for local development.

Stores card vectors in a LangChain community FAISS index using inner
product over L2-normalised vectors, so scores are cosine similarities.
Persists index to disk for reuse across runs. All FAISS calls run on the
bounded worker pool.

Dependencies: faiss-cpu, langchain_community, cardbase.core.worker_pool
System role: Local vector index for dedup and semantic search
"""

import logging
import threading
from pathlib import Path
from uuid import UUID

import faiss
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_community.vectorstores.utils import DistanceStrategy
from langchain_core.embeddings import Embeddings

from cardbase.boundary.vdb.vector_schemas import (
    POINT_ID_KEY,
    StoredPoint,
    VectorHit,
    VectorPoint,
    VectorQueryFilter,
)
from cardbase.core.exceptions import VectorStoreError
from cardbase.core.worker_pool import WorkerPool

logger = logging.getLogger(__name__)


class FAISSVectorsStore:
    """
    FAISS vector store for local development.

    Point IDs are the FAISS docstore IDs; the payload is kept as document
    metadata alongside the point ID.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        worker_pool: WorkerPool,
        dimension: int = 1536,
        index_dir: str = "/tmp/.cardbase_faiss",
        index_name: str = "debate_cards",
        max_top_k: int = 100,
    ) -> None:
        """
        Initialize FAISS vector store.

        Args:
            embeddings: LangChain embeddings (required by the FAISS wrapper;
                vectors are always supplied precomputed)
            worker_pool: Pool running the blocking FAISS calls
            dimension: Vector dimensionality
            index_dir: Directory the index is persisted to
            index_name: Index file name
            max_top_k: Largest neighbour count per query
        """
        self._embeddings = embeddings
        self._pool = worker_pool
        self._dimension = dimension
        self._index_dir = Path(index_dir)
        self._index_name = index_name
        self._max_top_k = max_top_k
        # FAISS index and docstore mutations are not thread-safe
        self._lock = threading.Lock()

        self._index_dir.mkdir(parents=True, exist_ok=True)
        self._vector_store = self._load_or_create_index()

    def _load_or_create_index(self) -> FAISS:
        """Load existing FAISS index or create an empty one."""
        index_file = self._index_dir / f"{self._index_name}.faiss"
        if index_file.exists():
            logger.info(f"{__name__}:_load_or_create_index - Loading index from {self._index_dir}")
            return FAISS.load_local(
                str(self._index_dir),
                self._embeddings,
                index_name=self._index_name,
                allow_dangerous_deserialization=True,
                distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
                normalize_L2=True,
            )

        logger.info(
            f"{__name__}:_load_or_create_index - Creating new index (dimension={self._dimension})"
        )
        return FAISS(
            embedding_function=self._embeddings,
            index=faiss.IndexFlatIP(self._dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
            distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
            normalize_L2=True,
        )

    def _save(self) -> None:
        self._vector_store.save_local(str(self._index_dir), index_name=self._index_name)

    def _stored_ids(self) -> set[str]:
        return set(self._vector_store.index_to_docstore_id.values())

    def _upsert_sync(self, point: VectorPoint) -> None:
        key = str(point.point_id)
        with self._lock:
            if key in self._stored_ids():
                self._vector_store.delete(ids=[key])
            self._vector_store.add_embeddings(
                text_embeddings=[("", point.embedding)],
                metadatas=[{**point.payload, POINT_ID_KEY: key}],
                ids=[key],
            )
            self._save()

    def _query_sync(
        self,
        embedding: list[float],
        k: int,
        query_filter: VectorQueryFilter,
    ) -> list[VectorHit]:
        with self._lock:
            # Filter over the whole index, not a fixed candidate window
            results = self._vector_store.similarity_search_with_score_by_vector(
                embedding,
                k=k,
                filter=query_filter.matches,
                fetch_k=max(self._vector_store.index.ntotal, k),
            )
        hits = []
        for doc, score in results:
            payload = {
                key: value for key, value in (doc.metadata or {}).items() if key != POINT_ID_KEY
            }
            hits.append(
                VectorHit(
                    point_id=UUID(doc.metadata[POINT_ID_KEY]),
                    score=float(score),
                    payload=payload,
                )
            )
        return hits

    def _delete_sync(self, point_ids: list[UUID]) -> int:
        with self._lock:
            stored = self._stored_ids()
            keys = [str(point_id) for point_id in point_ids if str(point_id) in stored]
            if not keys:
                return 0
            self._vector_store.delete(ids=keys)
            self._save()
            return len(keys)

    def _list_sync(self) -> list[StoredPoint]:
        with self._lock:
            points = []
            for key in self._stored_ids():
                doc = self._vector_store.docstore.search(key)
                metadata = getattr(doc, "metadata", None) or {}
                points.append(
                    StoredPoint(point_id=UUID(key), created_at=metadata.get("created_at"))
                )
            return points

    @property
    def max_top_k(self) -> int:
        """Deepest rank a query can reach."""
        return self._max_top_k

    async def upsert_point(self, point: VectorPoint) -> None:
        """
        Insert or replace a vector under its point ID.

        Raises:
            VectorStoreError: If the FAISS write fails
        """
        try:
            await self._pool.run(self._upsert_sync, point)
        except Exception as e:
            logger.error(f"{__name__}:upsert_point - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Failed inserting card vector",
                operation="upsert",
                details={"error": str(e), "point_id": str(point.point_id)},
            ) from e

    async def query_page(
        self,
        embedding: list[float],
        page: int,
        page_size: int,
        query_filter: VectorQueryFilter | None = None,
    ) -> list[VectorHit]:
        """
        Return one page of nearest neighbours, best first.

        Visibility and allow-lists are applied before slicing, so every
        page holds only points the filter admits.

        Args:
            embedding: Query vector
            page: 1-indexed page number
            page_size: Hits per page
            query_filter: Eligible points (anonymous public view when None)

        Returns:
            list[VectorHit]: Ranked hits for the page

        Raises:
            VectorStoreError: If the FAISS search fails
        """
        k = min(page * page_size, self._max_top_k)
        start = (page - 1) * page_size
        if start >= k:
            return []
        try:
            hits = await self._pool.run(
                self._query_sync, embedding, k, query_filter or VectorQueryFilter()
            )
        except Exception as e:
            logger.error(f"{__name__}:query_page - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Failed searching card vectors",
                operation="query",
                details={"error": str(e), "page": page},
            ) from e
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
        Delete vectors by point ID; unknown IDs are ignored.

        Raises:
            VectorStoreError: If the FAISS delete fails
        """
        if not point_ids:
            return
        try:
            deleted = await self._pool.run(self._delete_sync, point_ids)
        except Exception as e:
            logger.error(f"{__name__}:delete_points - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Failed deleting card vectors",
                operation="delete",
                details={"error": str(e), "point_count": len(point_ids)},
            ) from e
        logger.info(
            "Deleted card vectors",
            extra={"requested": len(point_ids), "deleted": deleted},
        )

    async def list_points(self) -> list[StoredPoint]:
        """Return every stored point with its upsert time."""
        return await self._pool.run(self._list_sync)

    async def health_check(self) -> bool:
        """FAISS is in-process; healthy once loaded."""
        return self._vector_store is not None
