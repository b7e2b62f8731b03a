"""
Vector database schemas.

Pydantic models for vector operations (points, hits), the query filter
applied inside the ranked search, and the async interface every vector
backend implements.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from pydantic import BaseModel, Field

POINT_ID_KEY = "point_id"


def build_payload(
    is_private: bool,
    author_id: UUID,
    oc_file_path: str | None = None,
    link: str | None = None,
    created_at: float | None = None,
) -> dict[str, Any]:
    """
    Payload stored with a card's vector.

    Carries every attribute search filters on, so visibility and the
    allow-lists are applied while ranking. Unset optional fields are
    omitted; S3 Vectors metadata cannot hold nulls.

    Args:
        is_private: Card visibility flag
        author_id: Card author
        oc_file_path: Source file path
        link: Source URL
        created_at: Unix timestamp of the upsert

    Returns:
        dict: Vector metadata
    """
    payload: dict[str, Any] = {"private": is_private, "author_id": str(author_id)}
    if oc_file_path is not None:
        payload["oc_file_path"] = oc_file_path
    if link is not None:
        payload["link"] = link
    if created_at is not None:
        payload["created_at"] = created_at
    return payload


def is_private_payload(payload: dict[str, Any]) -> bool:
    """Return True when a stored payload marks a private card."""
    return bool(payload.get("private", False))


@dataclass(frozen=True)
class VectorQueryFilter:
    """
    Which points a ranked query may return.

    Public points are always eligible; private points only for their
    author. Non-empty allow-lists restrict ``oc_file_path`` and ``link``.
    The default instance is the anonymous, unfiltered view.
    """

    viewer_id: UUID | None = None
    oc_file_paths: list[str] | None = None
    links: list[str] | None = None

    def matches(self, payload: dict[str, Any]) -> bool:
        """Evaluate the filter against a stored payload."""
        if is_private_payload(payload):
            if self.viewer_id is None or payload.get("author_id") != str(self.viewer_id):
                return False
        if self.oc_file_paths and payload.get("oc_file_path") not in self.oc_file_paths:
            return False
        if self.links and payload.get("link") not in self.links:
            return False
        return True


class VectorPoint(BaseModel):
    """A vector entry to upsert."""

    point_id: UUID = Field(description="Key linking the vector to its card row")
    embedding: list[float] = Field(description="Embedding vector")
    payload: dict[str, Any] = Field(default_factory=dict, description="Stored attributes")


class VectorHit(BaseModel):
    """Single result from a nearest-neighbour query."""

    point_id: UUID = Field(description="Key of the matched vector")
    score: float = Field(description="Cosine similarity to the query vector")
    payload: dict[str, Any] = Field(default_factory=dict, description="Stored attributes")


class StoredPoint(BaseModel):
    """A point as listed by the reconciliation sweep."""

    point_id: UUID = Field(description="Key of the stored vector")
    created_at: float | None = Field(
        default=None, description="Unix timestamp of the upsert, None for legacy points"
    )


class VectorIndex(Protocol):
    """Operations the card pipelines need from a vector backend."""

    @property
    def max_top_k(self) -> int: ...

    async def upsert_point(self, point: VectorPoint) -> None: ...

    async def query_page(
        self,
        embedding: list[float],
        page: int,
        page_size: int,
        query_filter: VectorQueryFilter | None = None,
    ) -> list[VectorHit]: ...

    async def nearest(
        self,
        embedding: list[float],
        query_filter: VectorQueryFilter | None = None,
    ) -> VectorHit | None: ...

    async def delete_points(self, point_ids: list[UUID]) -> None: ...

    async def list_points(self) -> list[StoredPoint]: ...

    async def health_check(self) -> bool: ...
