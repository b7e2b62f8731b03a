"""
Point references.

A card's link to the vector index is either ``Linked(point_id)`` or
``Unlinked()``. Cards recorded as duplicates, and cards whose vector write
was skipped, are ``Unlinked``.

Dependencies: uuid
System role: Explicit optional link between metadata rows and vector entries
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Linked:
    """Reference to an existing vector entry."""

    point_id: UUID

    def __str__(self) -> str:
        return str(self.point_id)


@dataclass(frozen=True)
class Unlinked:
    """No vector entry belongs to this card."""

    def __str__(self) -> str:
        return "unlinked"


PointRef = Linked | Unlinked


def point_ref_from(point_id: UUID | str | None) -> PointRef:
    """
    Build a PointRef from a nullable stored value.

    Args:
        point_id: UUID, UUID string, or None

    Returns:
        PointRef: Linked if a value is present, Unlinked otherwise
    """
    if point_id is None:
        return Unlinked()
    if isinstance(point_id, str):
        point_id = UUID(point_id)
    return Linked(point_id)


def point_id_or_none(ref: PointRef) -> UUID | None:
    """Return the stored form of a PointRef (UUID or None)."""
    if isinstance(ref, Linked):
        return ref.point_id
    return None
