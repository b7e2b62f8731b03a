"""
Dedup outcomes.

Dependencies: cardbase.core.point_ref
System role: Result types produced by the DedupChecker
"""

import enum
from dataclasses import dataclass
from uuid import UUID

from cardbase.core.point_ref import PointRef


class DedupStage(str, enum.Enum):
    """Which similarity signal detected a collision."""

    LEXICAL = "lexical"
    SEMANTIC = "semantic"


@dataclass(frozen=True)
class Unique:
    """
    Content has no near-duplicate.

    Attributes:
        embedding: Embedding computed during the semantic stage, reused for
            the vector write so the content is embedded only once
    """

    embedding: list[float]


@dataclass(frozen=True)
class Collision:
    """
    Content is a near-duplicate of an existing card.

    Attributes:
        point: Point reference of the existing card
        stage: Stage that detected the collision
        score: Score that reached the threshold
        matched_card_id: ID of the existing card when the stage knows it
    """

    point: PointRef
    stage: DedupStage
    score: float
    matched_card_id: UUID | None = None


DedupOutcome = Unique | Collision
