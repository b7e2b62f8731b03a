"""
Tests for point references and dedup outcomes.

System role: Verification of the linked/unlinked point model
"""

import uuid

from cardbase.core.dedup_outcome import Collision, DedupStage, Unique
from cardbase.core.point_ref import Linked, Unlinked, point_id_or_none, point_ref_from


def test_none_is_unlinked() -> None:
    assert point_ref_from(None) == Unlinked()


def test_uuid_is_linked() -> None:
    point_id = uuid.uuid4()
    assert point_ref_from(point_id) == Linked(point_id)


def test_string_is_parsed() -> None:
    point_id = uuid.uuid4()
    assert point_ref_from(str(point_id)) == Linked(point_id)


def test_point_id_or_none_round_trip() -> None:
    point_id = uuid.uuid4()
    assert point_id_or_none(Linked(point_id)) == point_id
    assert point_id_or_none(Unlinked()) is None


def test_outcomes_are_distinct_types() -> None:
    unique = Unique(embedding=[0.1])
    collision = Collision(point=Unlinked(), stage=DedupStage.LEXICAL, score=0.97)
    assert not isinstance(unique, Collision)
    assert collision.stage.value == "lexical"
    assert collision.matched_card_id is None
