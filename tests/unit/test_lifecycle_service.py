"""Unit tests for lifecycle_service module."""

import pytest

from src.core.errors import RecordNotFoundError
from src.services.lifecycle_service import LifecycleState, move_to_active, move_to_trash, state_of
from tests.unit.mocks import make_report


@pytest.mark.unit
class TestLifecycle:
    def test_trash_moves_record_to_head_of_trashed(self):
        keep, target = make_report("1"), make_report("2")
        earlier = make_report("0")
        active, trashed = [keep, target], [earlier]

        moved = move_to_trash(active=active, trashed=trashed, record_id="2")

        assert moved is target
        assert active == [keep]
        assert trashed == [target, earlier]
        assert state_of(active=active, trashed=trashed, record_id="2") == LifecycleState.TRASHED

    def test_round_trip_preserves_field_values(self):
        report = make_report("7", vessel="CVN76", author="Joe")
        snapshot = report.model_dump()
        active, trashed = [report], []

        move_to_trash(active=active, trashed=trashed, record_id="7")
        restored = move_to_active(active=active, trashed=trashed, record_id="7")

        assert restored.model_dump() == snapshot
        assert active == [report]
        assert trashed == []
        assert state_of(active=active, trashed=trashed, record_id="7") == LifecycleState.ACTIVE

    def test_numeric_id_matches_string_id(self):
        report = make_report("1718000000000")
        active, trashed = [report], []

        move_to_trash(active=active, trashed=trashed, record_id=1718000000000.0)

        assert trashed == [report]

    def test_missing_record_raises(self):
        with pytest.raises(RecordNotFoundError):
            move_to_trash(active=[], trashed=[], record_id="9")

    def test_record_is_never_in_both_collections(self):
        report = make_report("1")
        stale_copy = make_report("1", vessel="old")
        active, trashed = [report], [stale_copy]

        move_to_trash(active=active, trashed=trashed, record_id="1")

        assert trashed == [report]

    def test_unknown_id_has_no_state(self):
        assert state_of(active=[make_report("1")], trashed=[], record_id="2") is None
