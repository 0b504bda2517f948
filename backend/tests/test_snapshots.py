"""
Tests for snapshot reads (what the SyncLoop re-fetches every tick).
"""
import pytest

from tests.helpers import at
from tribe.core.constants import DEFAULT_POTLUCK_ITEMS
from tribe.core.errors import NotFoundError
from tribe.services.claim_ledger import claim
from tribe.services.response_ledger import set_response
from tribe.services.snapshots import read_plan_snapshot, read_request_snapshot
from tribe.services.window_store import add_window, create_request


class TestPlanSnapshot:
    def test_first_view_of_potluck_seeds_defaults(self, db, potluck_plan):
        snap = read_plan_snapshot(db, potluck_plan.slug)
        claims = {c["item"]: c["claimed_by"] for c in snap["claims"]}
        assert claims == {item: None for item in DEFAULT_POTLUCK_ITEMS}

    def test_repeated_views_do_not_duplicate_items(self, db, potluck_plan):
        read_plan_snapshot(db, potluck_plan.slug)
        snap = read_plan_snapshot(db, potluck_plan.slug)
        assert len(snap["claims"]) == len(DEFAULT_POTLUCK_ITEMS)

    def test_non_potluck_has_no_items(self, db, playdate_plan):
        assert read_plan_snapshot(db, playdate_plan.slug)["claims"] == []

    def test_reflects_responses_and_claims(self, db, potluck_plan):
        read_plan_snapshot(db, potluck_plan.slug)
        set_response(db, potluck_plan.id, "tok-a", "Alice", "in")
        set_response(db, potluck_plan.id, "tok-b", "Bob", "maybe")
        claim(db, potluck_plan.id, "Dessert", "Alice")

        snap = read_plan_snapshot(db, potluck_plan.slug, participant_token="tok-b")
        assert snap["plan"]["slug"] == potluck_plan.slug
        assert snap["counts"] == {"in": 1, "maybe": 1, "out": 0}
        assert snap["my_response"]["user_name"] == "Bob"
        assert {c["item"]: c["claimed_by"] for c in snap["claims"]}["Dessert"] == "Alice"
        assert all("user_key" not in r for r in snap["responses"])

    def test_without_token_no_my_response(self, db, potluck_plan):
        set_response(db, potluck_plan.id, "tok-a", "Alice", "in")
        assert read_plan_snapshot(db, potluck_plan.slug)["my_response"] is None

    def test_unknown_plan(self, db):
        with pytest.raises(NotFoundError):
            read_plan_snapshot(db, "missing")


class TestRequestSnapshot:
    def test_windows_and_candidates(self, db):
        req = create_request(db, category="Playdate")
        add_window(db, req.id, "a", "Alice", at(10), at(11))
        add_window(db, req.id, "b", "Bob", at(10, 30), at(11, 30))

        snap = read_request_snapshot(db, req.slug)
        assert snap["request"]["slug"] == req.slug
        assert [w["user_name"] for w in snap["windows"]] == ["Bob", "Alice"]
        assert snap["candidates"] == [{
            "start_ts": "2026-11-14T10:30:00+00:00",
            "end_ts": "2026-11-14T11:00:00+00:00",
            "minutes": 30,
            "participants": ["Alice", "Bob"],
        }]

    def test_unknown_request(self, db):
        with pytest.raises(NotFoundError):
            read_request_snapshot(db, "missing")
