"""
Tests for promoting a candidate window into a plan.
"""
import pytest
from sqlalchemy.exc import OperationalError

from tests.helpers import at
from tribe.core import slugs
from tribe.core.errors import NotFoundError, PersistenceError, ValidationError
from tribe.core.timeutil import as_utc
from tribe.models.plan import Plan
from tribe.services.overlap import Window, compute_overlaps
from tribe.services.plan_promoter import create_plan, get_plan, plan_to_dict, promote_plan
from tribe.services.window_store import create_request


@pytest.fixture
def request_row(db):
    return create_request(db, category="Potluck", title="Friendsgiving", note="Bring a dish")


class TestPromotePlan:
    """Tests for promote_plan"""

    def test_alice_bob_candidate_becomes_plan(self, db, request_row):
        candidate = compute_overlaps([
            Window(at(10), at(11), "Alice"),
            Window(at(10, 30), at(11, 30), "Bob"),
        ])[0]
        plan = promote_plan(db, request_row.slug, candidate.start, candidate.end)
        assert as_utc(plan.start_ts) == at(10, 30)
        assert as_utc(plan.end_ts) == at(11)

    def test_copies_request_fields(self, db, request_row):
        plan = promote_plan(db, request_row.slug, at(18), at(21), location=" Kate's place ")
        assert plan.request_id == request_row.id
        assert plan.title == "Friendsgiving"
        assert plan.type == "Potluck"
        assert plan.note == "Bring a dish"
        assert plan.location == "Kate's place"
        assert len(plan.slug) == 10
        assert plan.slug != request_row.slug

    def test_each_call_creates_a_new_plan(self, db, request_row):
        first = promote_plan(db, request_row.slug, at(18), at(21))
        second = promote_plan(db, request_row.slug, at(18), at(21))
        assert first.slug != second.slug
        assert db.query(Plan).count() == 2

    def test_unknown_request(self, db):
        with pytest.raises(NotFoundError):
            promote_plan(db, "missing", at(18), at(21))

    def test_window_must_be_chronological(self, db, request_row):
        with pytest.raises(ValidationError):
            promote_plan(db, request_row.slug, at(21), at(18))
        assert db.query(Plan).count() == 0

    def test_store_failure_leaves_no_plan(self, db, request_row, monkeypatch):
        """A failed insert raises PersistenceError and nothing is written."""
        def failing_commit():
            raise OperationalError("INSERT INTO plans", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(PersistenceError):
            promote_plan(db, request_row.slug, at(18), at(21))
        monkeypatch.undo()
        assert db.query(Plan).count() == 0

    def test_slug_collision_retries(self, db, request_row, monkeypatch):
        taken = promote_plan(db, request_row.slug, at(18), at(21)).slug
        candidates = iter([taken, "freshslug1"])
        monkeypatch.setattr(slugs, "new_slug", lambda: next(candidates))
        plan = promote_plan(db, request_row.slug, at(18), at(21))
        assert plan.slug == "freshslug1"

    def test_other_integrity_errors_are_not_retried(self, db, monkeypatch):
        """A check-constraint failure surfaces on the first attempt."""
        issued = []

        def counting_slug():
            issued.append(f"slug{len(issued):06d}")
            return issued[-1]

        monkeypatch.setattr(slugs, "new_slug", counting_slug)
        with pytest.raises(PersistenceError):
            slugs.insert_with_fresh_slug(
                db, Plan, "create the plan",
                title="Backwards", type="Playdate", start_ts=at(12), end_ts=at(12),
            )
        assert len(issued) == 1
        assert db.query(Plan).count() == 0


class TestCreatePlan:
    """Tests for direct plan creation"""

    def test_without_request(self, db):
        plan = create_plan(db, title="", category="Dance class", start=at(19), end=at(20), location="Studio B")
        assert plan.request_id is None
        assert plan.title == "Dance class"
        assert get_plan(db, plan.slug).id == plan.id

    def test_unknown_category(self, db):
        with pytest.raises(ValidationError):
            create_plan(db, title="x", category="Karaoke", start=at(19), end=at(20))

    def test_get_plan_not_found(self, db):
        with pytest.raises(NotFoundError):
            get_plan(db, "missing")

    def test_plan_to_dict_hides_ids(self, db):
        plan = create_plan(db, title="Cowork", category="Cabin creative coworking", start=at(9), end=at(17))
        data = plan_to_dict(plan)
        assert "id" not in data and "request_id" not in data
        assert data["start_ts"] == "2026-11-14T09:00:00+00:00"
        assert data["type"] == "Cabin creative coworking"
