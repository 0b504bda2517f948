"""
Tests for the SyncLoop reconciliation driver.
"""
import threading

import httpx
import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from tribe.core.errors import NotFoundError, PersistenceError
from tribe.services.response_ledger import set_response
from tribe.sync import STATUS_ERROR, STATUS_LOADING, STATUS_NOT_FOUND, STATUS_READY, SyncLoop
from tribe.sync.fetchers import plan_snapshot_fetcher, request_snapshot_fetcher


class ScriptedFetch:
    """fetch() that returns/raises the scripted outcomes in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestRefresh:
    """Tests for a single reconciliation tick"""

    def test_initial_state(self):
        loop = SyncLoop(ScriptedFetch())
        assert loop.state.status == STATUS_LOADING
        assert loop.state.snapshot is None

    def test_success_replaces_snapshot(self):
        loop = SyncLoop(ScriptedFetch({"v": 1}, {"v": 2}))
        assert loop.refresh().snapshot == {"v": 1}
        state = loop.refresh()
        assert state.snapshot == {"v": 2}
        assert state.status == STATUS_READY
        assert state.ticks == 2
        assert state.last_synced_at is not None
        assert not state.stale

    def test_transient_failure_keeps_previous_snapshot(self):
        loop = SyncLoop(ScriptedFetch({"v": 1}, PersistenceError("store down"), {"v": 2}))
        loop.refresh()
        state = loop.refresh()
        assert state.status == STATUS_READY
        assert state.snapshot == {"v": 1}
        assert state.last_error == "store down"
        assert state.stale
        state = loop.refresh()
        assert state.snapshot == {"v": 2}
        assert state.last_error is None

    def test_http_error_is_transient(self):
        loop = SyncLoop(ScriptedFetch({"v": 1}, httpx.ConnectError("refused")))
        loop.refresh()
        state = loop.refresh()
        assert state.status == STATUS_READY
        assert state.snapshot == {"v": 1}

    def test_failure_before_first_snapshot_reports_error(self):
        loop = SyncLoop(ScriptedFetch(PersistenceError("store down"), {"v": 1}))
        state = loop.refresh()
        assert state.status == STATUS_ERROR
        assert state.snapshot is None
        assert loop.refresh().status == STATUS_READY

    def test_not_found_is_terminal(self):
        fetch = ScriptedFetch(NotFoundError("Plan not found."), {"v": 1})
        loop = SyncLoop(fetch)
        state = loop.refresh()
        assert state.status == STATUS_NOT_FOUND
        assert state.terminal
        assert state.last_error == "Plan not found."

    def test_not_found_after_snapshot_keeps_it(self):
        loop = SyncLoop(ScriptedFetch({"v": 1}, NotFoundError("Plan not found."), {"v": 2}))
        loop.refresh()
        state = loop.refresh()
        assert state.snapshot == {"v": 1}
        assert state.status == STATUS_READY
        assert state.last_error == "Plan not found."
        assert state.stale
        assert not state.terminal
        assert loop.refresh().snapshot == {"v": 2}

    def test_unexpected_errors_propagate(self):
        loop = SyncLoop(ScriptedFetch(RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            loop.refresh()

    def test_on_update_receives_each_state(self):
        seen = []
        loop = SyncLoop(ScriptedFetch({"v": 1}, PersistenceError("x")), on_update=seen.append)
        loop.refresh()
        loop.refresh()
        assert [s.snapshot for s in seen] == [{"v": 1}, {"v": 1}]
        assert seen[-1].stale


class TestSingleFlight:
    def test_overlapping_tick_is_skipped(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_fetch():
            calls.append(1)
            started.set()
            release.wait(5)
            return {"v": 1}

        loop = SyncLoop(slow_fetch)
        worker = threading.Thread(target=loop.refresh)
        worker.start()
        assert started.wait(5)

        skipped = loop.refresh()
        assert skipped.status == STATUS_LOADING
        assert len(calls) == 1

        release.set()
        worker.join(5)
        assert loop.state.snapshot == {"v": 1}
        assert loop.state.ticks == 1

    def test_stop_discards_in_flight_result(self):
        started = threading.Event()
        release = threading.Event()

        def slow_fetch():
            started.set()
            release.wait(5)
            return {"v": 1}

        loop = SyncLoop(slow_fetch)
        worker = threading.Thread(target=loop.refresh)
        worker.start()
        assert started.wait(5)
        loop.stop()
        release.set()
        worker.join(5)
        assert loop.state.snapshot is None
        assert loop.state.status == STATUS_LOADING
        # Cancelled loops do not fetch again
        assert loop.refresh().snapshot is None


class TestScheduling:
    def test_start_fetches_and_schedules_single_instance_job(self):
        scheduler = BackgroundScheduler()
        fetch = ScriptedFetch({"v": 1})
        loop = SyncLoop(fetch, interval_seconds=60, scheduler=scheduler)
        try:
            state = loop.start()
            assert state.snapshot == {"v": 1}
            assert loop.running
            job = scheduler.get_job(loop.job_id)
            assert job is not None
            assert job.max_instances == 1
            assert job.coalesce is True
            loop.stop()
            assert not loop.running
            assert scheduler.get_job(loop.job_id) is None
        finally:
            if scheduler.running:
                scheduler.shutdown(wait=False)

    def test_start_on_missing_plan_does_not_schedule(self):
        loop = SyncLoop(ScriptedFetch(NotFoundError("Plan not found.")), interval_seconds=60)
        state = loop.start()
        assert state.status == STATUS_NOT_FOUND
        assert not loop.running
        loop.stop()

    def test_not_found_after_start_keeps_polling(self):
        scheduler = BackgroundScheduler()
        loop = SyncLoop(
            ScriptedFetch({"v": 1}, NotFoundError("Plan not found.")),
            interval_seconds=60,
            scheduler=scheduler,
        )
        try:
            loop.start()
            state = loop.refresh()
            assert state.snapshot == {"v": 1}
            assert loop.running
            assert scheduler.get_job(loop.job_id) is not None
        finally:
            loop.stop()
            scheduler.shutdown(wait=False)

    def test_context_manager_stops_loop(self):
        with SyncLoop(ScriptedFetch({"v": 1}), interval_seconds=60) as loop:
            assert loop.running
            assert loop.state.snapshot == {"v": 1}
        assert not loop.running

    def test_ticks_on_cadence(self):
        ticked = threading.Event()
        results = [{"v": 1}, {"v": 2}, {"v": 3}, {"v": 4}]

        def fetch():
            value = results.pop(0) if results else {"v": 99}
            if value["v"] >= 2:
                ticked.set()
            return value

        loop = SyncLoop(fetch, interval_seconds=0.1)
        try:
            loop.start()
            assert ticked.wait(5)
        finally:
            loop.stop()
        assert loop.state.snapshot["v"] >= 2


class TestStoreFetchers:
    """Fetchers open their own session per tick and re-read everything"""

    def test_plan_fetcher_sees_new_writes(self, db, session_factory, playdate_plan):
        loop = SyncLoop(plan_snapshot_fetcher(playdate_plan.slug, "tok-a", session_factory=session_factory))
        assert loop.refresh().snapshot["counts"] == {"in": 0, "maybe": 0, "out": 0}

        set_response(db, playdate_plan.id, "tok-a", "Alice", "in")
        state = loop.refresh()
        assert state.snapshot["counts"]["in"] == 1
        assert state.snapshot["my_response"]["status"] == "in"

    def test_plan_fetcher_not_found(self, session_factory):
        loop = SyncLoop(plan_snapshot_fetcher("missing", session_factory=session_factory))
        assert loop.refresh().status == STATUS_NOT_FOUND

    def test_request_fetcher(self, db, session_factory):
        from tribe.services.window_store import create_request

        req = create_request(db, category="Potluck")
        loop = SyncLoop(request_snapshot_fetcher(req.slug, session_factory=session_factory))
        assert loop.refresh().snapshot["request"]["slug"] == req.slug
