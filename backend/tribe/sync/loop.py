"""
Reconciliation driver: re-fetch a snapshot on a fixed cadence and replace the caller's
view wholesale. No diffing, no push channel.

Single-flight: a tick that starts while another is still running is skipped, and the
scheduler job runs with max_instances=1 / coalesce=True so missed ticks collapse.
NotFoundError before the first snapshot is terminal (the loop stops scheduling); once a
snapshot is showing it is handled like a transient failure. Transient failures keep the last
good snapshot and are retried on the next tick. stop() cancels the job; a tick that
finishes after stop() is discarded.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Generic, Optional, TypeVar

import httpx
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from tribe.core.constants import SYNC_INTERVAL_SECONDS
from tribe.core.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_NOT_FOUND = "not_found"
STATUS_ERROR = "error"  # no snapshot yet and the last fetch failed; still retrying

# Failures worth retrying on the next tick
TRANSIENT_ERRORS = (PersistenceError, httpx.HTTPError)


@dataclass(frozen=True)
class SyncState(Generic[T]):
    status: str = STATUS_LOADING
    snapshot: Optional[T] = None
    last_error: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    ticks: int = 0

    @property
    def stale(self) -> bool:
        """True when the snapshot shown is from before a failed tick."""
        return self.snapshot is not None and self.last_error is not None

    @property
    def terminal(self) -> bool:
        return self.status == STATUS_NOT_FOUND


class SyncLoop(Generic[T]):
    """Poll fetch() every interval_seconds and keep the latest SyncState."""

    def __init__(
        self,
        fetch: Callable[[], T],
        interval_seconds: float = SYNC_INTERVAL_SECONDS,
        on_update: Callable[[SyncState[T]], None] | None = None,
        scheduler: BackgroundScheduler | None = None,
        name: str = "sync",
    ):
        self._fetch = fetch
        self.interval_seconds = interval_seconds
        self._on_update = on_update
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._job = None
        self._tick_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._state: SyncState[T] = SyncState()
        self._cancelled = False
        self.job_id = f"{name}_{id(self):x}"

    @property
    def state(self) -> SyncState[T]:
        with self._state_lock:
            return self._state

    @property
    def running(self) -> bool:
        return self._job is not None

    def refresh(self) -> SyncState[T]:
        """One reconciliation tick. Returns the state after the tick (or the current one if skipped)."""
        if self._cancelled:
            return self.state
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Sync %s: previous tick still in flight; skipping", self.job_id)
            return self.state
        try:
            return self._tick()
        finally:
            self._tick_lock.release()

    def _tick(self) -> SyncState[T]:
        now = datetime.now(timezone.utc)
        try:
            snapshot = self._fetch()
        except NotFoundError as e:
            if self.state.snapshot is not None:
                # Already showing data: a late 404 is treated as transient
                return self._keep_snapshot(e)
            logger.info("Sync %s: not found (%s); stopping", self.job_id, e)
            state = self._apply(lambda s: replace(
                s, status=STATUS_NOT_FOUND, snapshot=None, last_error=str(e), ticks=s.ticks + 1,
            ))
            self._cancel_job()
            return state
        except TRANSIENT_ERRORS as e:
            return self._keep_snapshot(e)
        logger.debug("Sync %s: snapshot refreshed", self.job_id)
        return self._apply(lambda s: SyncState(
            status=STATUS_READY, snapshot=snapshot, last_error=None, last_synced_at=now, ticks=s.ticks + 1,
        ))

    def _keep_snapshot(self, e: Exception) -> SyncState[T]:
        logger.warning("Sync %s: fetch failed, keeping last snapshot: %s", self.job_id, e)
        return self._apply(lambda s: replace(
            s,
            status=STATUS_READY if s.snapshot is not None else STATUS_ERROR,
            last_error=str(e) or e.__class__.__name__,
            ticks=s.ticks + 1,
        ))

    def _apply(self, update: Callable[[SyncState[T]], SyncState[T]]) -> SyncState[T]:
        with self._state_lock:
            if self._cancelled:
                # Caller went away mid-fetch; drop the result
                return self._state
            self._state = update(self._state)
            state = self._state
        if self._on_update is not None:
            self._on_update(state)
        return state

    def start(self) -> SyncState[T]:
        """Fetch once now, then keep refreshing on the cadence until stop() or a not-found."""
        if self._job is not None:
            return self.state
        self._cancelled = False
        state = self.refresh()
        if state.terminal:
            return state
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler()
            self._owns_scheduler = True
        if not self._scheduler.running:
            self._scheduler.start()
        self._job = self._scheduler.add_job(
            self.refresh,
            "interval",
            seconds=self.interval_seconds,
            id=self.job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.debug("Sync %s: scheduled every %ss", self.job_id, self.interval_seconds)
        return state

    def stop(self) -> None:
        """Cancel outright: no further ticks, in-flight results are discarded."""
        with self._state_lock:
            self._cancelled = True
        self._cancel_job()
        if self._owns_scheduler and self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None

    def _cancel_job(self) -> None:
        job, self._job = self._job, None
        if job is None:
            return
        try:
            job.remove()
        except JobLookupError:
            pass

    def __enter__(self) -> "SyncLoop[T]":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
