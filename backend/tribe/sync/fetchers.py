"""
Snapshot fetchers for SyncLoop. Each call is a full re-read: in-process fetchers open
their own session per tick, the HTTP fetcher goes through TribeClient.
"""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.orm import Session

from tribe.client import TribeClient
from tribe.db.session import SessionLocal
from tribe.services.snapshots import read_plan_snapshot, read_request_snapshot


def _with_session(session_factory: Callable[[], Session], read: Callable[[Session], Any]) -> Callable[[], Any]:
    def fetch():
        db = session_factory()
        try:
            return read(db)
        finally:
            db.close()

    return fetch


def plan_snapshot_fetcher(
    slug: str,
    participant_token: str | None = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> Callable[[], dict[str, Any]]:
    return _with_session(session_factory, lambda db: read_plan_snapshot(db, slug, participant_token))


def request_snapshot_fetcher(
    slug: str,
    session_factory: Callable[[], Session] = SessionLocal,
) -> Callable[[], dict[str, Any]]:
    return _with_session(session_factory, lambda db: read_request_snapshot(db, slug))


def http_plan_snapshot_fetcher(client: TribeClient, slug: str) -> Callable[[], dict[str, Any]]:
    return lambda: client.get_plan_snapshot(slug)


def http_request_snapshot_fetcher(client: TribeClient, slug: str) -> Callable[[], dict[str, Any]]:
    return lambda: client.get_request_snapshot(slug)
