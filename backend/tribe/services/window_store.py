"""
Hang requests and their availability windows.

Requests are created once and addressed only by slug. Windows are append-only:
a participant may add several, none are edited or deleted.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from tribe.core.constants import CATEGORIES
from tribe.core.errors import NotFoundError, ValidationError, store_operation
from tribe.core.slugs import insert_with_fresh_slug
from tribe.core.timeutil import as_utc, iso, parse_window
from tribe.models.availability_window import AvailabilityWindow
from tribe.models.hang_request import HangRequest

logger = logging.getLogger(__name__)


def require_name(name: str | None) -> str:
    """Trimmed display name; empty is a ValidationError."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Add your name first.")
    return cleaned


def require_token(token: str | None) -> str:
    cleaned = (token or "").strip()
    if not cleaned:
        raise ValidationError("Missing participant token.")
    return cleaned


def validate_category(category: str | None) -> str:
    cleaned = (category or "").strip()
    if cleaned not in CATEGORIES:
        raise ValidationError(f"Unknown category {cleaned!r}; expected one of: {', '.join(CATEGORIES)}")
    return cleaned


def create_request(
    db: Session,
    category: str,
    title: str | None = None,
    note: str | None = None,
) -> HangRequest:
    """Create a request with a fresh slug. Blank title falls back to the category name."""
    category = validate_category(category)
    title = (title or "").strip() or category
    note = (note or "").strip() or None
    row = insert_with_fresh_slug(db, HangRequest, "create the request", title=title, type=category, note=note)
    logger.info("Created request slug=%s type=%s", row.slug, row.type)
    return row


def get_request(db: Session, slug: str) -> HangRequest:
    with store_operation(db, "load the request"):
        row = db.query(HangRequest).filter(HangRequest.slug == slug).first()
    if row is None:
        raise NotFoundError("Request not found.")
    return row


def list_windows(db: Session, request_id: int) -> list[AvailabilityWindow]:
    """All windows for a request, newest first."""
    with store_operation(db, "load availability"):
        return (
            db.query(AvailabilityWindow)
            .filter(AvailabilityWindow.request_id == request_id)
            .order_by(AvailabilityWindow.created_at.desc(), AvailabilityWindow.id.desc())
            .all()
        )


def add_window(
    db: Session,
    request_id: int,
    participant_token: str,
    display_name: str,
    start: datetime | str,
    end: datetime | str,
) -> AvailabilityWindow:
    """Append one window. start/end may be datetimes or ISO-8601 strings."""
    name = require_name(display_name)
    token = require_token(participant_token)
    start_dt, end_dt = parse_window(start, end)
    row = AvailabilityWindow(
        request_id=request_id,
        user_key=token,
        user_name=name,
        start_ts=start_dt,
        end_ts=end_dt,
    )
    with store_operation(db, "save your availability"):
        db.add(row)
        db.commit()
        db.refresh(row)
    logger.info("Added window request_id=%s user=%s %s -> %s", request_id, name, start_dt, end_dt)
    return row


def request_to_dict(r: HangRequest) -> dict:
    return {
        "slug": r.slug,
        "title": r.title,
        "type": r.type,
        "note": r.note,
        "created_at": iso(r.created_at),
    }


def window_to_dict(w: AvailabilityWindow) -> dict:
    return {
        "user_name": w.user_name,
        "start_ts": iso(w.start_ts),
        "end_ts": iso(w.end_ts),
        "created_at": iso(w.created_at),
    }


def window_bounds(w: AvailabilityWindow) -> tuple[datetime, datetime]:
    return as_utc(w.start_ts), as_utc(w.end_ts)
