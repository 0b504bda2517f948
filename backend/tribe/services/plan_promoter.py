"""
Promote a chosen candidate window into a committed Plan.

One insert per call: calling twice creates two plans, so callers confirm before promoting.
Promotion does not seed potluck items; that happens on first view (claim_ledger.seed_defaults).
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from tribe.core.errors import NotFoundError, store_operation
from tribe.core.slugs import insert_with_fresh_slug
from tribe.core.timeutil import iso, parse_window
from tribe.models.hang_request import HangRequest
from tribe.models.plan import Plan
from tribe.services.window_store import get_request, validate_category

logger = logging.getLogger(__name__)


def promote_plan(
    db: Session,
    request_slug: str,
    start: datetime | str,
    end: datetime | str,
    location: str | None = None,
) -> Plan:
    """Create a Plan from a request's candidate window, copying title/type/note from the request."""
    start_dt, end_dt = parse_window(start, end)
    request: HangRequest = get_request(db, request_slug)
    plan = insert_with_fresh_slug(
        db,
        Plan,
        "create the plan",
        request_id=request.id,
        title=request.title,
        type=request.type,
        note=request.note,
        start_ts=start_dt,
        end_ts=end_dt,
        location=(location or "").strip() or None,
    )
    logger.info("Promoted request slug=%s to plan slug=%s (%s -> %s)", request.slug, plan.slug, start_dt, end_dt)
    return plan


def create_plan(
    db: Session,
    title: str | None,
    category: str,
    start: datetime | str,
    end: datetime | str,
    note: str | None = None,
    location: str | None = None,
) -> Plan:
    """Create a plan directly, without an availability request."""
    category = validate_category(category)
    start_dt, end_dt = parse_window(start, end)
    plan = insert_with_fresh_slug(
        db,
        Plan,
        "create the plan",
        request_id=None,
        title=(title or "").strip() or category,
        type=category,
        note=(note or "").strip() or None,
        start_ts=start_dt,
        end_ts=end_dt,
        location=(location or "").strip() or None,
    )
    logger.info("Created plan slug=%s type=%s", plan.slug, plan.type)
    return plan


def get_plan(db: Session, slug: str) -> Plan:
    with store_operation(db, "load the plan"):
        row = db.query(Plan).filter(Plan.slug == slug).first()
    if row is None:
        raise NotFoundError("Plan not found.")
    return row


def plan_to_dict(p: Plan) -> dict:
    return {
        "slug": p.slug,
        "title": p.title,
        "type": p.type,
        "note": p.note,
        "start_ts": iso(p.start_ts),
        "end_ts": iso(p.end_ts),
        "location": p.location,
        "created_at": iso(p.created_at),
    }
