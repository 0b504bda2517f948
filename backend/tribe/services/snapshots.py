"""
Read-side views: one call re-reads everything a screen needs.

Nothing is cached between calls; each snapshot is built from the store, which is
what makes polling (SyncLoop) safe. Viewing a potluck plan seeds its default items.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from tribe.models.availability_window import AvailabilityWindow
from tribe.services.claim_ledger import claim_to_dict, list_claims, seed_defaults
from tribe.services.overlap import Candidate, Window, compute_overlaps
from tribe.services.plan_promoter import get_plan, plan_to_dict
from tribe.services.response_ledger import count_responses, list_responses, response_to_dict
from tribe.services.window_store import (
    get_request,
    list_windows,
    request_to_dict,
    window_bounds,
    window_to_dict,
)

logger = logging.getLogger(__name__)


def candidates_from_windows(rows: list[AvailabilityWindow]) -> list[Candidate]:
    return compute_overlaps([Window(*window_bounds(w), participant=w.user_name) for w in rows])


def request_candidates(db: Session, request_id: int) -> list[Candidate]:
    """Recompute overlap candidates from the request's current windows."""
    return candidates_from_windows(list_windows(db, request_id))


def read_request_snapshot(db: Session, slug: str) -> dict[str, Any]:
    request = get_request(db, slug)
    rows = list_windows(db, request.id)
    candidates = candidates_from_windows(rows)
    logger.debug("Request snapshot slug=%s windows=%s candidates=%s", slug, len(rows), len(candidates))
    return {
        "request": request_to_dict(request),
        "windows": [window_to_dict(w) for w in rows],
        "candidates": [c.to_dict() for c in candidates],
        "fetched_at": datetime.now(timezone.utc).isoformat(),
    }


def read_plan_snapshot(db: Session, slug: str, participant_token: str | None = None) -> dict[str, Any]:
    """
    Plan + responses + claims + RSVP counts. my_response is the caller's own row when a
    participant token is given. Seeding runs on every view; it is a no-op once items exist.
    """
    plan = get_plan(db, slug)
    seed_defaults(db, plan.id, plan.type)
    responses = list_responses(db, plan.id)
    claims = list_claims(db, plan.id)
    token = (participant_token or "").strip()
    mine = next((r for r in responses if token and r.user_key == token), None)
    logger.debug("Plan snapshot slug=%s responses=%s claims=%s", slug, len(responses), len(claims))
    return {
        "plan": plan_to_dict(plan),
        "responses": [response_to_dict(r) for r in responses],
        "claims": [claim_to_dict(c) for c in claims],
        "counts": count_responses(responses),
        "my_response": response_to_dict(mine) if mine else None,
        "fetched_at": datetime.now(timezone.utc).isoformat(),
    }
