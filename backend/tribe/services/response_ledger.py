"""
Attendance responses: one row per (plan, participant token).

Writes are whole-record upserts on (plan_id, user_key): a later write for the same
participant replaces the earlier one (last write wins). Different participants never
collide because their keys differ. There is no field-level patch, so set_status and
set_arrival read the other field first and re-submit it unchanged.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from tribe.core.constants import ARRIVAL_OPTIONS, DEFAULT_RESPONSE_STATUS, RESPONSE_STATUSES
from tribe.core.errors import ValidationError, store_operation
from tribe.core.timeutil import iso
from tribe.db.upsert import insert_for
from tribe.models.response import Response
from tribe.services.window_store import require_name, require_token

logger = logging.getLogger(__name__)


def _validate_status(status: str | None) -> str:
    if status not in RESPONSE_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(RESPONSE_STATUSES)}")
    return status


def _validate_arrival(arrival: str | None) -> str | None:
    if arrival is None or not arrival.strip():
        return None
    arrival = arrival.strip()
    if arrival not in ARRIVAL_OPTIONS:
        raise ValidationError(f"Arrival must be one of: {', '.join(ARRIVAL_OPTIONS)}")
    return arrival


def get_response(db: Session, plan_id: int, participant_token: str) -> Response | None:
    with store_operation(db, "load your response"):
        return (
            db.query(Response)
            .filter(Response.plan_id == plan_id, Response.user_key == participant_token)
            .first()
        )


def list_responses(db: Session, plan_id: int) -> list[Response]:
    """All responses for a plan, newest first."""
    with store_operation(db, "load responses"):
        return (
            db.query(Response)
            .filter(Response.plan_id == plan_id)
            .order_by(Response.created_at.desc(), Response.id.desc())
            .all()
        )


def set_response(
    db: Session,
    plan_id: int,
    participant_token: str,
    display_name: str,
    status: str,
    arrival: str | None = None,
) -> Response:
    """
    Upsert the participant's response. Name, status and arrival are all replaced;
    repeating the same call leaves exactly one row.
    """
    name = require_name(display_name)
    token = require_token(participant_token)
    status = _validate_status(status)
    arrival = _validate_arrival(arrival)
    now = datetime.now(timezone.utc)
    stmt = insert_for(db, Response).values(
        plan_id=plan_id,
        user_key=token,
        user_name=name,
        status=status,
        arrival=arrival,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["plan_id", "user_key"],
        set_={
            "user_name": stmt.excluded.user_name,
            "status": stmt.excluded.status,
            "arrival": stmt.excluded.arrival,
            "updated_at": now,
        },
    )
    with store_operation(db, "save your response"):
        db.execute(stmt)
        db.commit()
    logger.info("Response plan_id=%s user=%s status=%s arrival=%s", plan_id, name, status, arrival)
    return get_response(db, plan_id, token)


def set_status(
    db: Session,
    plan_id: int,
    participant_token: str,
    display_name: str,
    status: str,
) -> Response:
    """Change only the status; the current arrival estimate is carried over."""
    current = get_response(db, plan_id, require_token(participant_token))
    arrival = current.arrival if current else None
    return set_response(db, plan_id, participant_token, display_name, status, arrival)


def set_arrival(
    db: Session,
    plan_id: int,
    participant_token: str,
    display_name: str,
    arrival: str | None,
) -> Response:
    """Change only the arrival estimate; status is carried over (or 'maybe' for a first response)."""
    current = get_response(db, plan_id, require_token(participant_token))
    status = current.status if current else DEFAULT_RESPONSE_STATUS
    return set_response(db, plan_id, participant_token, display_name, status, arrival)


def count_responses(rows: list[Response]) -> dict[str, int]:
    counts = {s: 0 for s in RESPONSE_STATUSES}
    for r in rows:
        if r.status in counts:
            counts[r.status] += 1
    return counts


def response_to_dict(r: Response) -> dict:
    return {
        "user_name": r.user_name,
        "status": r.status,
        "arrival": r.arrival,
        "created_at": iso(r.created_at),
        "updated_at": iso(r.updated_at),
    }
