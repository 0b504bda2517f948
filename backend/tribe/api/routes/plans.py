"""
Plans: snapshot (polled every couple of seconds by the plan page), RSVP, potluck item claims.

Participant identity for RSVPs comes from X-Participant-Token / ?participant_token=.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tribe.api.deps import participant_token
from tribe.core.errors import ValidationError
from tribe.db.session import get_db
from tribe.services import claim_ledger, response_ledger
from tribe.services.plan_promoter import create_plan, get_plan, plan_to_dict
from tribe.services.snapshots import read_plan_snapshot

router = APIRouter()
logger = logging.getLogger(__name__)


class CreatePlanBody(BaseModel):
    category: str
    title: str | None = Field(None, max_length=256)
    note: str | None = None
    start: str
    end: str
    location: str | None = Field(None, max_length=256)


class ResponseBody(BaseModel):
    display_name: str = Field("", max_length=128)
    status: str | None = Field(None, description="in | maybe | out")
    arrival: str | None = Field(None, max_length=32, description="Playdates: On time | 5–10 late | 10–20 late | Not sure")


class ClaimBody(BaseModel):
    item: str = Field(..., max_length=128)
    display_name: str = Field("", max_length=128)


@router.post("/plans")
def post_plan(body: CreatePlanBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Create a plan directly (no availability request)."""
    plan = create_plan(
        db,
        title=body.title,
        category=body.category,
        start=body.start,
        end=body.end,
        note=body.note,
        location=body.location,
    )
    return plan_to_dict(plan)


@router.get("/plans/{slug}")
def get_plan_snapshot(
    slug: str,
    db: Session = Depends(get_db),
    token: str | None = Depends(participant_token),
) -> dict[str, Any]:
    """Plan, responses, claims and counts. Seeds potluck items on view."""
    return read_plan_snapshot(db, slug, participant_token=token)


@router.put("/plans/{slug}/response")
def put_response(
    slug: str,
    body: ResponseBody,
    db: Session = Depends(get_db),
    token: str | None = Depends(participant_token),
) -> dict[str, Any]:
    """
    Set the caller's RSVP. Send status, arrival, or both; a field left out keeps its
    current value (the ledger re-submits it).
    """
    plan = get_plan(db, slug)
    if body.status is not None and "arrival" in body.model_fields_set:
        row = response_ledger.set_response(db, plan.id, token, body.display_name, body.status, body.arrival)
    elif body.status is not None:
        row = response_ledger.set_status(db, plan.id, token, body.display_name, body.status)
    elif "arrival" in body.model_fields_set:
        row = response_ledger.set_arrival(db, plan.id, token, body.display_name, body.arrival)
    else:
        raise ValidationError("Send a status or an arrival estimate.")
    return response_ledger.response_to_dict(row)


@router.post("/plans/{slug}/claims/seed")
def post_seed_claims(slug: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Ensure default potluck items exist. Safe to call repeatedly."""
    plan = get_plan(db, slug)
    inserted = claim_ledger.seed_defaults(db, plan.id, plan.type)
    return {
        "inserted": inserted,
        "claims": [claim_ledger.claim_to_dict(c) for c in claim_ledger.list_claims(db, plan.id)],
    }


@router.post("/plans/{slug}/claims/claim")
def post_claim(slug: str, body: ClaimBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    plan = get_plan(db, slug)
    row = claim_ledger.claim(db, plan.id, body.item, body.display_name)
    return claim_ledger.claim_to_dict(row)


@router.post("/plans/{slug}/claims/unclaim")
def post_unclaim(slug: str, body: ClaimBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Release an item. Only the name that claimed it may release it."""
    plan = get_plan(db, slug)
    row = claim_ledger.unclaim(db, plan.id, body.item, body.display_name)
    return claim_ledger.claim_to_dict(row)
