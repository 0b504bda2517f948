"""
Hang requests: create a link, collect availability windows, suggest overlaps, lock one in.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tribe.api.deps import participant_token
from tribe.db.session import get_db
from tribe.services.plan_promoter import plan_to_dict, promote_plan
from tribe.services.snapshots import read_request_snapshot, request_candidates
from tribe.services.window_store import (
    add_window,
    create_request,
    get_request,
    list_windows,
    request_to_dict,
    window_to_dict,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateRequestBody(BaseModel):
    category: str = Field(..., description="Potluck | Cabin creative coworking | Dance class | Playdate")
    title: str | None = Field(None, max_length=256, description="Defaults to the category")
    note: str | None = None


class AddWindowBody(BaseModel):
    display_name: str = Field("", max_length=128)
    start: str = Field(..., description="ISO-8601 start (inclusive)")
    end: str = Field(..., description="ISO-8601 end (exclusive)")


class PromoteBody(BaseModel):
    start: str
    end: str
    location: str | None = Field(None, max_length=256)


@router.post("/requests")
def create_hang_request(body: CreateRequestBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Create a request link. Share /r/{slug} to collect availability."""
    row = create_request(db, category=body.category, title=body.title, note=body.note)
    return request_to_dict(row)


@router.get("/requests/{slug}")
def get_hang_request(slug: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Request + all windows (newest first) + suggested overlaps. Poll this to stay current."""
    return read_request_snapshot(db, slug)


@router.get("/requests/{slug}/windows")
def get_windows(slug: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    request = get_request(db, slug)
    return {"windows": [window_to_dict(w) for w in list_windows(db, request.id)]}


@router.post("/requests/{slug}/windows")
def post_window(
    slug: str,
    body: AddWindowBody,
    db: Session = Depends(get_db),
    token: str | None = Depends(participant_token),
) -> dict[str, Any]:
    """Add one availability window for the calling participant."""
    request = get_request(db, slug)
    row = add_window(
        db,
        request_id=request.id,
        participant_token=token,
        display_name=body.display_name,
        start=body.start,
        end=body.end,
    )
    return window_to_dict(row)


@router.get("/requests/{slug}/overlaps")
def get_overlaps(slug: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Up to 8 overlaps of 30+ minutes, soonest first."""
    request = get_request(db, slug)
    return {"candidates": [c.to_dict() for c in request_candidates(db, request.id)]}


@router.post("/requests/{slug}/plans")
def post_plan_from_overlap(slug: str, body: PromoteBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    """
    Lock in a candidate window: creates a new plan every call.
    The UI confirms before calling; share /p/{plan slug} afterwards.
    """
    plan = promote_plan(db, request_slug=slug, start=body.start, end=body.end, location=body.location)
    return plan_to_dict(plan)
