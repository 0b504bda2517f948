"""
Claimable items per plan: at most one claimant per (plan, item).

claim() overwrites claimed_by unconditionally, so two people claiming at once resolve
last-write-wins. unclaim() only releases when the requester's display name equals the
current claimant; the comparison and the release are one conditional UPDATE.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tribe.core.constants import CATEGORY_POTLUCK, DEFAULT_POTLUCK_ITEMS
from tribe.core.errors import AuthorizationError, NotFoundError, ValidationError, store_operation
from tribe.db.upsert import insert_for
from tribe.models.claim import Claim
from tribe.services.window_store import require_name

logger = logging.getLogger(__name__)


def is_potluck(category: str | None) -> bool:
    return CATEGORY_POTLUCK.lower() in (category or "").lower()


def list_claims(db: Session, plan_id: int) -> list[Claim]:
    """All claims for a plan, newest first."""
    with store_operation(db, "load items"):
        return (
            db.query(Claim)
            .filter(Claim.plan_id == plan_id)
            .order_by(Claim.created_at.desc(), Claim.id.desc())
            .all()
        )


def seed_defaults(db: Session, plan_id: int, category: str) -> int:
    """
    Ensure every default potluck item exists for the plan (unclaimed when inserted).
    Idempotent, and safe when several viewers seed at once: existing (plan_id, item)
    rows are skipped by ON CONFLICT DO NOTHING. Returns how many rows were inserted.
    """
    if not is_potluck(category):
        return 0
    with store_operation(db, "set up potluck items"):
        existing = {c.item for c in db.query(Claim.item).filter(Claim.plan_id == plan_id).all()}
        missing = [item for item in DEFAULT_POTLUCK_ITEMS if item not in existing]
        if not missing:
            return 0
        stmt = (
            insert_for(db, Claim)
            .values([{"plan_id": plan_id, "item": item, "claimed_by": None} for item in missing])
            .on_conflict_do_nothing(index_elements=["plan_id", "item"])
        )
        result = db.execute(stmt)
        db.commit()
    inserted = max(result.rowcount or 0, 0)
    logger.info("Seeded %s default items for plan_id=%s", inserted, plan_id)
    return inserted


def claim(db: Session, plan_id: int, item: str, claimant_display_name: str) -> Claim:
    """Set claimed_by on the item. Does not check the item was free (last write wins)."""
    name = require_name(claimant_display_name)
    item = (item or "").strip()
    if not item:
        raise ValidationError("Missing item.")
    with store_operation(db, "claim the item"):
        updated = (
            db.query(Claim)
            .filter(Claim.plan_id == plan_id, Claim.item == item)
            .update({Claim.claimed_by: name}, synchronize_session=False)
        )
        db.commit()
    if not updated:
        raise NotFoundError(f"No item named {item!r} on this plan.")
    logger.info("Claimed plan_id=%s item=%s by=%s", plan_id, item, name)
    return _get_claim(db, plan_id, item)


def unclaim(db: Session, plan_id: int, item: str, requester_display_name: str | None) -> Claim:
    """
    Release the item, only if requester_display_name equals the current claimant.
    Name equality is the whole ownership check: there is no verified identity.
    """
    name = (requester_display_name or "").strip()
    item = (item or "").strip()
    with store_operation(db, "release the item"):
        updated = 0
        if name:
            updated = (
                db.query(Claim)
                .filter(Claim.plan_id == plan_id, Claim.item == item, Claim.claimed_by == name)
                .update({Claim.claimed_by: None}, synchronize_session=False)
            )
        db.commit()
    if not updated:
        # Distinguish a missing item from someone else's claim
        _get_claim(db, plan_id, item)
        raise AuthorizationError("Only the claimant may release this item.")
    logger.info("Unclaimed plan_id=%s item=%s by=%s", plan_id, item, name)
    return _get_claim(db, plan_id, item)


def _get_claim(db: Session, plan_id: int, item: str) -> Claim:
    with store_operation(db, "load the item"):
        row = db.query(Claim).filter(Claim.plan_id == plan_id, Claim.item == item).first()
    if row is None:
        raise NotFoundError(f"No item named {item!r} on this plan.")
    return row


def claim_to_dict(c: Claim) -> dict:
    return {
        "item": c.item,
        "claimed_by": c.claimed_by,
        "claimed": c.claimed_by is not None,
    }
