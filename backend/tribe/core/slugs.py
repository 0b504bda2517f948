"""Public slugs: short, URL-safe, collision-resistant handles for requests and plans."""
import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tribe.core.constants import SLUG_ALPHABET, SLUG_CREATE_ATTEMPTS, SLUG_LENGTH
from tribe.core.errors import PersistenceError, store_operation

logger = logging.getLogger(__name__)


def new_slug(length: int = SLUG_LENGTH) -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


def insert_with_fresh_slug(db: Session, model, action: str, **fields):
    """
    Insert one row of model with a new slug and commit.
    An IntegrityError caused by the slug already being taken gets another slug, up to
    SLUG_CREATE_ATTEMPTS; any other failure raises PersistenceError straight away.
    """
    attempt = 1
    while True:
        slug = new_slug()
        row = model(slug=slug, **fields)
        try:
            with store_operation(db, action):
                db.add(row)
                db.commit()
        except PersistenceError as e:
            if (
                isinstance(e.__cause__, IntegrityError)
                and attempt < SLUG_CREATE_ATTEMPTS
                and _slug_taken(db, model, slug)
            ):
                logger.info("%s slug collision (attempt %s); retrying", model.__tablename__, attempt)
                attempt += 1
                continue
            raise
        db.refresh(row)
        return row


def _slug_taken(db: Session, model, slug: str) -> bool:
    with store_operation(db, "check the link"):
        return db.query(model.id).filter(model.slug == slug).first() is not None
