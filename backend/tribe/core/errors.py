"""
Centralized error handling for planning operations.
Domain exceptions, a status-code table and a reusable helper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TribeError(Exception):
    """Base for errors that surface verbatim to the caller."""


class ValidationError(TribeError):
    """Missing display name, non-chronological window, malformed timestamp, unknown enum value."""


class NotFoundError(TribeError):
    """Slug (or item) does not resolve."""


class AuthorizationError(TribeError):
    """Caller may not perform this change (e.g. unclaim by a non-claimant)."""


class PersistenceError(TribeError):
    """Record store read/write failure."""


# ---------------------------------------------------------------------------
# Constants: status codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_SERVICE_UNAVAILABLE = 503  # store down or write rejected
STATUS_INTERNAL_ERROR = 500


# List of (exception type, status_code). First match wins.
ERROR_STATUS_RULES: list[tuple[type[TribeError], int]] = [
    (ValidationError, STATUS_BAD_REQUEST),
    (NotFoundError, STATUS_NOT_FOUND),
    (AuthorizationError, STATUS_FORBIDDEN),
    (PersistenceError, STATUS_SERVICE_UNAVAILABLE),
]


def tribe_error_to_http(exc: TribeError) -> HTTPException:
    """
    Map a domain exception into an HTTPException.
    Uses ERROR_STATUS_RULES; unknown subclasses become 500 with the exception message.
    """
    msg = str(exc)
    for exc_type, status_code in ERROR_STATUS_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=msg)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=msg)


@contextmanager
def store_operation(db: Session, action: str) -> Iterator[None]:
    """
    Run one store operation; on SQLAlchemy failure roll back and raise PersistenceError.
    Every mutation is a single statement, so there is nothing else to unwind.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.warning("Store operation failed (%s): %s", action, e)
        db.rollback()
        raise PersistenceError(f"Could not {action}. Please try again.") from e
