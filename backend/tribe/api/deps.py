"""
Shared route dependencies.

Participant identified by X-Participant-Token header or ?participant_token= (client-generated,
persisted by the caller, unauthenticated).
"""
from fastapi import Header, Query

from tribe.core.constants import PARTICIPANT_TOKEN_HEADER


def participant_token(
    x_participant_token: str | None = Header(None, alias=PARTICIPANT_TOKEN_HEADER),
    participant_token: str | None = Query(None),
) -> str | None:
    return (x_participant_token or participant_token or "").strip() or None
