"""Timestamp parsing and normalization. Everything the core compares is tz-aware UTC."""
from __future__ import annotations

from datetime import datetime, timezone

from tribe.core.errors import ValidationError


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (SQLite drops tz info) are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: datetime | str | None, field: str = "timestamp") -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid date/time for {field}.")
    raw = value.strip()
    # fromisoformat only accepts a trailing Z from 3.11 on
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(raw))
    except ValueError as e:
        raise ValidationError(f"Invalid date/time for {field}.") from e


def parse_window(start: datetime | str, end: datetime | str) -> tuple[datetime, datetime]:
    """Parse both ends; end must be strictly after start."""
    start_dt = parse_timestamp(start, "start")
    end_dt = parse_timestamp(end, "end")
    if end_dt <= start_dt:
        raise ValidationError("End must be after start.")
    return start_dt, end_dt


def iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value else None
