from datetime import datetime, timezone


def at(hour: int, minute: int = 0, day: int = 14) -> datetime:
    """UTC timestamp on a fixed test day."""
    return datetime(2026, 11, day, hour, minute, tzinfo=timezone.utc)
