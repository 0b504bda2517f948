"""
Overlap engine: pairwise window intersections -> ranked, bounded meeting candidates.

Pure functions, no I/O. Pairwise O(n^2) is fine for group sizes in the tens.
Pipeline: intersect every unordered pair -> drop short overlaps -> dedupe exact
(start, end) -> soonest first -> cap.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from itertools import combinations
from typing import Iterable

from tribe.core.constants import MAX_OVERLAP_CANDIDATES, MIN_OVERLAP_MINUTES
from tribe.core.timeutil import as_utc, iso


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime
    participant: str | None = None


@dataclass
class Candidate:
    start: datetime
    end: datetime
    participants: list[str] = field(default_factory=list)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def minutes(self) -> int:
        return round(self.duration.total_seconds() / 60)

    def to_dict(self) -> dict:
        return {
            "start_ts": iso(self.start),
            "end_ts": iso(self.end),
            "minutes": self.minutes,
            "participants": self.participants,
        }


def overlap(a: Window, b: Window) -> tuple[datetime, datetime] | None:
    """Intersection of two half-open windows, or None when they don't overlap."""
    start = max(a.start, b.start)
    end = min(a.end, b.end)
    if end > start:
        return start, end
    return None


def compute_overlaps(
    windows: Iterable[Window],
    min_minutes: int = MIN_OVERLAP_MINUTES,
    limit: int = MAX_OVERLAP_CANDIDATES,
) -> list[Candidate]:
    """
    Candidate meeting windows from every pair of submitted windows.

    Overlaps shorter than min_minutes are dropped. Identical (start, end) pairs
    collapse into one candidate whose participants are the union of contributors.
    Sorted by start (then end) and truncated to limit. Fewer than two windows
    yields an empty list.
    """
    normalized = [Window(as_utc(w.start), as_utc(w.end), w.participant) for w in windows]
    min_duration = timedelta(minutes=min_minutes)
    by_bounds: dict[tuple[datetime, datetime], set[str]] = {}
    for a, b in combinations(normalized, 2):
        hit = overlap(a, b)
        if hit is None or hit[1] - hit[0] < min_duration:
            continue
        names = by_bounds.setdefault(hit, set())
        names.update(p for p in (a.participant, b.participant) if p)
    ranked = sorted(by_bounds.items(), key=lambda kv: kv[0])
    return [
        Candidate(start=start, end=end, participants=sorted(names))
        for (start, end), names in ranked[:limit]
    ]
