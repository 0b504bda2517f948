"""
Planning workload config. .env is the source of truth; these defaults apply only when
the env var is unset. All values read at import time.

Env vars: TRIBE_MIN_OVERLAP_MINUTES, TRIBE_MAX_OVERLAP_CANDIDATES,
TRIBE_SYNC_INTERVAL_SECONDS, TRIBE_SLUG_LENGTH.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load backend/.env so scripts and tests that import planning_config see the same values as the app
_backend_dir = Path(__file__).resolve().parent.parent.parent
load_dotenv(_backend_dir / ".env", override=False)  # no-op if file missing

_log = logging.getLogger(__name__)


def _int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            _log.warning("%s=%r is not an integer; using %s", key, raw, default)
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


def _float(key: str, default: float, min_val: float | None = None) -> float:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = float(raw.strip())
        except ValueError:
            _log.warning("%s=%r is not a number; using %s", key, raw, default)
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    return v


# Overlaps shorter than this are not actionable meeting slots
MIN_OVERLAP_MINUTES = _int("TRIBE_MIN_OVERLAP_MINUTES", 30, min_val=1)
# Keep the candidate list reviewable
MAX_OVERLAP_CANDIDATES = _int("TRIBE_MAX_OVERLAP_CANDIDATES", 8, min_val=1, max_val=50)
# SyncLoop cadence; staleness is bounded by this plus network latency
SYNC_INTERVAL_SECONDS = _float("TRIBE_SYNC_INTERVAL_SECONDS", 2.0, min_val=0.1)
SLUG_LENGTH = _int("TRIBE_SLUG_LENGTH", 10, min_val=6, max_val=32)
