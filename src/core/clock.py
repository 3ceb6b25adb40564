"""Timestamps and time-based ids in the format the spreadsheet stores."""

import time
from datetime import UTC, datetime


_last_id = 0


def now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def time_based_id() -> str:
    """Millisecond epoch id, bumped past the previous one if two land in the same millisecond."""
    global _last_id
    _last_id = max(time.time_ns() // 1_000_000, _last_id + 1)
    return str(_last_id)
