from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def iso(ts: datetime | None) -> str | None:
    return ts.isoformat() if ts is not None else None
