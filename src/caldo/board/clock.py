# src/caldo/board/clock.py

"""Clock-string helpers shared by the board, the storage layer and the CLI."""

from __future__ import annotations

import math
import re
from datetime import date, datetime

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_clock(value: object) -> int | None:
    """
    Parse "HH:MM" (24h) into minutes since midnight.

    Returns None for anything that is not a valid 00:00-23:59 clock string,
    so callers can skip malformed entries instead of failing.
    """
    if not isinstance(value, str):
        return None
    m = _CLOCK_RE.match(value)
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def split_clock(value: object) -> tuple[int, int] | None:
    total = parse_clock(value)
    if total is None:
        return None
    return divmod(total, 60)


def format_clock(total_minutes: float | int | None) -> str:
    """
    Format minutes since midnight as "HH:MM".

    Negative, NaN or missing input is clamped to 0; values past midnight wrap.
    """
    if total_minutes is None:
        total = 0
    else:
        try:
            f = float(total_minutes)
        except (TypeError, ValueError):
            f = 0.0
        total = 0 if math.isnan(f) or f < 0 else int(f)
    total %= MINUTES_PER_DAY
    hour, minute = divmod(total, 60)
    return f"{hour:02d}:{minute:02d}"


def calculate_duration(start: object, end: object) -> int | None:
    """Minutes between two clock strings (may be negative); None if either is malformed."""
    s = parse_clock(start)
    e = parse_clock(end)
    if s is None or e is None:
        return None
    return e - s


def format_duration(duration: int) -> str:
    """90 -> "1h30m", 60 -> "1h", 45 -> "45m"."""
    hours, minutes = divmod(int(duration), 60)
    if hours > 0:
        return f"{hours}h{minutes}m" if minutes > 0 else f"{hours}h"
    return f"{int(duration)}m"


def format_date_key(day: date | datetime | None = None) -> str:
    """Storage key for a day: two-digit year, "yy-mm-dd"."""
    if day is None:
        day = date.today()
    return day.strftime("%y-%m-%d")


def is_date_key(value: str) -> bool:
    try:
        datetime.strptime(value, "%y-%m-%d")
    except (TypeError, ValueError):
        return False
    return True


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)
