from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Any
from zoneinfo import ZoneInfo

LOCAL_TZ = ZoneInfo("America/New_York")

SECONDS_PER_DAY = 86400

# ORI returns epoch seconds; anything this large is milliseconds.
_MILLISECOND_THRESHOLD = 4_000_000_000


def now_utc() -> datetime:
    """Return timezone-aware UTC timestamp."""
    return datetime.now(tz=UTC)


def today_local() -> date:
    """Return today's date in the county's local timezone."""
    return datetime.now(tz=LOCAL_TZ).date()


def coerce_timestamp(value: Any) -> int:
    """Coerce an ORI ``RecordDate`` value to integer epoch seconds (0 if unusable)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return 0
        ts = value / 1000 if value > _MILLISECOND_THRESHOLD else value
        return int(ts)
    return 0


def format_record_date(timestamp: int) -> str:
    """Render epoch seconds as the MM/DD/YYYY display date (local time)."""
    if not timestamp:
        return ""
    try:
        return datetime.fromtimestamp(timestamp, tz=LOCAL_TZ).strftime("%m/%d/%Y")
    except (OverflowError, OSError, ValueError):
        return ""


def format_api_date(value: date) -> str:
    """Format a date the way the ORI search API expects (MM/DD/YYYY)."""
    return value.strftime("%m/%d/%Y")


def years_before(value: date, years: int) -> date:
    """Same calendar day ``years`` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        return value.replace(year=value.year - years, day=28)


def days_between(later_ts: int, earlier_ts: int) -> float:
    """Fractional days between two epoch-second timestamps."""
    return (later_ts - earlier_ts) / SECONDS_PER_DAY
