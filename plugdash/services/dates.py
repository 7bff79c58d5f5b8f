from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def parse_timestamp(value: str) -> datetime:
    # Example: "2024-05-01T13:00:00.000Z"
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def _short_day(dt: datetime) -> str:
    # YY-M-D: two-digit year, month and day without padding.
    return f"{dt:%y}-{dt.month}-{dt.day}"


def format_timestamp(
    timestamp: datetime | str,
    granularity: str,
    *,
    tz: ZoneInfo | timezone | None = None,
) -> str:
    """Render a bucket or sample time for the given aggregation granularity.

    ``minute`` -> ``YY-M-D HH:mm``, ``hour`` -> ``YY-M-D HH``,
    ``day`` -> ``YY-M-D``, ``month`` -> ``YY-MM``, ``year`` -> ``YYYY``.
    Anything else falls back to the day pattern. Aware timestamps are
    converted to ``tz`` first when one is given.
    """
    dt = parse_timestamp(timestamp) if isinstance(timestamp, str) else timestamp
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)

    if granularity == "minute":
        return f"{_short_day(dt)} {dt:%H:%M}"
    if granularity == "hour":
        return f"{_short_day(dt)} {dt:%H}"
    if granularity == "month":
        return f"{dt:%y-%m}"
    if granularity == "year":
        return f"{dt.year:04d}"
    return _short_day(dt)


def load_timezone(name: str | None) -> ZoneInfo | None:
    if not name:
        return None
    return ZoneInfo(name)
