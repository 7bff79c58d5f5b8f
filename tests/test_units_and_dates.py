from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from plugdash.services.dates import format_timestamp
from plugdash.services.units import other_unit, to_display


@pytest.mark.parametrize("value", [0.0, 1.0, 250.0, 1234.5, 1e6])
def test_kwh_is_wh_over_thousand(value: float) -> None:
    assert to_display(value, "Wh") == value
    assert to_display(value, "kWh") == pytest.approx(to_display(value, "Wh") / 1000)


def test_other_unit_flips() -> None:
    assert other_unit("Wh") == "kWh"
    assert other_unit("kWh") == "Wh"


TS = datetime(2024, 5, 1, 13, 7, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("granularity", "expected"),
    [
        ("minute", "24-5-1 13:07"),
        ("hour", "24-5-1 13"),
        ("day", "24-5-1"),
        ("month", "24-05"),
        ("year", "2024"),
        ("fortnight", "24-5-1"),
        ("", "24-5-1"),
    ],
)
def test_format_patterns(granularity: str, expected: str) -> None:
    assert format_timestamp(TS, granularity) == expected


def test_format_pads_hours_and_minutes_only() -> None:
    ts = datetime(2009, 11, 23, 4, 5)
    assert format_timestamp(ts, "minute") == "09-11-23 04:05"
    assert format_timestamp(ts, "month") == "09-11"


def test_format_accepts_iso_strings_and_converts_zone() -> None:
    assert format_timestamp("2024-05-01T13:07:00Z", "minute") == "24-5-1 13:07"
    oslo = ZoneInfo("Europe/Oslo")
    assert format_timestamp("2024-05-01T13:07:00Z", "minute", tz=oslo) == "24-5-1 15:07"


def test_format_does_not_touch_input() -> None:
    ts = datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc)
    format_timestamp(ts, "hour", tz=ZoneInfo("Asia/Tokyo"))
    assert ts == datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc)
    assert ts.tzinfo is timezone.utc
