from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

from plugdash.models.smart_plug import AggregatedBucket, RawSample
from plugdash.services.dates import format_timestamp
from plugdash.services.units import to_display

DEVICE_FIELDS: tuple[str, ...] = (
    "time",
    "country",
    "town",
    "current",
    "switchStatus",
    "volt",
    "watts",
)

AGGREGATED_FIELDS: tuple[str, ...] = (
    "time",
    "avgWatts",
    "maxWatts",
    "minWatts",
    "avgVoltage",
    "avgCurrent",
    "count",
    "durationInSeconds",
    "wh",
    "kWh",
)

_DEVICE_COMPACT = frozenset({"time", "current", "volt", "watts"})
_DEVICE_ALL = frozenset(DEVICE_FIELDS)

# (exclusive upper width bound, device fields, aggregated fields)
BREAKPOINTS: tuple[tuple[int, frozenset[str], frozenset[str]], ...] = (
    (576, _DEVICE_COMPACT, frozenset({"time", "wh", "kWh"})),
    (768, _DEVICE_COMPACT, frozenset({"time", "avgCurrent", "wh", "kWh"})),
    (
        992,
        _DEVICE_ALL,
        frozenset({"time", "avgWatts", "avgVoltage", "avgCurrent", "wh", "kWh"}),
    ),
    (
        1200,
        _DEVICE_ALL,
        frozenset(
            {
                "time",
                "avgWatts",
                "maxWatts",
                "minWatts",
                "avgVoltage",
                "avgCurrent",
                "wh",
                "kWh",
            }
        ),
    ),
)


@dataclass(frozen=True)
class ColumnVisibility:
    device: frozenset[str]
    aggregated: frozenset[str]


def visible_fields(viewport_width: int) -> ColumnVisibility:
    for upper, device, aggregated in BREAKPOINTS:
        if viewport_width < upper:
            return ColumnVisibility(device=device, aggregated=aggregated)
    return ColumnVisibility(device=_DEVICE_ALL, aggregated=frozenset(AGGREGATED_FIELDS))


def breakpoint_index(viewport_width: int) -> int:
    """Index of the breakpoint band a width falls in (0..4)."""
    for idx, (upper, _, _) in enumerate(BREAKPOINTS):
        if viewport_width < upper:
            return idx
    return len(BREAKPOINTS)


@dataclass(frozen=True)
class ColumnDescriptor:
    field: str
    name: str
    accessor: Callable[[int, Any], Any]
    sortable: bool = True
    visible: bool = True


def _fixed(value: float | None) -> str:
    # Missing and zero readings render as a bare 0.
    if not value:
        return "0"
    return f"{value:.2f}"


def device_columns(
    visibility: ColumnVisibility,
    granularity: str,
    *,
    tz: tzinfo | None = None,
) -> list[ColumnDescriptor]:
    shown = visibility.device

    def col(field: str, name: str, accessor: Callable[[int, RawSample], Any]):
        return ColumnDescriptor(field=field, name=name, accessor=accessor, visible=field in shown)

    return [
        col("time", "Time", lambda _, r: format_timestamp(r.update_time, granularity, tz=tz)),
        col("country", "Country", lambda _, r: r.country),
        col("town", "Town", lambda _, r: r.town),
        col("current", "Current", lambda _, r: _fixed(r.current)),
        col("switchStatus", "Status", lambda _, r: r.switch_status),
        col("volt", "Voltage", lambda _, r: _fixed(r.volt)),
        col("watts", "Watts", lambda _, r: f"{r.watts:.2f}"),
    ]


def aggregated_columns(
    visibility: ColumnVisibility,
    granularity: str,
    *,
    tz: tzinfo | None = None,
) -> list[ColumnDescriptor]:
    shown = visibility.aggregated

    def col(
        field: str,
        name: str,
        accessor: Callable[[int, AggregatedBucket], Any],
        *,
        visible_as: str | None = None,
    ):
        return ColumnDescriptor(
            field=field,
            name=name,
            accessor=accessor,
            visible=(visible_as or field) in shown,
        )

    return [
        col("index", "#", lambda i, _: i + 1, visible_as="time"),
        col("time", "Time", lambda _, b: format_timestamp(b.time, granularity, tz=tz)),
        col("avgVoltage", "Avg Voltage", lambda _, b: _fixed(b.volt)),
        col("avgCurrent", "Avg Current", lambda _, b: _fixed(b.current)),
        col("avgWatts", "Avg Watts", lambda _, b: _fixed(b.watts)),
        col("maxWatts", "Max Watts", lambda _, b: _fixed(b.max_watts)),
        col("minWatts", "Min Watts", lambda _, b: _fixed(b.min_watts)),
        col("count", "Count", lambda _, b: b.count),
        col("durationInSeconds", "Duration (Seconds)", lambda _, b: b.duration_in_seconds),
        col("wh", "Wh", lambda _, b: _fixed(b.watthours)),
        col("kWh", "kWh", lambda _, b: _fixed(to_display(b.watthours, "kWh"))),
    ]


def render_rows(
    columns: Sequence[ColumnDescriptor], records: Sequence[Any]
) -> list[dict[str, Any]]:
    shown = [c for c in columns if c.visible]
    return [{c.field: c.accessor(i, r) for c in shown} for i, r in enumerate(records)]
