from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import tzinfo

from plugdash.models.smart_plug import AggregatedBucket, Unit
from plugdash.services.dates import format_timestamp
from plugdash.services.units import to_display

CHART_HEIGHT = 350


@dataclass(frozen=True)
class ChartSeries:
    name: str
    data: list[float]


@dataclass(frozen=True)
class ChartConfig:
    kind: str
    categories: list[str]
    series: list[ChartSeries]
    y_axis_title: str
    title: str
    y_axis_decimals: int = 2
    zoom_enabled: bool = False
    data_labels_enabled: bool = False
    tooltip_enabled: bool = True
    height: int = CHART_HEIGHT


def chart_kind(granularity: str) -> str:
    return "line" if granularity == "minute" else "bar"


def chart_title(unit: Unit, granularity: str) -> str:
    return f"{unit} Aggregation (Per {granularity.capitalize()})"


def build_chart(
    buckets: Sequence[AggregatedBucket],
    unit: Unit,
    granularity: str,
    *,
    tz: tzinfo | None = None,
) -> ChartConfig | None:
    if not buckets:
        return None
    return ChartConfig(
        kind=chart_kind(granularity),
        categories=[format_timestamp(b.time, granularity, tz=tz) for b in buckets],
        series=[ChartSeries(name=unit, data=[to_display(b.watthours, unit) for b in buckets])],
        y_axis_title=unit,
        title=chart_title(unit, granularity),
    )
