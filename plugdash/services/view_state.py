from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import tzinfo
from typing import Any, Union

from plugdash.models.smart_plug import (
    AggregatedBucket,
    DataType,
    QueryParameters,
    RawSample,
    Unit,
)
from plugdash.services.columns import (
    ColumnDescriptor,
    ColumnVisibility,
    aggregated_columns,
    device_columns,
    render_rows,
    visible_fields,
)
from plugdash.services.series import ChartConfig, build_chart
from plugdash.services.statistics import SummaryCard, SummaryStatistics, summarize, summary_cards
from plugdash.services.units import other_unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    params: QueryParameters
    device_data: tuple[RawSample, ...] = ()
    aggregated_data: tuple[AggregatedBucket, ...] = ()
    loading: bool = False
    error: str | None = None
    unit: Unit = "Wh"
    viewport_width: int = 1200
    latest_request_id: int = 0


@dataclass(frozen=True)
class ParamsChanged:
    params: QueryParameters


@dataclass(frozen=True)
class FetchStarted:
    request_id: int


@dataclass(frozen=True)
class FetchSucceeded:
    request_id: int
    data_type: DataType
    records: tuple[Any, ...]


@dataclass(frozen=True)
class FetchFailed:
    request_id: int
    message: str


@dataclass(frozen=True)
class ViewportChanged:
    width: int


@dataclass(frozen=True)
class UnitToggled:
    unit: Unit | None = None


ViewEvent = Union[
    ParamsChanged, FetchStarted, FetchSucceeded, FetchFailed, ViewportChanged, UnitToggled
]


def _is_stale(state: ViewState, request_id: int) -> bool:
    return request_id != state.latest_request_id


def reduce(state: ViewState, event: ViewEvent) -> ViewState:
    """Return the state that follows ``event``.

    This is the only place the data slots are written, so at most one of
    ``device_data``/``aggregated_data`` is ever populated. Results from a
    superseded request are dropped unchanged.
    """
    if isinstance(event, ParamsChanged):
        # Request ids start at 1, so 0 makes every in-flight response stale.
        return replace(state, params=event.params, loading=False, latest_request_id=0)

    if isinstance(event, FetchStarted):
        return replace(state, loading=True, error=None, latest_request_id=event.request_id)

    if isinstance(event, FetchSucceeded):
        if _is_stale(state, event.request_id) or event.data_type != state.params.data_type:
            logger.debug("Discarding stale %s response #%d", event.data_type, event.request_id)
            return state
        if event.data_type == "deviceData":
            return replace(
                state, device_data=tuple(event.records), aggregated_data=(), loading=False
            )
        return replace(
            state, aggregated_data=tuple(event.records), device_data=(), loading=False
        )

    if isinstance(event, FetchFailed):
        if _is_stale(state, event.request_id):
            logger.debug("Discarding stale failure #%d", event.request_id)
            return state
        return replace(state, error=event.message, loading=False)

    if isinstance(event, ViewportChanged):
        return replace(state, viewport_width=max(int(event.width), 0))

    if isinstance(event, UnitToggled):
        return replace(state, unit=event.unit or other_unit(state.unit))

    raise TypeError(f"Unsupported view event: {event!r}")


@dataclass(frozen=True)
class TableView:
    title: str
    columns: list[ColumnDescriptor]
    rows: list[dict[str, Any]]


@dataclass(frozen=True)
class DashboardSnapshot:
    state: ViewState
    visibility: ColumnVisibility
    statistics: SummaryStatistics | None
    cards: list[SummaryCard] | None
    chart: ChartConfig | None
    table: TableView


def derive(state: ViewState, *, tz: tzinfo | None = None) -> DashboardSnapshot:
    """Compute every display artifact for one state snapshot."""
    params = state.params
    granularity = params.aggregation_type
    visibility = visible_fields(state.viewport_width)

    if params.data_type == "deviceData":
        columns = device_columns(visibility, granularity, tz=tz)
        table = TableView(
            title="Device Data", columns=columns, rows=render_rows(columns, state.device_data)
        )
        return DashboardSnapshot(
            state=state,
            visibility=visibility,
            statistics=None,
            cards=None,
            chart=None,
            table=table,
        )

    buckets = state.aggregated_data
    stats = summarize(buckets, state.unit)
    columns = aggregated_columns(visibility, granularity, tz=tz)
    return DashboardSnapshot(
        state=state,
        visibility=visibility,
        statistics=stats,
        cards=summary_cards(stats, granularity) if stats is not None else None,
        chart=build_chart(buckets, state.unit, granularity, tz=tz),
        table=TableView(
            title="Aggregated Data", columns=columns, rows=render_rows(columns, buckets)
        ),
    )
