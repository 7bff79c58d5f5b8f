from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from plugdash.models.smart_plug import QueryParameters
from plugdash.services.view_state import DashboardSnapshot


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueryParams(CamelModel):
    start_date: date | None = None
    end_date: date | None = None
    data_type: Literal["aggregated", "deviceData"] = "aggregated"
    aggregation_type: Literal["minute", "hour", "day", "month", "year"] = "hour"

    def to_model(self) -> QueryParameters:
        return QueryParameters(
            start_date=self.start_date,
            end_date=self.end_date,
            data_type=self.data_type,
            aggregation_type=self.aggregation_type,
        )

    @classmethod
    def from_model(cls, params: QueryParameters) -> "QueryParams":
        return cls(
            start_date=params.start_date,
            end_date=params.end_date,
            data_type=params.data_type,
            aggregation_type=params.aggregation_type,
        )


class UnitUpdate(BaseModel):
    unit: Literal["Wh", "kWh"] | None = None


class ColumnVisibilityRead(BaseModel):
    width: int = Field(ge=0)
    device: list[str]
    aggregated: list[str]


class ColumnRead(CamelModel):
    field: str
    name: str
    sortable: bool = True
    visible: bool = True


class TableRead(BaseModel):
    title: str
    columns: list[ColumnRead]
    rows: list[dict[str, Any]]


class SummaryCardRead(BaseModel):
    title: str
    lines: list[str]
    footer: str


class ChartSeriesRead(BaseModel):
    name: str
    data: list[float]


class ChartRead(CamelModel):
    kind: Literal["line", "bar"]
    categories: list[str]
    series: list[ChartSeriesRead]
    y_axis_title: str
    title: str
    y_axis_decimals: int = 2
    zoom_enabled: bool = False
    data_labels_enabled: bool = False
    tooltip_enabled: bool = True
    height: int = 350


class DashboardRead(CamelModel):
    params: QueryParams
    unit: Literal["Wh", "kWh"]
    loading: bool
    error: str | None = None
    viewport_width: int = Field(ge=0)
    record_count: int = Field(ge=0)
    summary: list[SummaryCardRead] | None = None
    chart: ChartRead | None = None
    table: TableRead

    @classmethod
    def from_snapshot(cls, snap: DashboardSnapshot) -> "DashboardRead":
        state = snap.state
        return cls(
            params=QueryParams.from_model(state.params),
            unit=state.unit,
            loading=state.loading,
            error=state.error,
            viewport_width=state.viewport_width,
            record_count=len(snap.table.rows),
            summary=(
                [SummaryCardRead.model_validate(c.__dict__) for c in snap.cards]
                if snap.cards is not None
                else None
            ),
            chart=(
                ChartRead(
                    kind=snap.chart.kind,
                    categories=snap.chart.categories,
                    series=[ChartSeriesRead.model_validate(s.__dict__) for s in snap.chart.series],
                    y_axis_title=snap.chart.y_axis_title,
                    title=snap.chart.title,
                    y_axis_decimals=snap.chart.y_axis_decimals,
                    zoom_enabled=snap.chart.zoom_enabled,
                    data_labels_enabled=snap.chart.data_labels_enabled,
                    tooltip_enabled=snap.chart.tooltip_enabled,
                    height=snap.chart.height,
                )
                if snap.chart is not None
                else None
            ),
            table=TableRead(
                title=snap.table.title,
                columns=[
                    ColumnRead(field=c.field, name=c.name, sortable=c.sortable, visible=c.visible)
                    for c in snap.table.columns
                ],
                rows=snap.table.rows,
            ),
        )
