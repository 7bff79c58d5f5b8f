from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse

from plugdash.api.deps import Scheduler, ViewportWidth
from plugdash.models.smart_plug import GRANULARITIES, QueryParameters
from plugdash.schemas.smart_plug import DashboardRead
from plugdash.services.columns import BREAKPOINTS, breakpoint_index
from plugdash.services.units import other_unit
from plugdash.web.templates import templates

router = APIRouter()

GRANULARITY_LABELS = {
    "minute": "Per Minute",
    "hour": "Per Hour",
    "day": "Per Day",
    "month": "Per Month",
    "year": "Per Year",
}


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


@router.get("/", include_in_schema=False)
async def ui_index():
    return RedirectResponse("/ui/dashboard", status_code=303)


@router.get("/dashboard", include_in_schema=False)
async def dashboard_page(
    request: Request,
    scheduler: Scheduler,
    width: ViewportWidth,
    start_date: Annotated[str | None, Query(alias="startDate", max_length=10)] = None,
    end_date: Annotated[str | None, Query(alias="endDate", max_length=10)] = None,
    data_type: Annotated[
        Literal["aggregated", "deviceData"] | None, Query(alias="dataType")
    ] = None,
    aggregation_type: Annotated[
        Literal["minute", "hour", "day", "month", "year"] | None,
        Query(alias="aggregationType"),
    ] = None,
    unit: Annotated[Literal["Wh", "kWh"] | None, Query()] = None,
):
    form_error: str | None = None
    submitted = any(
        v is not None for v in (start_date, end_date, data_type, aggregation_type)
    )
    if submitted:
        current = scheduler.state.params
        params = QueryParameters(
            start_date=_parse_date(start_date),
            end_date=_parse_date(end_date),
            data_type=data_type or current.data_type,
            aggregation_type=aggregation_type or current.aggregation_type,
        )
        if params.has_date_range and params.start_date > params.end_date:
            form_error = "Start date must not be after end date."
        else:
            await scheduler.set_params(params)

    if unit is not None and unit != scheduler.state.unit:
        scheduler.toggle_unit(unit)

    view = DashboardRead.from_snapshot(scheduler.snapshot(width=width))
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "request": request,
            "title": "Smart Plug",
            "view": view,
            "form_error": form_error,
            "other_unit": other_unit(view.unit),
            "granularities": [(g, GRANULARITY_LABELS[g]) for g in GRANULARITIES],
            "breakpoints": [upper for upper, _, _ in BREAKPOINTS],
            "band": breakpoint_index(view.viewport_width),
            "chart_payload": view.chart.model_dump(by_alias=True) if view.chart else None,
        },
    )
