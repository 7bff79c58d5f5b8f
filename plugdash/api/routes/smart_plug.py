from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from plugdash.api.deps import Scheduler, ViewportWidth
from plugdash.schemas.smart_plug import (
    ColumnVisibilityRead,
    DashboardRead,
    QueryParams,
    UnitUpdate,
)
from plugdash.services.columns import AGGREGATED_FIELDS, DEVICE_FIELDS, visible_fields

router = APIRouter(prefix="/smart-plug")


@router.get("/dashboard", response_model=DashboardRead)
async def dashboard(scheduler: Scheduler, width: ViewportWidth) -> DashboardRead:
    return DashboardRead.from_snapshot(scheduler.snapshot(width=width))


@router.get("/params", response_model=QueryParams)
async def read_params(scheduler: Scheduler) -> QueryParams:
    return QueryParams.from_model(scheduler.state.params)


@router.put("/params", response_model=DashboardRead)
async def update_params(
    payload: QueryParams, scheduler: Scheduler, width: ViewportWidth
) -> DashboardRead:
    if payload.start_date and payload.end_date and payload.start_date > payload.end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="'startDate' must be <= 'endDate'",
        )
    await scheduler.set_params(payload.to_model())
    return DashboardRead.from_snapshot(scheduler.snapshot(width=width))


@router.post("/unit", response_model=DashboardRead)
async def update_unit(
    scheduler: Scheduler, width: ViewportWidth, payload: UnitUpdate | None = None
) -> DashboardRead:
    scheduler.toggle_unit(payload.unit if payload is not None else None)
    return DashboardRead.from_snapshot(scheduler.snapshot(width=width))


@router.post("/refresh", response_model=DashboardRead)
async def refresh(scheduler: Scheduler, width: ViewportWidth) -> DashboardRead:
    await scheduler.refresh()
    return DashboardRead.from_snapshot(scheduler.snapshot(width=width))


@router.get("/columns", response_model=ColumnVisibilityRead)
async def columns(width: ViewportWidth) -> ColumnVisibilityRead:
    visibility = visible_fields(width)
    return ColumnVisibilityRead(
        width=width,
        device=[f for f in DEVICE_FIELDS if f in visibility.device],
        aggregated=[f for f in AGGREGATED_FIELDS if f in visibility.aggregated],
    )
