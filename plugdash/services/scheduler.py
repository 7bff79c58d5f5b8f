from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import tzinfo

from plugdash.clients.base import SmartPlugSource
from plugdash.models.smart_plug import QueryParameters, Unit
from plugdash.services.view_state import (
    DashboardSnapshot,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    ParamsChanged,
    UnitToggled,
    ViewEvent,
    ViewportChanged,
    ViewState,
    derive,
    reduce,
)

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Error fetching data"
DEFAULT_REFRESH_INTERVAL_SECONDS = 3600.0


class FetchScheduler:
    """Owns the dashboard view state and keeps it fed from the data source.

    A fetch is issued whenever the query parameters change and on a fixed
    timer while the scheduler is started. Every fetch is tagged with an
    increasing request id; the reducer drops responses that a newer fetch
    has superseded.
    """

    def __init__(
        self,
        *,
        source: SmartPlugSource,
        params: QueryParameters,
        unit: Unit = "Wh",
        viewport_width: int = 1200,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        tz: tzinfo | None = None,
    ) -> None:
        self._source = source
        self._interval = float(refresh_interval_seconds)
        self._tz = tz
        self._state = ViewState(params=params, unit=unit, viewport_width=viewport_width)
        self._next_request_id = 0
        self._timer: asyncio.Task[None] | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def dispatch(self, event: ViewEvent) -> ViewState:
        self._state = reduce(self._state, event)
        return self._state

    async def set_params(self, params: QueryParameters) -> ViewState:
        if params == self._state.params:
            return self._state
        self.dispatch(ParamsChanged(params))
        await self.refresh()
        return self._state

    def toggle_unit(self, unit: Unit | None = None) -> ViewState:
        return self.dispatch(UnitToggled(unit))

    def set_viewport(self, width: int) -> ViewState:
        if width == self._state.viewport_width:
            return self._state
        return self.dispatch(ViewportChanged(width))

    async def refresh(self) -> ViewState:
        params = self._state.params
        if not params.has_date_range:
            logger.debug("Skipping fetch: date range incomplete")
            return self._state

        self._next_request_id += 1
        request_id = self._next_request_id
        self.dispatch(FetchStarted(request_id))
        logger.debug(
            "Fetch #%d: %s %s..%s (%s)",
            request_id,
            params.data_type,
            params.start_date,
            params.end_date,
            params.aggregation_type,
        )

        try:
            records = await self._source.fetch(params)
        except Exception:  # noqa: BLE001 - any source failure is a retrieval failure
            logger.warning("Fetch #%d failed", request_id, exc_info=True)
            return self.dispatch(FetchFailed(request_id, FETCH_ERROR_MESSAGE))

        return self.dispatch(
            FetchSucceeded(request_id, data_type=params.data_type, records=tuple(records))
        )

    def snapshot(self, *, width: int | None = None) -> DashboardSnapshot:
        if width is not None:
            self.set_viewport(width)
        return derive(self._state, tz=self._tz)

    async def start(self) -> None:
        if self.running:
            return
        await self.refresh()
        self._timer = asyncio.create_task(self._run_timer(), name="smart-plug-refresh")
        logger.info("Smart-plug refresh armed every %.0fs", self._interval)

    async def stop(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await timer

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh()
            except Exception:
                logger.exception("Scheduled smart-plug refresh failed")
