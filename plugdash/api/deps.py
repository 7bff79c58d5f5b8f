from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Query, Request

from plugdash.core.config import Settings
from plugdash.services.scheduler import FetchScheduler


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_scheduler(request: Request) -> FetchScheduler:
    return request.app.state.scheduler


MAX_VIEWPORT_WIDTH = 10_000


def _int_or_none(v: str | None) -> int | None:
    if v is None:
        return None
    try:
        parsed = int(float(v))
    except (ValueError, OverflowError):
        return None
    return min(max(parsed, 0), MAX_VIEWPORT_WIDTH)


def get_viewport_width(
    settings: Annotated[Settings, Depends(get_settings)],
    width: Annotated[int | None, Query(ge=0, le=MAX_VIEWPORT_WIDTH)] = None,
    sec_ch_viewport_width: Annotated[str | None, Header()] = None,
    viewport_width: Annotated[str | None, Header()] = None,
) -> int:
    """Width of the caller's viewport in CSS pixels.

    Taken from the ``width`` query parameter, then the viewport client hints,
    then the configured default.
    """
    if width is not None:
        return width
    for hint in (sec_ch_viewport_width, viewport_width):
        parsed = _int_or_none(hint)
        if parsed is not None:
            return parsed
    return settings.default_viewport_width


Scheduler = Annotated[FetchScheduler, Depends(get_scheduler)]
ViewportWidth = Annotated[int, Depends(get_viewport_width)]
