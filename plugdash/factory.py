from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.trustedhost import TrustedHostMiddleware

from plugdash.api.router import api_router
from plugdash.clients.base import SmartPlugSource
from plugdash.clients.smart_plug import SmartPlugClient
from plugdash.core.config import Settings, load_settings
from plugdash.core.logging_setup import configure_logging
from plugdash.models.smart_plug import QueryParameters
from plugdash.services.dates import load_timezone
from plugdash.services.scheduler import FetchScheduler
from plugdash.web.router import ui_router

logger = logging.getLogger(__name__)

SourceFactory = Callable[[Settings], SmartPlugSource]


def create_smart_plug_client(settings: Settings) -> SmartPlugSource:
    return SmartPlugClient(
        base_url=str(settings.smart_plug_base_url),
        path=settings.smart_plug_path,
        user_agent=settings.smart_plug_user_agent,
        timeout_seconds=settings.smart_plug_timeout_seconds,
    )


def default_params(settings: Settings) -> QueryParameters:
    today = date.today()
    return QueryParameters(
        start_date=today,
        end_date=today,
        data_type=settings.default_data_type,
        aggregation_type=settings.default_aggregation_type,
    )


def create_app(
    settings: Settings | None = None,
    *,
    source_factory: SourceFactory = create_smart_plug_client,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        source = source_factory(settings)
        scheduler = FetchScheduler(
            source=source,
            params=default_params(settings),
            unit=settings.default_unit,
            viewport_width=settings.default_viewport_width,
            refresh_interval_seconds=settings.refresh_interval_seconds,
            tz=load_timezone(settings.display_timezone),
        )
        app.state.source = source
        app.state.scheduler = scheduler
        await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await source.aclose()
            logger.info("Smart-plug view torn down")

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Smart Plug Dashboard API",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Viewport-Width", "Sec-CH-Viewport-Width"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Accept-CH", "Sec-CH-Viewport-Width, Viewport-Width")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    async def root():
        return {"name": "plugdash", "status": "ok"}

    @app.get("/health", tags=["meta"])
    async def health(request: Request) -> dict[str, object]:
        state = request.app.state.scheduler.state
        return {
            "status": "degraded" if state.error else "ok",
            "loading": state.loading,
            "error": state.error,
        }

    app.include_router(api_router)
    app.include_router(ui_router)

    static_dir = Path(__file__).resolve().parent / "web" / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    return app
