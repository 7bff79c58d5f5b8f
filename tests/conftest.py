from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from plugdash.core.config import Settings
from plugdash.factory import create_app
from tests.fakes import FakeSmartPlugSource


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="DEBUG",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        smart_plug_base_url="http://example.com",
        smart_plug_timeout_seconds=1.0,
        smart_plug_user_agent="test-agent",
        refresh_interval_seconds=3600.0,
        default_data_type="aggregated",
        default_aggregation_type="hour",
        default_unit="Wh",
        default_viewport_width=1200,
    )


@pytest.fixture()
def source() -> FakeSmartPlugSource:
    return FakeSmartPlugSource()


@pytest.fixture()
def client(settings: Settings, source: FakeSmartPlugSource) -> TestClient:
    app = create_app(settings, source_factory=lambda _: source)
    with TestClient(app) as client:
        yield client
