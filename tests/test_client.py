from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone

import httpx
import pytest

from plugdash.clients.smart_plug import RetrievalError, SmartPlugClient, build_query
from plugdash.models.smart_plug import QueryParameters

DAY = date(2024, 5, 1)

BUCKET = {
    "time": "2024-05-01T13:00:00.000Z",
    "volt": 230.1,
    "current": 420.0,
    "watts": 95.5,
    "maxWatts": 120.0,
    "minWatts": 80.0,
    "count": 60,
    "durationInSeconds": 3600,
    "watthours": 95.5,
}

SAMPLE = {
    "updateTime": "2024-05-01T13:05:00Z",
    "country": "NO",
    "town": "Oslo",
    "current": 415,
    "switchStatus": "on",
    "volt": 229.8,
    "watts": None,
}


def _client(handler) -> SmartPlugClient:
    return SmartPlugClient(
        base_url="http://plug.test",
        user_agent="test-agent",
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


def _fetch(handler, params: QueryParameters):
    async def run():
        client = _client(handler)
        try:
            return await client.fetch(params)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_query_includes_aggregation_only_for_aggregated() -> None:
    agg = QueryParameters(DAY, date(2024, 5, 2), "aggregated", "minute")
    assert build_query(agg) == {
        "startDate": "2024-05-01",
        "endDate": "2024-05-02",
        "dataType": "aggregated",
        "aggregationType": "minute",
    }
    dev = QueryParameters(DAY, DAY, "deviceData", "minute")
    assert "aggregationType" not in build_query(dev)


def test_fetch_aggregated_buckets() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[BUCKET])

    buckets = _fetch(handler, QueryParameters(DAY, DAY, "aggregated", "hour"))
    assert seen[0].url.path == "/api/smart-plug"
    assert seen[0].url.params["aggregationType"] == "hour"
    assert seen[0].headers["User-Agent"] == "test-agent"

    (bucket,) = buckets
    assert bucket.time == datetime(2024, 5, 1, 13, tzinfo=timezone.utc)
    assert bucket.max_watts == 120.0
    assert bucket.duration_in_seconds == 3600
    assert bucket.watthours == 95.5


def test_fetch_device_samples_fills_missing_readings() -> None:
    samples = _fetch(
        lambda _: httpx.Response(200, json=[SAMPLE]),
        QueryParameters(DAY, DAY, "deviceData"),
    )
    assert samples[0].switch_status == "on"
    assert samples[0].current == 415.0
    assert samples[0].watts == 0.0


def test_empty_result_is_not_an_error() -> None:
    assert _fetch(lambda _: httpx.Response(200, json=[]), QueryParameters(DAY, DAY)) == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"data": []}),
        httpx.Response(200, json=[1, 2]),
        httpx.Response(200, json=[{"volt": 230}]),
        httpx.Response(200, json=[{"time": "yesterday"}]),
        httpx.Response(
            200,
            text='[{"time": "2024-05-01T13:00:00Z", "watthours": NaN}]',
            headers={"Content-Type": "application/json"},
        ),
        httpx.Response(
            200,
            text='[{"time": "2024-05-01T13:00:00Z", "count": Infinity}]',
            headers={"Content-Type": "application/json"},
        ),
    ],
)
def test_bad_responses_raise_retrieval_error(response: httpx.Response) -> None:
    with pytest.raises(RetrievalError):
        _fetch(lambda _: response, QueryParameters(DAY, DAY))


def test_transport_errors_raise_retrieval_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RetrievalError):
        _fetch(handler, QueryParameters(DAY, DAY))
