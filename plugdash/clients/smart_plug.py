from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

import httpx

from plugdash.models.smart_plug import AggregatedBucket, QueryParameters, RawSample
from plugdash.services.dates import parse_timestamp


class RetrievalError(RuntimeError):
    """The smart-plug data source could not deliver a usable response."""


def build_query(params: QueryParameters) -> dict[str, str]:
    if params.start_date is None or params.end_date is None:
        raise ValueError("startDate and endDate are required")
    query = {
        "startDate": params.start_date.isoformat(),
        "endDate": params.end_date.isoformat(),
        "dataType": params.data_type,
    }
    if params.data_type == "aggregated":
        query["aggregationType"] = params.aggregation_type
    return query


class SmartPlugClient:
    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str,
        timeout_seconds: float,
        path: str = "/api/smart-plug",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._path = path
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(
        self, params: QueryParameters
    ) -> list[RawSample] | list[AggregatedBucket]:
        try:
            resp = await self._client.get(self._path, params=build_query(params))
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RetrievalError(f"Smart-plug request failed: {e}") from e

        entries = self._extract_entries(payload)
        try:
            if params.data_type == "deviceData":
                return [_raw_sample(entry) for entry in entries]
            return [_bucket(entry) for entry in entries]
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise RetrievalError("Unexpected smart-plug record shape") from e

    @staticmethod
    def _extract_entries(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, list):
            raise RetrievalError("Smart-plug response is not a JSON array")
        for entry in payload:
            if not isinstance(entry, dict):
                raise RetrievalError("Unexpected smart-plug record shape")
        return payload


def _time(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        # Epoch milliseconds.
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str):
        raise TypeError(f"Unsupported timestamp: {value!r}")
    return parse_timestamp(value)


def _float(v: Any) -> float:
    if v is None or v == "":
        return 0.0
    value = float(v)
    if not math.isfinite(value):
        raise ValueError(f"Non-finite reading: {v!r}")
    return value


def _count(v: Any) -> int:
    if v is None or v == "":
        return 0
    return max(int(_float(v)), 0)


def _str(v: Any) -> str:
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


def _raw_sample(entry: dict[str, Any]) -> RawSample:
    return RawSample(
        update_time=_time(entry["updateTime"]),
        country=_str(entry.get("country")),
        town=_str(entry.get("town")),
        current=_float(entry.get("current")),
        switch_status=_str(entry.get("switchStatus")),
        volt=_float(entry.get("volt")),
        watts=_float(entry.get("watts")),
    )


def _bucket(entry: dict[str, Any]) -> AggregatedBucket:
    return AggregatedBucket(
        time=_time(entry["time"]),
        volt=_float(entry.get("volt")),
        current=_float(entry.get("current")),
        watts=_float(entry.get("watts")),
        max_watts=_float(entry.get("maxWatts")),
        min_watts=_float(entry.get("minWatts")),
        count=_count(entry.get("count")),
        duration_in_seconds=_count(entry.get("durationInSeconds")),
        watthours=_float(entry.get("watthours")),
    )
