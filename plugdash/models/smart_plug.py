from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

DataType = Literal["aggregated", "deviceData"]
Granularity = Literal["minute", "hour", "day", "month", "year"]
Unit = Literal["Wh", "kWh"]

GRANULARITIES: tuple[str, ...] = ("minute", "hour", "day", "month", "year")


@dataclass(frozen=True)
class RawSample:
    update_time: datetime
    country: str
    town: str
    current: float
    switch_status: str
    volt: float
    watts: float


@dataclass(frozen=True)
class AggregatedBucket:
    time: datetime
    volt: float
    current: float
    watts: float
    max_watts: float
    min_watts: float
    count: int
    duration_in_seconds: int
    watthours: float


@dataclass(frozen=True)
class QueryParameters:
    start_date: date | None
    end_date: date | None
    data_type: DataType = "aggregated"
    aggregation_type: Granularity = "hour"

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None
