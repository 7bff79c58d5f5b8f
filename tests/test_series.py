from __future__ import annotations

import pytest

from plugdash.services.series import build_chart
from tests.fakes import hourly_buckets


def test_minute_granularity_draws_a_line() -> None:
    chart = build_chart(hourly_buckets(2), "Wh", "minute")
    assert chart is not None
    assert chart.kind == "line"
    assert chart.title == "Wh Aggregation (Per Minute)"
    assert chart.categories == ["24-5-1 00:00", "24-5-1 01:00"]


@pytest.mark.parametrize("granularity", ["hour", "day", "month", "year"])
def test_coarser_granularities_draw_bars(granularity: str) -> None:
    chart = build_chart(hourly_buckets(1), "Wh", granularity)
    assert chart is not None
    assert chart.kind == "bar"


def test_series_named_by_unit_with_converted_values() -> None:
    chart = build_chart(hourly_buckets(3), "kWh", "day")
    assert chart is not None
    assert chart.y_axis_title == "kWh"
    assert chart.title == "kWh Aggregation (Per Day)"
    assert len(chart.series) == 1
    assert chart.series[0].name == "kWh"
    assert chart.series[0].data == pytest.approx([0.1, 0.2, 0.3])
    assert chart.categories == ["24-5-1", "24-5-1", "24-5-1"]
    assert (chart.zoom_enabled, chart.data_labels_enabled, chart.tooltip_enabled) == (
        False,
        False,
        True,
    )


def test_no_chart_without_buckets() -> None:
    assert build_chart([], "Wh", "hour") is None
