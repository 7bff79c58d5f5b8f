from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from plugdash.models.smart_plug import AggregatedBucket, Unit
from plugdash.services.units import to_display

MA_PER_A = 1000.0


@dataclass(frozen=True)
class MetricStats:
    min: float
    max: float
    avg: float


@dataclass(frozen=True)
class EnergyStats:
    total: float
    avg: float


@dataclass(frozen=True)
class SummaryStatistics:
    unit: Unit
    buckets: int
    energy: EnergyStats
    power: MetricStats
    current: MetricStats
    voltage: MetricStats


@dataclass(frozen=True)
class SummaryCard:
    title: str
    lines: list[str]
    footer: str


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def summarize(
    buckets: Sequence[AggregatedBucket], unit: Unit
) -> SummaryStatistics | None:
    """Period statistics across aggregated buckets.

    Returns ``None`` for an empty sequence. Power max/min come from each
    bucket's own ``max_watts``/``min_watts``; averages are unweighted means
    of the per-bucket averages. Current is reported in amperes.
    """
    if not buckets:
        return None

    energy = [to_display(b.watthours, unit) for b in buckets]
    total = sum(energy)
    amps = [b.current / MA_PER_A for b in buckets]
    volts = [b.volt for b in buckets]

    return SummaryStatistics(
        unit=unit,
        buckets=len(buckets),
        energy=EnergyStats(total=total, avg=total / len(buckets)),
        power=MetricStats(
            min=min(b.min_watts for b in buckets),
            max=max(b.max_watts for b in buckets),
            avg=_mean([b.watts for b in buckets]),
        ),
        current=MetricStats(min=min(amps), max=max(amps), avg=_mean(amps)),
        voltage=MetricStats(min=min(volts), max=max(volts), avg=_mean(volts)),
    )


def fmt2(value: float) -> str:
    return f"{value:.2f}"


def _min_max_avg_lines(stats: MetricStats, suffix: str) -> list[str]:
    return [
        f"Max: {fmt2(stats.max)} {suffix}",
        f"Min: {fmt2(stats.min)} {suffix}",
        f"Avg: {fmt2(stats.avg)} {suffix}",
    ]


def summary_cards(stats: SummaryStatistics, granularity: str) -> list[SummaryCard]:
    period_footer = "Max, Min & Avg for the period"
    return [
        SummaryCard(
            title="Energy",
            lines=[
                f"Total: {fmt2(stats.energy.total)} {stats.unit}",
                f"Avg: {fmt2(stats.energy.avg)} {stats.unit}",
            ],
            footer=f"Aggregated per {granularity} for the period",
        ),
        SummaryCard(
            title="Power",
            lines=_min_max_avg_lines(stats.power, "W"),
            footer=period_footer,
        ),
        SummaryCard(
            title="Current",
            lines=_min_max_avg_lines(stats.current, "A"),
            footer=period_footer,
        ),
        SummaryCard(
            title="Voltage",
            lines=_min_max_avg_lines(stats.voltage, "V"),
            footer=period_footer,
        ),
    ]
