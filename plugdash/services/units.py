from __future__ import annotations

from plugdash.models.smart_plug import Unit

WH_PER_KWH = 1000.0


def to_display(value_wh: float, unit: Unit) -> float:
    """Convert a watt-hour reading to the requested display unit."""
    if unit == "kWh":
        return value_wh / WH_PER_KWH
    return value_wh


def other_unit(unit: Unit) -> Unit:
    return "Wh" if unit == "kWh" else "kWh"
