"""
DC conductor sizing by the voltage-drop method.

    Vd = (2 × ρ × L × I) / A   →   A_min = (2 × ρ × L × I) / Vd_max

The factor 2 covers the outgoing and return conductor over the one-way
length L. The theoretical area is rounded up to the next standard size and
the drop and loss are reported for that size.
"""
from __future__ import annotations

from typing import Sequence

from shams.calculations.common import round2
from shams.knowledge.jordan_data import (
    COPPER_RESISTIVITY_OHM_MM2_PER_M,
    STANDARD_WIRE_SIZES_MM2,
)
from shams.models import WireSizeInput, WireSizeResult


def required_wire_area_mm2(current: float, voltage: float, distance: float, voltage_drop_percentage: float) -> float:
    """Theoretical copper cross-section (mm²) that keeps the drop at the limit."""
    max_voltage_drop = voltage * (voltage_drop_percentage / 100)
    return (2 * COPPER_RESISTIVITY_OHM_MM2_PER_M * distance * current) / max_voltage_drop


def select_standard_size(area_mm2: float, sizes: Sequence[float] = STANDARD_WIRE_SIZES_MM2) -> float:
    # Largest size when nothing in the table is big enough
    for size in sizes:
        if size >= area_mm2:
            return size
    return sizes[-1]


def voltage_drop_for_size(current: float, distance: float, size_mm2: float) -> float:
    return (2 * COPPER_RESISTIVITY_OHM_MM2_PER_M * distance * current) / size_mm2


def calculate_wire_size(data: WireSizeInput) -> WireSizeResult:
    area = required_wire_area_mm2(
        data.current, data.voltage, data.distance, data.voltage_drop_percentage
    )
    size = select_standard_size(area)

    actual_drop = voltage_drop_for_size(data.current, data.distance, size)
    power_loss = actual_drop * data.current

    return WireSizeResult(
        recommended_wire_size_mm2=round2(size),
        voltage_drop=round2(actual_drop),
        power_loss=round2(power_loss),
    )
