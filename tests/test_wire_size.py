import pytest

from shams.calculations.wire_size import (
    calculate_wire_size,
    required_wire_area_mm2,
    select_standard_size,
    voltage_drop_for_size,
)
from shams.knowledge.jordan_data import STANDARD_WIRE_SIZES_MM2
from shams.models import WireSizeInput


def test_48v_run_selects_10mm2():
    data = WireSizeInput(current=20, voltage=48, distance=15, voltage_drop_percentage=3)

    assert required_wire_area_mm2(20, 48, 15, 3) == pytest.approx(7.1667, abs=1e-3)

    result = calculate_wire_size(data)
    assert result.recommended_wire_size_mm2 == 10
    assert result.voltage_drop == pytest.approx(1.03)
    assert result.power_loss == pytest.approx(20.64)


@pytest.mark.parametrize("current,voltage,distance,pct", [
    (5, 24, 5, 3),
    (20, 48, 15, 3),
    (9.5, 400, 40, 1.5),
    (32, 230, 25, 2),
    (60, 48, 30, 2),
])
def test_selected_size_is_smallest_standard_size_above_theoretical(current, voltage, distance, pct):
    area = required_wire_area_mm2(current, voltage, distance, pct)
    result = calculate_wire_size(WireSizeInput(current, voltage, distance, pct))
    size = result.recommended_wire_size_mm2

    assert size in STANDARD_WIRE_SIZES_MM2
    smaller = [s for s in STANDARD_WIRE_SIZES_MM2 if s < size]
    if size != STANDARD_WIRE_SIZES_MM2[-1]:
        assert size >= area
    assert all(s < area for s in smaller)
    if smaller:
        assert voltage_drop_for_size(current, distance, size) <= voltage_drop_for_size(current, distance, smaller[-1])


def test_oversized_requirement_clamps_to_largest_size():
    assert select_standard_size(500) == STANDARD_WIRE_SIZES_MM2[-1]
    result = calculate_wire_size(WireSizeInput(current=200, voltage=12, distance=50, voltage_drop_percentage=1))
    assert result.recommended_wire_size_mm2 == 120


def test_exact_standard_area_is_kept():
    assert select_standard_size(6) == 6
    assert select_standard_size(6.01) == 10
