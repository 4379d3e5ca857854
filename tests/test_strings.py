import pytest

from shams.calculations.strings import (
    calculate_advanced_string_configuration,
    calculate_string_configuration,
    temperature_adjusted_voltage,
)
from shams.models import (
    AdvancedStringConfigInput,
    ArrayConfig,
    FeasibleStringDesign,
    InfeasibleStringDesign,
    StringConfigInput,
)


def _advanced(**overrides):
    values = dict(
        vmp=42.5,
        voc=50.5,
        temp_coefficient=-0.32,
        mppt_min=200,
        mppt_max=800,
        inverter_max_volt=1000,
        min_temp=-5,
        max_temp=65,
        target_system_size=10,
        panel_wattage=550,
        isc=13.5,
        inverter_max_current=30,
    )
    values.update(overrides)
    return AdvancedStringConfigInput(**values)


def test_basic_configuration():
    result = calculate_string_configuration(StringConfigInput(
        panel_voltage=40, panel_current=10, desired_voltage=400, desired_current=32,
    ))
    assert result.panels_per_string == 10
    assert result.parallel_strings == 4


def test_basic_configuration_never_below_one():
    result = calculate_string_configuration(StringConfigInput(
        panel_voltage=50, panel_current=15, desired_voltage=20, desired_current=0,
    ))
    assert result.panels_per_string == 1
    assert result.parallel_strings == 1


def test_temperature_adjustment():
    assert temperature_adjusted_voltage(50.5, -5, -0.32) == pytest.approx(55.348)
    assert temperature_adjusted_voltage(42.5, 65, -0.32) == pytest.approx(37.06)
    assert temperature_adjusted_voltage(40, 25, -0.32) == pytest.approx(40)


def test_typical_residential_window():
    design = calculate_advanced_string_configuration(_advanced())

    assert isinstance(design, FeasibleStringDesign)
    assert design.is_feasible
    assert design.max_panels == 18
    assert design.min_panels == 6
    assert design.optimal_panels == 12
    assert design.max_string_voc_at_min_temp == pytest.approx(18 * 55.348)
    assert design.min_string_vmp_at_max_temp == pytest.approx(6 * 37.06)

    array = design.array_config
    assert array.total_panels == 19
    assert array.parallel_strings == 2
    assert array.total_current == pytest.approx(33.75)
    assert array.is_current_safe is False


def test_current_at_limit_is_safe():
    design = calculate_advanced_string_configuration(_advanced(inverter_max_current=33.75))
    assert design.array_config.is_current_safe is True


def test_optimal_is_clamped_into_window():
    # mid-MPPT of 1000 V would want 24 panels; the cold Voc ceiling allows 18
    design = calculate_advanced_string_configuration(_advanced(mppt_min=200, mppt_max=1800))
    assert design.is_feasible
    assert design.optimal_panels == design.max_panels == 18


def test_no_feasible_string_length():
    design = calculate_advanced_string_configuration(_advanced(mppt_min=900))

    assert isinstance(design, InfeasibleStringDesign)
    assert not design.is_feasible
    assert design.min_panels > design.max_panels
    assert design.optimal_panels == 0
    assert design.array_config == ArrayConfig()
    assert design.array_config.total_panels == 0
    assert design.array_config.total_current == 0
    assert design.reason


@pytest.mark.parametrize("mppt_min,mppt_max,max_volt", [
    (150, 600, 600),
    (250, 850, 1000),
    (500, 1300, 1500),
    (120, 500, 550),
])
def test_optimal_within_bounds(mppt_min, mppt_max, max_volt):
    design = calculate_advanced_string_configuration(
        _advanced(mppt_min=mppt_min, mppt_max=mppt_max, inverter_max_volt=max_volt)
    )
    if design.is_feasible:
        assert design.min_panels <= design.optimal_panels <= design.max_panels
    else:
        assert design.array_config == ArrayConfig()
