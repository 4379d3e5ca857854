import pytest

from shams.calculations.panel_layout import (
    calculate_panels_from_consumption,
    calculate_production_from_area,
    panel_footprint_m2,
    panels_for_surface_area,
)
from shams.models import AreaPackingInput, Orientation, PanelCountInput


def _plot(orientation, width=10, length=20, panel_width=1, panel_length=2):
    return AreaPackingInput(
        land_width=width,
        land_length=length,
        panel_width=panel_width,
        panel_length=panel_length,
        panel_wattage=500,
        sun_hours=5,
        orientation=orientation,
    )


def test_portrait_and_landscape_packing():
    portrait = calculate_production_from_area(_plot(Orientation.PORTRAIT))
    landscape = calculate_production_from_area(_plot(Orientation.LANDSCAPE))

    # 6 rows of 10 / 13 rows of 5
    assert (portrait.row_count, portrait.panels_per_string, portrait.max_panels) == (6, 10, 60)
    assert (landscape.row_count, landscape.panels_per_string, landscape.max_panels) == (13, 5, 65)


def test_auto_picks_the_larger_layout():
    auto = calculate_production_from_area(_plot(Orientation.AUTO))
    assert auto.final_orientation == Orientation.LANDSCAPE
    assert auto.max_panels == 65


@pytest.mark.parametrize("width,length", [(6, 6), (12, 9), (3.5, 40), (25, 4)])
def test_auto_equals_best_of_both_with_portrait_on_ties(width, length):
    portrait = calculate_production_from_area(_plot(Orientation.PORTRAIT, width, length, 1, 1.7))
    landscape = calculate_production_from_area(_plot(Orientation.LANDSCAPE, width, length, 1, 1.7))
    auto = calculate_production_from_area(_plot(Orientation.AUTO, width, length, 1, 1.7))

    assert auto.max_panels == max(portrait.max_panels, landscape.max_panels)
    if portrait.max_panels >= landscape.max_panels:
        assert auto.final_orientation == Orientation.PORTRAIT


def test_square_panels_tie_goes_to_portrait():
    auto = calculate_production_from_area(_plot("auto", 6, 6, 1, 1))
    assert auto.final_orientation == Orientation.PORTRAIT
    assert auto.max_panels == 24


def test_energy_figures():
    result = calculate_production_from_area(_plot(Orientation.PORTRAIT))
    assert result.total_power_kw == pytest.approx(30.0)
    assert result.daily_energy_kwh == pytest.approx(150.0)
    assert result.monthly_energy_kwh == pytest.approx(4500.0)
    assert result.yearly_energy_kwh == pytest.approx(54750.0)


def test_plot_smaller_than_a_panel_holds_nothing():
    result = calculate_production_from_area(_plot(Orientation.AUTO, 0.5, 0.5))
    assert result.max_panels == 0
    assert result.total_power_kw == 0


def test_panels_from_consumption():
    result = calculate_panels_from_consumption(PanelCountInput(
        monthly_bill=60, kwh_price=0.12, sun_hours=5.5, panel_wattage=550, system_loss=15,
    ))
    assert result.total_kwh == pytest.approx(500)
    assert result.daily_kwh == pytest.approx(16.6667, abs=1e-3)
    assert result.required_panels == 7


def test_surface_area_panel_count():
    assert panel_footprint_m2() == pytest.approx(1.13 * 2.28 * 1.5)
    assert panels_for_surface_area(100) == 25
    assert panels_for_surface_area(3.0) == 0
    assert panels_for_surface_area(10, footprint_m2=2.5) == 4
