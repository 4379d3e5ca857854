"""
Panel layout on a rectangular plot and consumption-based panel counts.

Rows run across the plot width. Row pitch along the plot length is the
panel dimension perpendicular to the row times SPACING_FACTOR, which leaves
room against inter-row shading and for maintenance access.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from shams.calculations.common import floor_count
from shams.models import (
    AreaPackingInput,
    AreaPackingResult,
    Orientation,
    PanelCountInput,
    PanelCountResult,
)

logger = logging.getLogger(__name__)

SPACING_FACTOR = 1.5

# Reference module used for quick area checks (m)
REFERENCE_PANEL_WIDTH_M = 1.13
REFERENCE_PANEL_LENGTH_M = 2.28


@dataclass(frozen=True)
class _RowPacking:
    rows: int
    panels_per_row: int

    @property
    def total_panels(self) -> int:
        return self.rows * self.panels_per_row


def _pack(land_width: float, land_length: float, across: float, pitch: float) -> _RowPacking:
    rows = math.floor(land_length / (pitch * SPACING_FACTOR))
    panels_per_row = math.floor(land_width / across)
    return _RowPacking(rows=rows, panels_per_row=panels_per_row)


def calculate_production_from_area(data: AreaPackingInput) -> AreaPackingResult:
    # Portrait: long side is the row pitch, short side sits along the row
    portrait = _pack(data.land_width, data.land_length, data.panel_width, data.panel_length)
    landscape = _pack(data.land_width, data.land_length, data.panel_length, data.panel_width)

    orientation = Orientation(data.orientation)
    if orientation == Orientation.AUTO:
        if portrait.total_panels >= landscape.total_panels:
            orientation = Orientation.PORTRAIT
        else:
            orientation = Orientation.LANDSCAPE

    chosen = portrait if orientation == Orientation.PORTRAIT else landscape
    max_panels = chosen.total_panels

    total_power_kw = (max_panels * data.panel_wattage) / 1000
    daily_energy_kwh = total_power_kw * data.sun_hours

    return AreaPackingResult(
        max_panels=max_panels,
        total_power_kw=total_power_kw,
        daily_energy_kwh=daily_energy_kwh,
        monthly_energy_kwh=daily_energy_kwh * 30,
        yearly_energy_kwh=daily_energy_kwh * 365,
        final_orientation=orientation,
        panels_per_string=chosen.panels_per_row,
        row_count=chosen.rows,
    )


def calculate_panels_from_consumption(data: PanelCountInput) -> PanelCountResult:
    """
    Number of panels needed to cover the consumption implied by a monthly bill.

        monthly kWh = bill / price
        daily kWh   = monthly kWh / 30
        per panel   = wattage × sun hours / 1000 × (1 - loss%)
        panels      = ceil(daily kWh / per panel)
    """
    total_kwh = data.monthly_bill / data.kwh_price
    daily_kwh = total_kwh / 30
    daily_per_panel = (data.panel_wattage * data.sun_hours) / 1000
    effective_per_panel = daily_per_panel * (1 - data.system_loss / 100)
    required_panels = math.ceil(daily_kwh / effective_per_panel)

    return PanelCountResult(
        required_panels=required_panels,
        total_kwh=total_kwh,
        daily_kwh=daily_kwh,
    )


def panel_footprint_m2(
    panel_width: float = REFERENCE_PANEL_WIDTH_M,
    panel_length: float = REFERENCE_PANEL_LENGTH_M,
) -> float:
    """Ground area claimed by one panel including row spacing."""
    return panel_width * panel_length * SPACING_FACTOR


def panels_for_surface_area(surface_area: float, footprint_m2: float | None = None) -> int:
    """How many panels a free-form surface holds at the spaced footprint."""
    footprint = footprint_m2 if footprint_m2 is not None else panel_footprint_m2()
    count = floor_count(surface_area / footprint)
    logger.debug(f"{surface_area:.1f} m² holds {count} panels at {footprint:.3f} m² each")
    return count
