"""
Whole-system design from consumption, surface area and budget constraints.

The installed size is the smallest of the active constraint sizes:

    consumption : daily kWh / (sun hours × (1 - loss%))
    area        : panels that fit the surface × panel wattage
    budget      : budget / cost per watt / 1000      (only when a budget is given)

The binding constraint is reported as the limiting factor. Panels, inverter,
wiring and the 25-year projection are then derived from that size. Values
are rounded only when the result is assembled.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple

from shams.calculations.common import floor_count, round2
from shams.calculations.financial import calculate_financial_viability, monthly_production
from shams.calculations.inverter import (
    DC_AC_RATIO_MAX,
    DC_AC_RATIO_MIN,
    PHASE_LABELS_EN,
    infer_grid_phase,
    recommended_inverter_ac_size,
)
from shams.calculations.panel_layout import panel_footprint_m2, panels_for_surface_area
from shams.calculations.tariff import consumption_for_bill, effective_kwh_price
from shams.knowledge.jordan_data import DESIGN_DEFAULTS, get_peak_sun_hours
from shams.models import (
    DesignFinancials,
    DesignSummary,
    FinancialViabilityInput,
    InverterConfig,
    LimitingFactor,
    Location,
    OptimalDesignInput,
    OptimalDesignResult,
    PanelConfig,
    WiringConfig,
)

logger = logging.getLogger(__name__)

SINGLE_STRING_MAX_PANELS = 20


def resolve_monthly_consumption(data: OptimalDesignInput) -> Tuple[float, float]:
    """
    Monthly kWh and the JOD/kWh price used to value it.

    Under tiered billing the price is the blended tariff for that month's
    consumption, and a bill is converted to kWh by walking the tariff blocks.
    """
    if data.monthly_consumption is None and data.monthly_bill is None:
        raise ValueError("monthly_consumption or monthly_bill is required")

    if data.use_tiered_tariff:
        if data.monthly_consumption is not None:
            monthly = data.monthly_consumption
        else:
            monthly = consumption_for_bill(data.monthly_bill)
        return monthly, effective_kwh_price(monthly)

    if data.kwh_price is None:
        raise ValueError("kwh_price is required without tiered billing")
    if data.monthly_consumption is not None:
        return data.monthly_consumption, data.kwh_price
    return data.monthly_bill / data.kwh_price, data.kwh_price


def split_strings(panel_count: int) -> Tuple[int, int]:
    """(panels per string, parallel strings) for the simplified layout."""
    if panel_count <= SINGLE_STRING_MAX_PANELS:
        return panel_count, 1
    return panel_count // 2, 2


def calculate_optimal_design(data: OptimalDesignInput) -> OptimalDesignResult:
    location = Location(data.location)
    sun_hours = get_peak_sun_hours(location)
    loss_factor = (100 - data.system_loss) / 100

    monthly_consumption, kwh_price = resolve_monthly_consumption(data)
    daily_consumption = monthly_consumption / 30

    area_panels = panels_for_surface_area(data.surface_area)

    # Declaration order is the tie-break order
    constraints: List[Tuple[LimitingFactor, float]] = [
        (LimitingFactor.CONSUMPTION, daily_consumption / (sun_hours * loss_factor)),
        (LimitingFactor.AREA, area_panels * data.panel_wattage / 1000),
    ]
    if data.budget is not None:
        constraints.append((LimitingFactor.BUDGET, data.budget / data.cost_per_watt / 1000))

    limiting_factor, optimized_size = min(constraints, key=lambda c: c[1])
    logger.debug(f"Design limited by {limiting_factor.value}: {optimized_size:.3f} kWp")

    if limiting_factor == LimitingFactor.AREA:
        panel_count = area_panels
    else:
        panel_count = floor_count(optimized_size * 1000 / data.panel_wattage)

    total_dc_power = panel_count * data.panel_wattage / 1000
    required_area = panel_count * panel_footprint_m2()

    inverter_kw = recommended_inverter_ac_size(total_dc_power)
    phase = infer_grid_phase(total_dc_power)
    panels_per_string, parallel_strings = split_strings(panel_count)

    projection = calculate_financial_viability(FinancialViabilityInput(
        system_size=total_dc_power,
        system_loss=data.system_loss,
        location=location,
        cost_per_kw=data.cost_per_watt * 1000,
        kwh_price=kwh_price,
        degradation_rate=data.degradation_rate,
        tilt=DESIGN_DEFAULTS["tilt_deg"],
        azimuth=DESIGN_DEFAULTS["azimuth_deg"],
    ))

    total_investment = total_dc_power * 1000 * data.cost_per_watt
    annual_revenue = sum(monthly_production(total_dc_power, data.system_loss, location)) * kwh_price
    simple_payback_years = total_investment / annual_revenue if annual_revenue > 0 else math.inf

    constraint_sizes: Dict[str, float] = {
        factor.value: round2(size) for factor, size in constraints
    }

    return OptimalDesignResult(
        summary=DesignSummary(
            optimized_system_size=round2(optimized_size),
            total_cost=round2(total_investment),
            payback_period_years=round2(simple_payback_years),
            twenty_five_year_profit=projection.net_profit_25_years,
            monthly_consumption=round2(monthly_consumption),
            effective_kwh_price=round(kwh_price, 4),
        ),
        panel_config=PanelConfig(
            panel_count=panel_count,
            panel_wattage=data.panel_wattage,
            total_dc_power=round2(total_dc_power),
            required_area=round2(required_area),
            tilt=DESIGN_DEFAULTS["tilt_deg"],
            azimuth=DESIGN_DEFAULTS["azimuth_deg"],
        ),
        inverter_config=InverterConfig(
            recommended_size=f"{inverter_kw:.1f} kW",
            recommended_size_kw=round2(inverter_kw),
            min_size_kw=round2(total_dc_power * DC_AC_RATIO_MIN),
            max_size_kw=round2(total_dc_power * DC_AC_RATIO_MAX),
            phase=PHASE_LABELS_EN[phase],
            mppt_voltage=DESIGN_DEFAULTS["mppt_voltage_range"],
        ),
        wiring_config=WiringConfig(
            panels_per_string=panels_per_string,
            parallel_strings=parallel_strings,
            wire_size=DESIGN_DEFAULTS["dc_main_wire_mm2"],
        ),
        financial_analysis=DesignFinancials(
            total_investment=round2(total_investment),
            annual_revenue=round2(annual_revenue),
            payback_period_years=round2(simple_payback_years),
            payback_period_months=projection.payback_period_months,
            net_profit_25_years=projection.net_profit_25_years,
            projection=projection,
        ),
        limiting_factor=limiting_factor,
        constraint_sizes=constraint_sizes,
    )
