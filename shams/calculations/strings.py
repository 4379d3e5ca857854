"""
Series/parallel string configuration.

The basic form divides a target voltage and current by the panel ratings.
The advanced form works from the inverter window and site temperature
extremes, following IEC 62548 string sizing:

    Voc(Tmin) = Voc_STC × (1 + (Tmin - 25) × β/100)
    Vmp(Tmax) = Vmp_STC × (1 + (Tmax - 25) × β/100)

β is negative for crystalline silicon: cold raises Voc (safety ceiling),
heat lowers Vmp (MPPT floor).
"""
from __future__ import annotations

import logging
import math

from shams.calculations.common import ceil_count, floor_count, round_half_up
from shams.knowledge.jordan_data import STC_TEMPERATURE_C
from shams.models import (
    AdvancedStringConfigInput,
    ArrayConfig,
    FeasibleStringDesign,
    InfeasibleStringDesign,
    StringConfigInput,
    StringConfigResult,
    StringDesign,
)

logger = logging.getLogger(__name__)

ISC_SAFETY_FACTOR = 1.25


def calculate_string_configuration(data: StringConfigInput) -> StringConfigResult:
    # floor keeps the string under the target voltage; ceil meets the target current
    panels_per_string = math.floor(data.desired_voltage / data.panel_voltage)
    parallel_strings = math.ceil(data.desired_current / data.panel_current)

    return StringConfigResult(
        panels_per_string=max(1, panels_per_string),
        parallel_strings=max(1, parallel_strings),
    )


def temperature_adjusted_voltage(voltage: float, temperature_c: float, temp_coefficient_pct: float) -> float:
    return voltage * (1 + (temperature_c - STC_TEMPERATURE_C) * temp_coefficient_pct / 100)


def calculate_advanced_string_configuration(data: AdvancedStringConfigInput) -> StringDesign:
    voc_at_min_temp = temperature_adjusted_voltage(data.voc, data.min_temp, data.temp_coefficient)
    vmp_at_max_temp = temperature_adjusted_voltage(data.vmp, data.max_temp, data.temp_coefficient)

    max_panels = floor_count(data.inverter_max_volt / voc_at_min_temp)
    min_panels = ceil_count(data.mppt_min / vmp_at_max_temp)

    max_string_voc = max_panels * voc_at_min_temp
    min_string_vmp = min_panels * vmp_at_max_temp

    if min_panels > max_panels:
        reason = (
            f"Minimum string length {min_panels} (MPPT floor {data.mppt_min:.0f} V at {data.max_temp}°C) "
            f"exceeds maximum {max_panels} (inverter limit {data.inverter_max_volt:.0f} V at {data.min_temp}°C)"
        )
        logger.debug(reason)
        return InfeasibleStringDesign(
            min_panels=min_panels,
            max_panels=max_panels,
            max_string_voc_at_min_temp=max_string_voc,
            min_string_vmp_at_max_temp=min_string_vmp,
            reason=reason,
        )

    mppt_mid = (data.mppt_min + data.mppt_max) / 2
    optimal_panels = round_half_up(mppt_mid / data.vmp)
    optimal_panels = max(min_panels, min(optimal_panels, max_panels))

    total_panels = ceil_count(data.target_system_size * 1000 / data.panel_wattage)
    parallel_strings = ceil_count(total_panels / optimal_panels)
    total_current = parallel_strings * data.isc * ISC_SAFETY_FACTOR

    return FeasibleStringDesign(
        min_panels=min_panels,
        max_panels=max_panels,
        optimal_panels=optimal_panels,
        max_string_voc_at_min_temp=max_string_voc,
        min_string_vmp_at_max_temp=min_string_vmp,
        array_config=ArrayConfig(
            total_panels=total_panels,
            parallel_strings=parallel_strings,
            total_current=total_current,
            is_current_safe=total_current <= data.inverter_max_current,
        ),
    )
