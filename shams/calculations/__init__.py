"""
SHAMS Calculations Package.
"""
from shams.calculations.wire_size import calculate_wire_size
from shams.calculations.panel_layout import (
    calculate_production_from_area,
    calculate_panels_from_consumption,
    panels_for_surface_area,
)
from shams.calculations.inverter import calculate_inverter_size
from shams.calculations.battery import calculate_battery_bank
from shams.calculations.strings import (
    calculate_string_configuration,
    calculate_advanced_string_configuration,
)
from shams.calculations.tariff import (
    calculate_tiered_bill,
    effective_kwh_price,
    consumption_for_bill,
)
from shams.calculations.financial import (
    calculate_financial_viability,
    format_payback_period,
    PAYBACK_NOT_REACHED_MONTHS,
)
from shams.calculations.optimizer import calculate_optimal_design

__all__ = [
    # Wiring
    "calculate_wire_size",
    # Layout
    "calculate_production_from_area",
    "calculate_panels_from_consumption",
    "panels_for_surface_area",
    # Equipment
    "calculate_inverter_size",
    "calculate_battery_bank",
    "calculate_string_configuration",
    "calculate_advanced_string_configuration",
    # Economics
    "calculate_tiered_bill",
    "effective_kwh_price",
    "consumption_for_bill",
    "calculate_financial_viability",
    "format_payback_period",
    "PAYBACK_NOT_REACHED_MONTHS",
    # Design
    "calculate_optimal_design",
]
