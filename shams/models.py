from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Location(str, Enum):
    AMMAN = "amman"
    ZARQA = "zarqa"
    IRBID = "irbid"
    AQABA = "aqaba"


class Orientation(str, Enum):
    AUTO = "auto"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class GridPhase(str, Enum):
    SINGLE = "single"
    THREE = "three"


class LimitingFactor(str, Enum):
    CONSUMPTION = "consumption"
    AREA = "area"
    BUDGET = "budget"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class _Record:
    """Dataclass mixin: plain-dict view with enums replaced by their values."""

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


# -------------------------------------------------------------------
# Wire sizing
# -------------------------------------------------------------------
@dataclass(frozen=True)
class WireSizeInput(_Record):
    current: float
    voltage: float
    distance: float  # one-way, metres
    voltage_drop_percentage: float


@dataclass(frozen=True)
class WireSizeResult(_Record):
    recommended_wire_size_mm2: float
    voltage_drop: float  # V
    power_loss: float  # W


# -------------------------------------------------------------------
# Panel layout
# -------------------------------------------------------------------
@dataclass(frozen=True)
class AreaPackingInput(_Record):
    land_width: float
    land_length: float
    panel_width: float
    panel_length: float
    panel_wattage: float
    sun_hours: float
    orientation: Orientation = Orientation.AUTO


@dataclass(frozen=True)
class AreaPackingResult(_Record):
    max_panels: int
    total_power_kw: float
    daily_energy_kwh: float
    monthly_energy_kwh: float
    yearly_energy_kwh: float
    final_orientation: Orientation
    panels_per_string: int  # panels per row
    row_count: int


@dataclass(frozen=True)
class PanelCountInput(_Record):
    monthly_bill: float
    kwh_price: float
    sun_hours: float
    panel_wattage: float
    system_loss: float


@dataclass(frozen=True)
class PanelCountResult(_Record):
    required_panels: int
    total_kwh: float
    daily_kwh: float


# -------------------------------------------------------------------
# Inverter
# -------------------------------------------------------------------
@dataclass(frozen=True)
class InverterSizingInput(_Record):
    total_dc_power: float  # kWp
    max_voc: float
    max_isc: float
    grid_phase: Optional[GridPhase] = None


@dataclass(frozen=True)
class InverterSizingResult(_Record):
    min_inverter_size: float
    max_inverter_size: float
    recommended_voc: float
    recommended_isc: float
    grid_phase: GridPhase
    grid_phase_label: str


# -------------------------------------------------------------------
# Battery bank
# -------------------------------------------------------------------
@dataclass(frozen=True)
class Appliance(_Record):
    power: float  # W
    quantity: float
    hours: float  # per day


@dataclass(frozen=True)
class BatteryBankInput(_Record):
    daily_load_kwh: float
    autonomy_days: float
    depth_of_discharge: float  # %
    battery_voltage: float
    battery_capacity_ah: float
    system_voltage: float
    appliances: Optional[List[Appliance]] = None


@dataclass(frozen=True)
class BatteryBankResult(_Record):
    required_bank_energy_kwh: float
    required_bank_capacity_ah: float
    batteries_in_series: int
    parallel_strings: int
    total_batteries: int
    daily_load_kwh: float


# -------------------------------------------------------------------
# String configuration
# -------------------------------------------------------------------
@dataclass(frozen=True)
class StringConfigInput(_Record):
    panel_voltage: float
    panel_current: float
    desired_voltage: float
    desired_current: float


@dataclass(frozen=True)
class StringConfigResult(_Record):
    panels_per_string: int
    parallel_strings: int


@dataclass(frozen=True)
class AdvancedStringConfigInput(_Record):
    vmp: float
    voc: float
    temp_coefficient: float  # %/°C, negative for silicon
    mppt_min: float
    mppt_max: float
    inverter_max_volt: float
    min_temp: float
    max_temp: float
    target_system_size: float  # kWp
    panel_wattage: float
    isc: float
    inverter_max_current: float


@dataclass(frozen=True)
class ArrayConfig(_Record):
    total_panels: int = 0
    parallel_strings: int = 0
    total_current: float = 0.0
    is_current_safe: bool = False


@dataclass(frozen=True)
class FeasibleStringDesign(_Record):
    min_panels: int
    max_panels: int
    optimal_panels: int
    max_string_voc_at_min_temp: float
    min_string_vmp_at_max_temp: float
    array_config: ArrayConfig

    is_feasible = True


@dataclass(frozen=True)
class InfeasibleStringDesign(_Record):
    """No string length satisfies both the cold Voc ceiling and the hot MPPT floor."""
    min_panels: int
    max_panels: int
    max_string_voc_at_min_temp: float
    min_string_vmp_at_max_temp: float
    reason: str
    optimal_panels: int = 0
    array_config: ArrayConfig = field(default_factory=ArrayConfig)

    is_feasible = False


StringDesign = Union[FeasibleStringDesign, InfeasibleStringDesign]


# -------------------------------------------------------------------
# Financial
# -------------------------------------------------------------------
@dataclass(frozen=True)
class FinancialViabilityInput(_Record):
    system_size: float  # kWp
    system_loss: float  # %
    location: Location
    cost_per_kw: float
    kwh_price: float
    degradation_rate: float  # %/year
    tilt: float = 30
    azimuth: float = 180


@dataclass(frozen=True)
class MonthlyBreakdown(_Record):
    month: str
    sun_hours: float
    production: float  # kWh
    revenue: float


@dataclass(frozen=True)
class CashFlowPoint(_Record):
    year: int
    cash_flow: float


@dataclass(frozen=True)
class ScenarioOutcome(_Record):
    payback_period_months: float
    net_profit_25_years: float


@dataclass(frozen=True)
class SensitivityCase(_Record):
    lower: ScenarioOutcome
    higher: ScenarioOutcome


@dataclass(frozen=True)
class SensitivityAnalysis(_Record):
    cost: SensitivityCase
    price: SensitivityCase


@dataclass(frozen=True)
class FinancialViabilityResult(_Record):
    total_investment: float
    total_annual_production: float
    annual_revenue: float
    payback_period_months: float
    net_profit_25_years: float
    monthly_breakdown: List[MonthlyBreakdown]
    cash_flow_analysis: List[CashFlowPoint]
    sensitivity_analysis: SensitivityAnalysis


# -------------------------------------------------------------------
# Design optimizer
# -------------------------------------------------------------------
@dataclass(frozen=True)
class OptimalDesignInput(_Record):
    """
    Either monthly_consumption (kWh) or monthly_bill (JOD) must be given.
    budget enables the budget constraint; use_tiered_tariff prices energy
    with the residential block tariff instead of kwh_price.
    """
    surface_area: float  # m²
    location: Location
    system_loss: float = 15.0
    panel_wattage: float = 550.0
    cost_per_watt: float = 0.85  # JOD/Wp
    kwh_price: Optional[float] = 0.12
    monthly_consumption: Optional[float] = None
    monthly_bill: Optional[float] = None
    budget: Optional[float] = None
    use_tiered_tariff: bool = False
    degradation_rate: float = 0.5


@dataclass(frozen=True)
class DesignSummary(_Record):
    optimized_system_size: float
    total_cost: float
    payback_period_years: float
    twenty_five_year_profit: float
    monthly_consumption: float
    effective_kwh_price: float


@dataclass(frozen=True)
class PanelConfig(_Record):
    panel_count: int
    panel_wattage: float
    total_dc_power: float
    required_area: float
    tilt: float
    azimuth: float


@dataclass(frozen=True)
class InverterConfig(_Record):
    recommended_size: str
    recommended_size_kw: float
    min_size_kw: float
    max_size_kw: float
    phase: str  # "Single-Phase" | "Three-Phase"
    mppt_voltage: str


@dataclass(frozen=True)
class WiringConfig(_Record):
    panels_per_string: int
    parallel_strings: int
    wire_size: float


@dataclass(frozen=True)
class DesignFinancials(_Record):
    total_investment: float
    annual_revenue: float
    payback_period_years: float
    payback_period_months: float
    net_profit_25_years: float
    projection: FinancialViabilityResult


@dataclass(frozen=True)
class OptimalDesignResult(_Record):
    summary: DesignSummary
    panel_config: PanelConfig
    inverter_config: InverterConfig
    wiring_config: WiringConfig
    financial_analysis: DesignFinancials
    limiting_factor: LimitingFactor
    constraint_sizes: Dict[str, float] = field(default_factory=dict)
