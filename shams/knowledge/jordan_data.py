"""
Jordan Site and Market Data for PV Sizing.

This module contains the fixed lookup tables used by the calculators:
per-city solar resource, residential tariff brackets and standard
conductor sizes. They are embedded reference data, not user input.

Sources:
    - Monthly peak sun hours: long-term averages for fixed-tilt arrays
      (kWh/m²/day) at the four supported cities
    - Tariff: EMRC residential block tariff structure
    - Conductor sizes: IEC 60228 nominal cross-sections
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Optional, Tuple


# -------------------------------------------------------------------
# Locations
# -------------------------------------------------------------------
LOCATIONS: Tuple[str, ...] = ("amman", "zarqa", "irbid", "aqaba")

LOCATION_NAMES_AR = MappingProxyType({
    "amman": "عمان",
    "zarqa": "الزرقاء",
    "irbid": "إربد",
    "aqaba": "العقبة",
})


# -------------------------------------------------------------------
# Solar Resource
# -------------------------------------------------------------------
# Annual-average peak sun hours per day, used by the design optimizer
PEAK_SUN_HOURS = MappingProxyType({
    "amman": 5.5,
    "zarqa": 5.6,
    "irbid": 5.4,
    "aqaba": 6.0,
})

# Jan..Dec, kWh/m²/day
MONTHLY_PEAK_SUN_HOURS = MappingProxyType({
    "amman": (3.4, 4.3, 5.4, 6.5, 7.4, 8.2, 8.1, 7.6, 6.6, 5.2, 4.0, 3.2),
    "zarqa": (3.5, 4.4, 5.5, 6.6, 7.5, 8.3, 8.2, 7.7, 6.7, 5.3, 4.1, 3.3),
    "irbid": (3.2, 4.1, 5.2, 6.3, 7.3, 8.1, 8.0, 7.5, 6.4, 5.0, 3.8, 3.0),
    "aqaba": (4.3, 5.2, 6.2, 7.1, 7.8, 8.3, 8.1, 7.8, 7.0, 6.0, 4.8, 4.1),
})

# Non-leap year
DAYS_IN_MONTH: Tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Levantine month names as shown to users
MONTH_NAMES_AR: Tuple[str, ...] = (
    "كانون الثاني",
    "شباط",
    "آذار",
    "نيسان",
    "أيار",
    "حزيران",
    "تموز",
    "آب",
    "أيلول",
    "تشرين الأول",
    "تشرين الثاني",
    "كانون الأول",
)


# -------------------------------------------------------------------
# Residential Tariff (JOD/kWh per monthly block)
# -------------------------------------------------------------------
# (upper bound of block in kWh, rate); None marks the open-ended block
RESIDENTIAL_TARIFF_TIERS: Tuple[Tuple[Optional[float], float], ...] = (
    (160.0, 0.033),
    (300.0, 0.072),
    (500.0, 0.086),
    (1000.0, 0.114),
    (None, 0.158),
)


# -------------------------------------------------------------------
# Electrical
# -------------------------------------------------------------------
COPPER_RESISTIVITY_OHM_MM2_PER_M = 0.0172  # at 20°C

STANDARD_WIRE_SIZES_MM2: Tuple[float, ...] = (
    1.5, 2.5, 4, 6, 10, 16, 25, 35, 50, 70, 95, 120,
)

STC_TEMPERATURE_C = 25.0

DESIGN_DEFAULTS = MappingProxyType({
    "tilt_deg": 30,
    "azimuth_deg": 180,  # south-facing
    "mppt_voltage_range": "200-800V",
    "dc_main_wire_mm2": 6,
    "degradation_rate_pct": 0.5,
    "three_phase_threshold_kw": 6.0,
})


# -------------------------------------------------------------------
# Accessors
# -------------------------------------------------------------------
def _key(location) -> str:
    # Location enums carry their table key as .value
    return getattr(location, "value", location)


def get_peak_sun_hours(location: str) -> float:
    """Get the annual-average daily peak sun hours for a city."""
    return PEAK_SUN_HOURS[_key(location)]


def get_monthly_sun_hours(location: str) -> Tuple[float, ...]:
    """Get the 12 monthly peak-sun-hour values (Jan..Dec) for a city."""
    return MONTHLY_PEAK_SUN_HOURS[_key(location)]


def get_residential_tariff() -> Tuple[Tuple[Optional[float], float], ...]:
    """Get the residential block tariff table."""
    return RESIDENTIAL_TARIFF_TIERS


def get_location_name_ar(location: str) -> str:
    key = _key(location)
    return LOCATION_NAMES_AR.get(key, key)

