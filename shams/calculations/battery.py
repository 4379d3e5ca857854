"""
Battery bank sizing for off-grid and hybrid systems.

    required kWh = daily load × autonomy days / (DoD / 100)
    required Ah  = required kWh × 1000 / system voltage
    series       = system voltage / battery voltage
    parallel     = ceil(required Ah / battery Ah)
"""
from __future__ import annotations

import math
from numbers import Real
from typing import Any, Iterable, Optional

from shams.calculations.common import round2, round_half_up
from shams.models import BatteryBankInput, BatteryBankResult


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def appliance_daily_load_kwh(appliances: Optional[Iterable[Any]]) -> float:
    """
    Sum of power × quantity × hours / 1000 over the appliance list.
    Entries with a missing or non-numeric field are skipped.
    """
    total = 0.0
    for item in appliances or ():
        if item is None:
            continue
        power = _field(item, "power")
        quantity = _field(item, "quantity")
        hours = _field(item, "hours")
        if _is_number(power) and _is_number(quantity) and _is_number(hours):
            total += (power * quantity * hours) / 1000
    return total


def resolve_daily_load_kwh(data: BatteryBankInput) -> float:
    # A zero appliance total keeps the manually entered load
    if data.appliances:
        appliance_load = appliance_daily_load_kwh(data.appliances)
        if appliance_load > 0:
            return appliance_load
    return data.daily_load_kwh


def calculate_battery_bank(data: BatteryBankInput) -> BatteryBankResult:
    daily_load_kwh = resolve_daily_load_kwh(data)

    dod_factor = data.depth_of_discharge / 100
    required_energy_kwh = (daily_load_kwh * data.autonomy_days) / dod_factor
    required_capacity_ah = (required_energy_kwh * 1000) / data.system_voltage

    batteries_in_series = round_half_up(data.system_voltage / data.battery_voltage)
    parallel_strings = math.ceil(required_capacity_ah / data.battery_capacity_ah)

    return BatteryBankResult(
        required_bank_energy_kwh=round2(required_energy_kwh),
        required_bank_capacity_ah=round2(required_capacity_ah),
        batteries_in_series=batteries_in_series,
        parallel_strings=parallel_strings,
        total_batteries=batteries_in_series * parallel_strings,
        daily_load_kwh=daily_load_kwh,
    )
