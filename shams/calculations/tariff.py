"""
Block (tiered) electricity tariff billing.

Each block is billed at its own rate; consumption fills the blocks in
ascending order until exhausted. The last block has no upper bound.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from shams.knowledge.jordan_data import get_residential_tariff

TariffTable = Sequence[Tuple[Optional[float], float]]


@dataclass(frozen=True)
class TierCharge:
    lower_kwh: float
    upper_kwh: Optional[float]
    rate: float
    consumption_kwh: float
    charge: float


@dataclass(frozen=True)
class TariffBill:
    consumption_kwh: float
    total_bill: float
    effective_price: float
    tiers: List[TierCharge]


def calculate_tiered_bill(consumption_kwh: float, tiers: Optional[TariffTable] = None) -> TariffBill:
    tiers = tiers if tiers is not None else get_residential_tariff()

    remaining = consumption_kwh
    lower = 0.0
    total = 0.0
    charges: List[TierCharge] = []

    for upper, rate in tiers:
        if remaining <= 0:
            break
        width = remaining if upper is None else upper - lower
        used = min(remaining, width)
        charge = used * rate
        charges.append(TierCharge(lower, upper, rate, used, charge))
        total += charge
        remaining -= used
        if upper is not None:
            lower = upper

    effective = total / consumption_kwh if consumption_kwh > 0 else 0.0
    return TariffBill(
        consumption_kwh=consumption_kwh,
        total_bill=total,
        effective_price=effective,
        tiers=charges,
    )


def effective_kwh_price(consumption_kwh: float, tiers: Optional[TariffTable] = None) -> float:
    """Blended JOD/kWh for a month's consumption (0 for no consumption)."""
    return calculate_tiered_bill(consumption_kwh, tiers).effective_price


def consumption_for_bill(monthly_bill: float, tiers: Optional[TariffTable] = None) -> float:
    """Inverse of calculate_tiered_bill: the kWh that produce a given bill."""
    tiers = tiers if tiers is not None else get_residential_tariff()

    remaining = monthly_bill
    lower = 0.0
    consumption = 0.0

    for upper, rate in tiers:
        if remaining <= 0:
            break
        if upper is None:
            consumption += remaining / rate
            break
        block_cost = (upper - lower) * rate
        if remaining <= block_cost:
            consumption += remaining / rate
            break
        consumption += upper - lower
        remaining -= block_cost
        lower = upper

    return consumption
