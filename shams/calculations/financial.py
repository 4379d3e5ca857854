"""
25-year financial projection for a grid-tied PV system.

Production is built month by month from the location's peak-sun-hour
profile. Revenue degrades each year with the panels; payback is resolved to
the month inside the year where cumulative revenue passes the investment.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from shams.calculations.common import ceil_count, round2
from shams.knowledge.jordan_data import (
    DAYS_IN_MONTH,
    MONTH_NAMES_AR,
    get_monthly_sun_hours,
)
from shams.models import (
    CashFlowPoint,
    FinancialViabilityInput,
    FinancialViabilityResult,
    Location,
    MonthlyBreakdown,
    ScenarioOutcome,
    SensitivityAnalysis,
    SensitivityCase,
)

PROJECT_LIFETIME_YEARS = 25

# Reported when the investment is not recovered within the project lifetime
PAYBACK_NOT_REACHED_MONTHS = PROJECT_LIFETIME_YEARS * 12 + 1

SENSITIVITY_LOWER = 0.9
SENSITIVITY_HIGHER = 1.1

# Relative slack on the payback comparison for float noise in the running sum
PAYBACK_REL_TOLERANCE = 1e-9


@dataclass(frozen=True)
class _Projection:
    cash_flow: List[float]  # index = year, 0..25
    payback_months: float
    net_profit: float


def monthly_production(system_size: float, system_loss: float, location: Location) -> List[float]:
    """kWh per calendar month, Jan..Dec."""
    loss_factor = 1 - system_loss / 100
    sun_hours = get_monthly_sun_hours(location)
    return [
        system_size * sun_hours[m] * loss_factor * DAYS_IN_MONTH[m]
        for m in range(12)
    ]


def _project(annual_production: float, investment: float, kwh_price: float, degradation_rate: float) -> _Projection:
    cash_flow = [-investment]
    cumulative = 0.0
    payback_months = math.inf if annual_production * kwh_price <= 0 else float(PAYBACK_NOT_REACHED_MONTHS)
    recovered = False

    for year in range(1, PROJECT_LIFETIME_YEARS + 1):
        year_production = annual_production * (1 - degradation_rate / 100) ** (year - 1)
        year_revenue = year_production * kwh_price

        reached = cumulative + year_revenue >= investment * (1 - PAYBACK_REL_TOLERANCE)
        if not recovered and year_revenue > 0 and reached:
            remaining = investment - cumulative
            months_into_year = ceil_count(remaining / (year_revenue / 12))
            payback_months = float((year - 1) * 12 + months_into_year)
            recovered = True

        cumulative += year_revenue
        cash_flow.append(cumulative - investment)

    return _Projection(
        cash_flow=cash_flow,
        payback_months=payback_months,
        net_profit=cumulative - investment,
    )


def _outcome(projection: _Projection) -> ScenarioOutcome:
    return ScenarioOutcome(
        payback_period_months=projection.payback_months,
        net_profit_25_years=round2(projection.net_profit),
    )


def calculate_financial_viability(data: FinancialViabilityInput) -> FinancialViabilityResult:
    location = Location(data.location)
    total_investment = data.system_size * data.cost_per_kw
    sun_hours = get_monthly_sun_hours(location)

    production = monthly_production(data.system_size, data.system_loss, location)
    breakdown = [
        MonthlyBreakdown(
            month=MONTH_NAMES_AR[m],
            sun_hours=sun_hours[m],
            production=round2(production[m]),
            revenue=round2(production[m] * data.kwh_price),
        )
        for m in range(12)
    ]

    annual_production = sum(production)
    annual_revenue = annual_production * data.kwh_price

    base = _project(annual_production, total_investment, data.kwh_price, data.degradation_rate)

    # Production is held fixed; only the investment or the tariff moves
    sensitivity = SensitivityAnalysis(
        cost=SensitivityCase(
            lower=_outcome(_project(annual_production, total_investment * SENSITIVITY_LOWER, data.kwh_price, data.degradation_rate)),
            higher=_outcome(_project(annual_production, total_investment * SENSITIVITY_HIGHER, data.kwh_price, data.degradation_rate)),
        ),
        price=SensitivityCase(
            lower=_outcome(_project(annual_production, total_investment, data.kwh_price * SENSITIVITY_LOWER, data.degradation_rate)),
            higher=_outcome(_project(annual_production, total_investment, data.kwh_price * SENSITIVITY_HIGHER, data.degradation_rate)),
        ),
    )

    return FinancialViabilityResult(
        total_investment=round2(total_investment),
        total_annual_production=round2(annual_production),
        annual_revenue=round2(annual_revenue),
        payback_period_months=base.payback_months,
        net_profit_25_years=round2(base.net_profit),
        monthly_breakdown=breakdown,
        cash_flow_analysis=[
            CashFlowPoint(year=year, cash_flow=round2(value))
            for year, value in enumerate(base.cash_flow)
        ],
        sensitivity_analysis=sensitivity,
    )


def payback_is_reached(months: float) -> bool:
    return math.isfinite(months) and months <= PROJECT_LIFETIME_YEARS * 12


def format_payback_period(months: float) -> str:
    """Arabic display string: "X سنة و Y أشهر" or "أكثر من 25 سنة"."""
    if not payback_is_reached(months):
        return f"أكثر من {PROJECT_LIFETIME_YEARS} سنة"
    years, remaining = divmod(int(months), 12)
    return f"{years} سنة و {remaining} أشهر"
