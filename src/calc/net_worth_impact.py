"""Net worth impact of a recurring monthly change.

Three use cases are supported:

- investing: future value of monthly contributions compounding monthly
- cash: no growth, the dollars simply pile up
- debt: simplified estimate of interest avoided by paying extra each month

Negative monthly deltas are handled symmetrically: pulling money out of
investments, spending savings, or paying less on debt.
"""

from dataclasses import dataclass
from typing import List, Optional

from calc.constants import (
    DEBT_APR_DEFAULT,
    HORIZON_YEARS,
    MONTHS_PER_YEAR,
    REAL_RETURN_DEFAULT,
    RENT_OVERSPEND_PCT,
)
from calc.formatting import format_currency_signed
from calc.rounding import round_half_up

USE_CASES = ('investing', 'cash', 'debt')


@dataclass
class ImpactInputs:
    monthly_delta: float
    use_case: str = 'investing'
    real_return: float = REAL_RETURN_DEFAULT
    debt_apr: float = DEBT_APR_DEFAULT


@dataclass
class HorizonImpact:
    years: int
    impact: float
    sentence: str


def compute_investing_impact(monthly_delta: float, real_return: float, years: int) -> float:
    """Future value of monthly contributions; the sign of the delta carries through."""
    num_months = years * MONTHS_PER_YEAR
    amount = abs(monthly_delta)
    sign = 1 if monthly_delta >= 0 else -1

    if real_return == 0:
        return sign * amount * num_months
    monthly_rate = real_return / MONTHS_PER_YEAR
    return sign * amount * ((1 + monthly_rate) ** num_months - 1) / monthly_rate


def compute_cash_impact(monthly_delta: float, years: int) -> float:
    return monthly_delta * years * MONTHS_PER_YEAR


def compute_debt_impact(monthly_delta: float, apr: float, years: int) -> float:
    """Interest avoided by paying monthly_delta extra toward debt.

    principal_extra = delta * months; interest saved is approximated as
    principal_extra * (apr * years) / 2.
    """
    principal_extra = monthly_delta * years * MONTHS_PER_YEAR
    return principal_extra * (apr * years) / 2


def impact_sentence(use_case: str, monthly_delta: float, impact: float) -> str:
    """One-line description of an impact, worded for the sign of the delta."""
    monthly = f"${round_half_up(abs(monthly_delta)):,}"
    signed_impact = format_currency_signed(impact)

    if monthly_delta >= 0:
        if use_case == 'investing':
            return f"If you invest {monthly}/month, future-you gains about {signed_impact}."
        if use_case == 'cash':
            return f"If you stash {monthly}/month, you'll have {signed_impact} saved."
        if use_case == 'debt':
            return f"If you pay {monthly}/month extra, you could save about {signed_impact} in interest."
    else:
        if use_case == 'investing':
            return f"If you pull out {monthly}/month, future-you is about {signed_impact} lower."
        if use_case == 'cash':
            return f"If you spend {monthly}/month more from savings, you'll have {signed_impact} less."
        if use_case == 'debt':
            return f"Paying {monthly}/month less could cost you about {signed_impact} in extra interest."
    return f"Future impact: {signed_impact}."


def compute_impact(inputs: ImpactInputs, years: int) -> float:
    if inputs.use_case == 'investing':
        return compute_investing_impact(inputs.monthly_delta, inputs.real_return, years)
    if inputs.use_case == 'cash':
        return compute_cash_impact(inputs.monthly_delta, years)
    if inputs.use_case == 'debt':
        return compute_debt_impact(inputs.monthly_delta, inputs.debt_apr, years)
    raise ValueError(f"Unknown use case '{inputs.use_case}', expected one of {', '.join(USE_CASES)}")


def compute_impacts(inputs: ImpactInputs, horizons: Optional[List[int]] = None) -> List[HorizonImpact]:
    """Impact at each horizon (1, 10 and 30 years by default).

    Args:
        inputs: Monthly delta, use case and rate assumptions
        horizons: Horizon years to evaluate

    Returns:
        One HorizonImpact per horizon, in horizon order
    """
    results = []
    for years in (horizons or HORIZON_YEARS):
        impact = compute_impact(inputs, years)
        results.append(HorizonImpact(
            years=years,
            impact=impact,
            sentence=impact_sentence(inputs.use_case, inputs.monthly_delta, impact),
        ))
    return results


def rent_net_worth_protection_30yr(take_home_monthly: Optional[float],
                                   real_return: float = REAL_RETURN_DEFAULT) -> int:
    """Net worth protected over 30 years by staying inside the safe rent range.

    Assumes the avoided overspend is 5% of take-home (35% rent vs. 40%),
    invested every month.
    """
    if not take_home_monthly or take_home_monthly <= 0:
        return 0
    overspend_avoided = take_home_monthly * RENT_OVERSPEND_PCT
    return round_half_up(compute_investing_impact(overspend_avoided, real_return, 30))
