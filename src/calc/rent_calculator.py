"""Rent affordability from monthly take-home pay.

Safe rent is 28-35% of take-home after minimum debt payments. Upfront cash
covers what has to be paid before the first paycheck arrives.
"""

from dataclasses import dataclass
from typing import Optional

from calc.constants import (
    GAP_DAYS,
    GAP_LIVING_PCT,
    MOVING_SETUP_COST,
    RENT_HIGH_PCT,
    RENT_LOW_PCT,
)
from calc.formatting import format_currency_range
from calc.net_worth_impact import rent_net_worth_protection_30yr
from calc.rounding import round_to_nearest, round_to_nearest_25, round_to_nearest_100
from model.TaxBreakdown import TaxBreakdown


@dataclass
class RentRange:
    low: int
    high: int
    formatted: str


@dataclass
class BudgetBreakdown:
    """50/30/20 split of take-home."""
    needs: float
    wants: float
    savings: float


@dataclass
class UpfrontCash:
    """Cash needed before the first paycheck, as a low/high range."""
    gap_days: int
    deposit_low: int
    deposit_high: int
    first_month_low: int
    first_month_high: int
    gap_living_costs: int
    moving_setup: int
    total_low: int
    total_high: int


def calculate_rent_range(take_home_monthly: Optional[float], debt_monthly: Optional[float] = 0) -> RentRange:
    """Safe rent range for a monthly take-home.

    Base is take-home minus monthly debt payments (never below 0). Low is
    28% and high is 35% of the base, each rounded to the nearest $25.

    Args:
        take_home_monthly: Net monthly pay after taxes
        debt_monthly: Minimum monthly debt payments

    Returns:
        RentRange with low, high and a display string like "$1,400–$1,750"
    """
    if not take_home_monthly or take_home_monthly <= 0:
        return RentRange(low=0, high=0, formatted=format_currency_range(0, 0))

    base = max(0.0, take_home_monthly - (debt_monthly or 0))
    low = round_to_nearest_25(base * RENT_LOW_PCT)
    high = round_to_nearest_25(base * RENT_HIGH_PCT)
    return RentRange(low=low, high=high, formatted=format_currency_range(low, high))


def calculate_budget_breakdown(take_home_monthly: Optional[float]) -> BudgetBreakdown:
    """Needs 50% and wants 30% rounded to $10; savings takes the remainder."""
    if not take_home_monthly or take_home_monthly <= 0:
        return BudgetBreakdown(needs=0, wants=0, savings=0)

    needs = round_to_nearest(take_home_monthly * 0.5, 10)
    wants = round_to_nearest(take_home_monthly * 0.3, 10)
    savings = take_home_monthly - needs - wants
    return BudgetBreakdown(needs=needs, wants=wants, savings=savings)


def calculate_upfront_cash(take_home_monthly: Optional[float], rent_low: float, rent_high: float,
                           gap_days: int = GAP_DAYS) -> UpfrontCash:
    """Estimate cash needed before the first paycheck.

    Deposit (1x rent) + first month (1x rent) + living costs for the gap
    before payday (35% of take-home prorated over gap_days/30) + a flat
    moving and setup cost. Totals round to the nearest $100.
    """
    if not take_home_monthly or take_home_monthly <= 0:
        return UpfrontCash(gap_days=gap_days, deposit_low=0, deposit_high=0,
                           first_month_low=0, first_month_high=0, gap_living_costs=0,
                           moving_setup=0, total_low=0, total_high=0)

    gap_living = take_home_monthly * GAP_LIVING_PCT * (gap_days / 30)
    total_low = rent_low + rent_low + gap_living + MOVING_SETUP_COST
    total_high = rent_high + rent_high + gap_living + MOVING_SETUP_COST

    return UpfrontCash(
        gap_days=gap_days,
        deposit_low=rent_low,
        deposit_high=rent_high,
        first_month_low=rent_low,
        first_month_high=rent_high,
        gap_living_costs=round_to_nearest_100(gap_living),
        moving_setup=MOVING_SETUP_COST,
        total_low=round_to_nearest_100(total_low),
        total_high=round_to_nearest_100(total_high),
    )


@dataclass
class RentPlan:
    """Everything the rent tool shows for one take-home: range, budget, upfront cash."""
    take_home_monthly: float
    debt_monthly: float
    rent_range: RentRange
    budget: BudgetBreakdown
    upfront_cash: UpfrontCash
    net_worth_protection_30yr: int
    tax_breakdown: Optional[TaxBreakdown] = None
    city: Optional[str] = None


def build_rent_plan(take_home_monthly: Optional[float], debt_monthly: Optional[float] = 0,
                    tax_breakdown: Optional[TaxBreakdown] = None, city: Optional[str] = None) -> RentPlan:
    take_home = take_home_monthly or 0
    rent_range = calculate_rent_range(take_home, debt_monthly)
    return RentPlan(
        take_home_monthly=take_home,
        debt_monthly=debt_monthly or 0,
        rent_range=rent_range,
        budget=calculate_budget_breakdown(take_home),
        upfront_cash=calculate_upfront_cash(take_home, rent_range.low, rent_range.high),
        net_worth_protection_30yr=rent_net_worth_protection_30yr(take_home),
        tax_breakdown=tax_breakdown,
        city=city,
    )
