"""401(k) net worth trajectory simulation.

Models invested assets only (401(k) employee contributions plus employer
match). Employee contributions are capped at the IRS deferral limit and
grow at a monthly-compounded real return.
"""

from dataclasses import dataclass
from typing import List, Optional

from calc.constants import (
    DEFAULT_MATCH_RATE_PCT,
    DELAY_MONTHS,
    K401_EMPLOYEE_CAP,
    MONTHS_PER_YEAR,
    REAL_RETURN_DEFAULT,
    TRAJECTORY_YEARS,
)
from calc.rounding import round_half_up


@dataclass
class TrajectoryInputs:
    """Inputs for a baseline vs. optimized 401(k) projection."""
    gross_annual: float
    current_401k_pct: float
    optimized_401k_pct: float
    match_pct: float  # match cap: employer matches up to this % of salary
    has_employer_match: bool
    real_return: float = REAL_RETURN_DEFAULT
    years: int = TRAJECTORY_YEARS
    match_rate_pct: float = DEFAULT_MATCH_RATE_PCT  # 100 = dollar-for-dollar
    deferral_cap: float = K401_EMPLOYEE_CAP


@dataclass
class TrajectoryResult:
    """Year-indexed net worth for both paths (index 0 is today)."""
    baseline_by_year: List[int]
    optimized_by_year: List[int]
    year_labels: List[int]
    baseline_end: int
    optimized_end: int
    delta_30yr: int


def fv_monthly_contributions(monthly_contribution: float, monthly_rate: float, num_months: int) -> float:
    """Future value of equal monthly contributions.

    FV = P * ((1 + i)^n - 1) / i, or P * n when i is 0.
    """
    if monthly_rate == 0:
        return monthly_contribution * num_months
    return monthly_contribution * ((1 + monthly_rate) ** num_months - 1) / monthly_rate


def employer_match_monthly(gross_annual: float, employee_pct: float,
                           match_rate_pct: float, match_cap_pct: float) -> float:
    """Employer match dollars per month.

    The employer matches match_rate_pct of the employee's contribution on
    the first match_cap_pct of salary.
    """
    matched_pct = min(employee_pct, match_cap_pct)
    employer_pct_of_salary = matched_pct * match_rate_pct / 100
    return gross_annual * (employer_pct_of_salary / 100) / MONTHS_PER_YEAR


def monthly_contribution(inputs: TrajectoryInputs, contribution_pct: float) -> float:
    """Total monthly contribution (employee + match) at a contribution percentage."""
    employee_annual = min(inputs.gross_annual * contribution_pct / 100, inputs.deferral_cap)
    employee_annual = max(0.0, employee_annual)
    effective_pct = (employee_annual / inputs.gross_annual) * 100 if inputs.gross_annual > 0 else 0
    match = 0.0
    if inputs.has_employer_match:
        match = employer_match_monthly(inputs.gross_annual, effective_pct,
                                       inputs.match_rate_pct, inputs.match_pct)
    return employee_annual / MONTHS_PER_YEAR + match


def _run_path(inputs: TrajectoryInputs, contribution_pct: float) -> List[int]:
    monthly_rate = inputs.real_return / MONTHS_PER_YEAR
    total_monthly = monthly_contribution(inputs, contribution_pct)
    year_growth = (1 + monthly_rate) ** MONTHS_PER_YEAR
    new_money = fv_monthly_contributions(total_monthly, monthly_rate, MONTHS_PER_YEAR)

    path = [0]
    balance = 0
    for _ in range(inputs.years):
        balance = round_half_up(balance * year_growth + new_money)
        path.append(balance)
    return path


def run_trajectory(inputs: TrajectoryInputs) -> TrajectoryResult:
    """Compute baseline and optimized net worth trajectories.

    Baseline uses the current 401(k) %; optimized uses the recommended %.
    The ordering of the two percentages is not assumed, so delta_30yr may
    be negative.
    """
    baseline = _run_path(inputs, inputs.current_401k_pct)
    optimized = _run_path(inputs, inputs.optimized_401k_pct)
    baseline_end = baseline[-1]
    optimized_end = optimized[-1]
    return TrajectoryResult(
        baseline_by_year=baseline,
        optimized_by_year=optimized,
        year_labels=list(range(inputs.years + 1)),
        baseline_end=baseline_end,
        optimized_end=optimized_end,
        delta_30yr=optimized_end - baseline_end,
    )


def cost_of_delay(inputs: TrajectoryInputs, delay_months: int = DELAY_MONTHS) -> int:
    """Shortfall at the horizon from waiting delay_months before switching rates.

    Contributes at the baseline rate for delay_months, then at the optimized
    rate for the rest of the horizon, and compares with the year-end rounded
    optimized path from run_trajectory, so it shares delta_30yr's baseline.
    The switch happens mid-year for delays that are not whole years; this
    is an estimate, not a payroll simulation.
    """
    monthly_rate = inputs.real_return / MONTHS_PER_YEAR
    total_months = inputs.years * MONTHS_PER_YEAR
    delay = min(max(0, delay_months), total_months)
    remaining_months = total_months - delay

    baseline_monthly = monthly_contribution(inputs, inputs.current_401k_pct)
    optimized_monthly = monthly_contribution(inputs, inputs.optimized_401k_pct)

    after_delay = fv_monthly_contributions(baseline_monthly, monthly_rate, delay)
    grown_delay = after_delay * (1 + monthly_rate) ** remaining_months
    delayed_end = grown_delay + fv_monthly_contributions(optimized_monthly, monthly_rate, remaining_months)

    optimized_end = run_trajectory(inputs).optimized_end
    return round_half_up(optimized_end - delayed_end)


def trajectory_inputs_from_prefill(prefill, optimized_401k_pct: Optional[float] = None,
                                   deferral_cap: float = K401_EMPLOYEE_CAP) -> TrajectoryInputs:
    """Build TrajectoryInputs from an AllocatorPrefill (parsed query params)."""
    return TrajectoryInputs(
        gross_annual=prefill.salary_annual,
        current_401k_pct=prefill.current_401k_pct,
        optimized_401k_pct=(optimized_401k_pct if optimized_401k_pct is not None
                            else prefill.recommended_401k_pct),
        match_pct=prefill.match_cap_pct,
        has_employer_match=prefill.employer_match_enabled,
        match_rate_pct=prefill.match_rate_pct,
        deferral_cap=deferral_cap,
    )
