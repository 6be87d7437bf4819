"""Single highest-impact 401(k) move.

Rules, first match wins:

1. Employer match offered and current % below the match cap: capture the
   full match (capped at the deferral limit).
2. Current contribution already at the employee deferral limit: at cap.
3. Otherwise increase toward the % of salary that reaches the deferral
   limit (15% when salary is unknown).
"""

from dataclasses import dataclass
from typing import Tuple

from calc.constants import K401_EMPLOYEE_CAP, TARGET_RETIREMENT_PCT
from calc.formatting import format_pct

CAPTURE_MATCH = 'capture_match'
INCREASE_CONTRIBUTION = 'increase_contribution'
AT_CAP = 'at_cap'

AT_CAP_SUMMARY = "Nice, you're already hitting the annual 401(k) limit. Let's optimize the next lever."


@dataclass
class RecommendedLeap:
    label: str
    summary: str
    optimized_401k_pct: float
    type: str


def compute_401k_status(salary_annual: float, current_401k_pct: float, has_employer_match: bool,
                        match_cap_pct: float, deferral_cap: float = K401_EMPLOYEE_CAP) -> Tuple[float, bool, bool]:
    """Annual 401(k) contribution, whether it is at the deferral limit, and whether the match is captured.

    No tolerance at the limit: $23,499 is not maxed, $23,500 is.
    """
    current_401k_annual = salary_annual * current_401k_pct / 100 if salary_annual > 0 else 0
    is_401k_maxed = salary_annual > 0 and current_401k_annual >= deferral_cap
    match_captured = not has_employer_match or current_401k_pct >= match_cap_pct
    return current_401k_annual, is_401k_maxed, match_captured


def cap_equivalent_pct(salary_annual: float, deferral_cap: float = K401_EMPLOYEE_CAP) -> float:
    """Percent of salary that reaches the deferral limit, at most 100."""
    return min(deferral_cap / salary_annual * 100, 100)


def _at_cap(current_401k_pct: float) -> RecommendedLeap:
    return RecommendedLeap(
        label='401(k) is maxed',
        summary=AT_CAP_SUMMARY,
        optimized_401k_pct=current_401k_pct,
        type=AT_CAP,
    )


def get_recommended_leap(has_employer_match: bool, match_cap_pct: float, current_401k_pct: float,
                         salary_annual: float = 0, deferral_cap: float = K401_EMPLOYEE_CAP) -> RecommendedLeap:
    """Pick the one 401(k) move to recommend.

    Never recommends "from X% → X%": when no increase is possible the
    result is at_cap.

    Args:
        has_employer_match: Whether the employer offers a match
        match_cap_pct: Salary % the employer matches up to
        current_401k_pct: Current employee contribution %
        salary_annual: Gross salary; 0 skips the deferral limit checks
        deferral_cap: Employee deferral limit in dollars

    Returns:
        RecommendedLeap with the optimized contribution %
    """
    if has_employer_match and current_401k_pct < match_cap_pct:
        optimized_pct = match_cap_pct
        if salary_annual > 0:
            optimized_pct = min(match_cap_pct, cap_equivalent_pct(salary_annual, deferral_cap))
        return RecommendedLeap(
            label='Capture your full employer match',
            summary=f"Increase 401(k) from {format_pct(current_401k_pct)} → {format_pct(optimized_pct)}",
            optimized_401k_pct=optimized_pct,
            type=CAPTURE_MATCH,
        )

    _, is_401k_maxed, _ = compute_401k_status(salary_annual, current_401k_pct, has_employer_match,
                                              match_cap_pct, deferral_cap)
    if is_401k_maxed:
        return _at_cap(current_401k_pct)

    if salary_annual > 0:
        target_pct = cap_equivalent_pct(salary_annual, deferral_cap)
    else:
        target_pct = TARGET_RETIREMENT_PCT

    if target_pct <= current_401k_pct:
        return _at_cap(current_401k_pct)

    return RecommendedLeap(
        label='Increase retirement contribution',
        summary=f"Increase 401(k) from {format_pct(current_401k_pct)} → {format_pct(target_pct)}",
        optimized_401k_pct=target_pct,
        type=INCREASE_CONTRIBUTION,
    )
