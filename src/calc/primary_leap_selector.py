"""Picks the one highest-leverage leap for the plan summary.

Rules, first match wins:

1. Match offered and not captured: match
2. Contribution below the 15% retirement floor: retirement_15
3. High-APR debt carried: debt
4. Otherwise: growth_split
"""

from dataclasses import dataclass, field
from typing import List, Optional

from calc.constants import K401_EMPLOYEE_CAP, TARGET_RETIREMENT_PCT
from calc.leap_decision import cap_equivalent_pct
from model.AllocatorInputs import AllocatorUnlockData
from model.Leap import Leap

PRIMARY_KINDS = ('match', 'retirement_15', 'debt', 'growth_split')
SUPPORTING_CATEGORIES = ('emergency_fund', 'debt', 'retirement_split')


@dataclass
class RetirementTarget:
    current_pct: float
    target_pct: float


@dataclass
class PrimaryLeapInputs:
    employer_match_enabled: bool
    current_401k_pct: float
    match_cap_pct: float
    k401_at_cap: bool = False
    salary_annual: float = 0
    unlock: Optional[AllocatorUnlockData] = None
    leaps: List[Leap] = field(default_factory=list)
    deferral_cap: float = K401_EMPLOYEE_CAP


@dataclass
class PrimaryLeapResult:
    kind: str
    leap: Optional[Leap] = None
    retirement_15: Optional[RetirementTarget] = None


def _find(leaps: List[Leap], category: str) -> Optional[Leap]:
    return next((leap for leap in leaps if leap.category == category), None)


def retirement_target_pct(salary_annual: float, deferral_cap: float = K401_EMPLOYEE_CAP) -> float:
    """The 15% floor, lowered to the deferral limit's % of salary when that is smaller."""
    if salary_annual > 0:
        return min(TARGET_RETIREMENT_PCT, cap_equivalent_pct(salary_annual, deferral_cap))
    return TARGET_RETIREMENT_PCT


def select_primary_leap(inputs: PrimaryLeapInputs) -> PrimaryLeapResult:
    """Select exactly one primary leap; deterministic for the same inputs."""
    if inputs.employer_match_enabled and inputs.current_401k_pct < inputs.match_cap_pct:
        match_leap = next((leap for leap in inputs.leaps
                           if leap.category == 'match' and leap.is_payroll), None)
        return PrimaryLeapResult(kind='match', leap=match_leap)

    if not inputs.k401_at_cap:
        target_pct = retirement_target_pct(inputs.salary_annual, inputs.deferral_cap)
        if inputs.current_401k_pct < target_pct:
            return PrimaryLeapResult(
                kind='retirement_15',
                retirement_15=RetirementTarget(current_pct=inputs.current_401k_pct, target_pct=target_pct),
            )

    unlock = inputs.unlock
    if unlock is not None and unlock.has_debt_balance and unlock.debt_apr_range:
        debt_leap = next((leap for leap in inputs.leaps
                          if leap.category == 'debt' and leap.allocation_badge != '0% (inactive)'), None)
        return PrimaryLeapResult(kind='debt', leap=debt_leap)

    return PrimaryLeapResult(kind='growth_split', leap=_find(inputs.leaps, 'retirement_split'))


def get_supporting_leaps(leaps: List[Leap], primary_kind: str) -> List[Leap]:
    """Emergency fund, debt and split leaps in builder order, minus the one the primary covers."""
    if primary_kind not in PRIMARY_KINDS:
        raise ValueError(f"Unknown primary kind: {primary_kind}")
    exclude = {'debt': 'debt', 'growth_split': 'retirement_split'}.get(primary_kind)
    return [leap for leap in leaps
            if leap.category in SUPPORTING_CATEGORIES and leap.category != exclude]
