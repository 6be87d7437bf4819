"""Dollar routing of monthly post-tax savings.

The pool flows through an ordered list of allocation steps. Each step is
handed what remains, takes its share, and passes the rest along:

1. Emergency fund: 40% of the pool until the 3-month target is reached
2. High-APR debt: 40% of what remains while APR >= 10%
3. Retirement / brokerage: the rest, split by retirement focus

Because every dollar is either allocated by a step or passed to the next
one, the allocations always add up to the pool.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from calc.constants import (
    ASSUMED_DEBT_APR_PCT,
    DEBT_ALLOC_PCT,
    EF_ALLOC_PCT,
    EF_TARGET_MONTHS,
    HIGH_APR_THRESHOLD_PCT,
    retirement_split,
)
from model.AllocatorInputs import AllocatorUnlockData

# remaining -> (allocated, remaining)
AllocationStep = Callable[[float], Tuple[float, float]]


@dataclass
class CapitalRoutingResult:
    post_tax_savings_monthly: float
    ef_alloc: float
    debt_alloc: float
    retirement_alloc: float
    brokerage_alloc: float
    ef_target: float
    months_to_ef_target: Optional[int] = None

    @property
    def total_allocated(self) -> float:
        return self.ef_alloc + self.debt_alloc + self.retirement_alloc + self.brokerage_alloc


def emergency_fund_target(unlock: Optional[AllocatorUnlockData]) -> float:
    essential_monthly = (unlock.essential_monthly if unlock else None) or 0
    return essential_monthly * EF_TARGET_MONTHS if essential_monthly > 0 else 0


def routing_debt_apr_pct(unlock: Optional[AllocatorUnlockData]) -> Optional[float]:
    """APR used for routing: the answered range midpoint, else 17% when a balance is carried."""
    if unlock is None:
        return None
    if unlock.debt_apr_range:
        return unlock.debt_apr_pct
    return ASSUMED_DEBT_APR_PCT if unlock.has_debt_balance else None


def is_high_apr_debt_active(unlock: Optional[AllocatorUnlockData]) -> bool:
    if unlock is None or not unlock.has_debt_balance:
        return False
    apr_pct = routing_debt_apr_pct(unlock)
    return apr_pct is not None and apr_pct >= HIGH_APR_THRESHOLD_PCT


def share_step(pct: float, active: bool) -> AllocationStep:
    """Step that takes pct of what remains when active, nothing otherwise."""
    def step(remaining: float) -> Tuple[float, float]:
        if not active:
            return 0.0, remaining
        allocated = pct * remaining
        return allocated, remaining - allocated
    return step


def fixed_share_step(pct: float, pool: float, active: bool) -> AllocationStep:
    """Step that takes pct of the whole pool (not of what remains) when active."""
    def step(remaining: float) -> Tuple[float, float]:
        if not active:
            return 0.0, remaining
        allocated = min(pct * pool, remaining)
        return allocated, remaining - allocated
    return step


def run_pipeline(pool: float, steps: List[AllocationStep]) -> Tuple[List[float], float]:
    """Run each step on what remains; returns the per-step allocations and the leftover."""
    allocations = []
    remaining = pool
    for step in steps:
        allocated, remaining = step(remaining)
        allocations.append(allocated)
    return allocations, remaining


def compute_capital_routing(post_tax_savings_monthly: float, ef_current: float = 0,
                            unlock: Optional[AllocatorUnlockData] = None) -> CapitalRoutingResult:
    """Route monthly post-tax savings across EF, debt, retirement and brokerage.

    Args:
        post_tax_savings_monthly: Monthly savings pool; negative values are treated as 0
        ef_current: Current emergency fund balance
        unlock: Unlocked answers (essentials, debt, retirement focus)

    Returns:
        CapitalRoutingResult whose allocations sum to the pool
    """
    pool = max(0.0, post_tax_savings_monthly or 0)
    ef_target = emergency_fund_target(unlock)
    focus = (unlock.retirement_focus if unlock else None) or 'medium'
    retirement_pct, _ = retirement_split(focus)

    steps = [
        fixed_share_step(EF_ALLOC_PCT, pool, ef_target > 0 and ef_current < ef_target),
        share_step(DEBT_ALLOC_PCT, is_high_apr_debt_active(unlock)),
        share_step(retirement_pct / 100, True),
    ]
    (ef_alloc, debt_alloc, retirement_alloc), brokerage_alloc = run_pipeline(pool, steps)

    months_to_ef_target = None
    if ef_alloc > 0 and ef_current < ef_target:
        months_to_ef_target = math.ceil((ef_target - ef_current) / ef_alloc)

    return CapitalRoutingResult(
        post_tax_savings_monthly=pool,
        ef_alloc=ef_alloc,
        debt_alloc=debt_alloc,
        retirement_alloc=retirement_alloc,
        brokerage_alloc=brokerage_alloc,
        ef_target=ef_target,
        months_to_ef_target=months_to_ef_target,
    )
