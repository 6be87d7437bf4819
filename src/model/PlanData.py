"""Unified data model for one user's plan.

PlanCalculator fills a PlanData from a profile; each renderer pulls the
fields it needs from it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from calc.leap_decision import RecommendedLeap
from calc.leap_stack_builder import LeapStackResult
from calc.net_worth_impact import HorizonImpact, ImpactInputs
from calc.primary_leap_selector import PrimaryLeapResult
from calc.rent_calculator import RentPlan
from calc.trajectory_calculator import TrajectoryResult
from model.AllocatorInputs import AllocatorPrefill, AllocatorUnlockData
from model.Leap import Leap
from model.TaxBreakdown import TaxBreakdown


@dataclass
class MarketComparison:
    """Market rent for the user's area next to the safe range."""
    region_name: str
    market_low: float
    market_high: float
    position: str  # above | overlap | below
    source: str  # zori | hud
    median_rent: Optional[float] = None


@dataclass
class PlanData:
    """All results computed for a profile."""
    state: str
    tax_year: int
    deferral_cap: float

    # Taxes and take-home
    tax: TaxBreakdown
    take_home: Dict[str, float]
    net_take_home_monthly: float

    # 401(k)
    recommendation: RecommendedLeap
    trajectory: TrajectoryResult
    cost_of_delay_12mo: int

    # Allocator
    prefill: AllocatorPrefill
    unlock: AllocatorUnlockData
    monthly_capital_available: float
    leap_stack: LeapStackResult
    primary: PrimaryLeapResult
    supporting_leaps: List[Leap] = field(default_factory=list)

    # Rent
    rent_plan: Optional[RentPlan] = None
    market_comparison: Optional[MarketComparison] = None

    # Net worth impact of a monthly change
    impact_inputs: Optional[ImpactInputs] = None
    impacts: List[HorizonImpact] = field(default_factory=list)

    @property
    def next_leap(self) -> Optional[Leap]:
        if self.leap_stack.next_leap_id is None:
            return None
        return next((leap for leap in self.leap_stack.leaps if leap.id == self.leap_stack.next_leap_id), None)
