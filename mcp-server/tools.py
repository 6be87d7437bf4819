"""Leap Planner Tools for MCP Server.

This module provides the tool implementations that wrap the planning
engines and expose their results through MCP. Engine tools take explicit
arguments; plan tools work on a profile from input-parameters.
"""

import os
import sys
import json
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from planner_config import PlannerConfig
from tax.FederalDetails import FederalDetails
from tax.StateDetails import StateDetails
from tax.TaxEstimator import create_tax_estimator
from calc.capital_routing import compute_capital_routing
from calc.constants import DEFAULT_MATCH_CAP_PCT, DEFAULT_MATCH_RATE_PCT, REAL_RETURN_DEFAULT
from calc.leap_decision import get_recommended_leap
from calc.leap_stack_builder import LeapStackResult
from calc.net_worth_impact import ImpactInputs, compute_impacts
from calc.plan_calculator import PlanCalculator
from calc.rent_calculator import build_rent_plan
from calc.stack_preview import get_stack_preview_steps
from calc.trajectory_calculator import TrajectoryInputs, cost_of_delay, run_trajectory
from market.zori_store import ZoriDataStore, calculate_market_rent_range, compare_market_to_safe
from model.AllocatorInputs import AllocatorUnlockData
from model.links import build_allocator_prefill_url
from model.PlanData import PlanData

logger = logging.getLogger(__name__)


def _leap_stack_dict(stack: LeapStackResult) -> dict:
    return {
        "leaps": [leap.to_dict() for leap in stack.leaps],
        "next_leap_id": stack.next_leap_id,
        "flow_summary": asdict(stack.flow_summary),
        "match_captured": stack.match_captured,
        "k401_at_cap": stack.k401_at_cap,
        "routing": asdict(stack.routing) if stack.routing is not None else None,
    }


class LeapPlannerTools:
    """Tools that wrap the planning engines for MCP access.

    Discovers all available profiles and caches their plans, allowing
    queries to specify which profile to use.
    """

    def __init__(self, base_path: str, default_profile: Optional[str] = None,
                 config: Optional[PlannerConfig] = None):
        """Initialize the engines and discover all available profiles.

        Args:
            base_path: Path to the repository root directory
            default_profile: Default profile to use when none specified
            config: Collaborator settings (defaults to the environment)
        """
        self.base_path = base_path
        self.config = config or PlannerConfig.from_env()
        self.federal = FederalDetails()
        self.estimator = create_tax_estimator(self.config, self.federal, StateDetails())
        self.zori_store = ZoriDataStore(self.config.zori_csv_path)
        self.calculator = PlanCalculator(self.estimator, self.federal, self.zori_store)
        self.deferral_cap = self.federal.max401k(self.config.tax_year)

        self.profiles: Dict[str, dict] = {}
        self.plans: Dict[str, PlanData] = {}
        self.default_profile = default_profile
        self._discover_profiles()

    def _discover_profiles(self):
        """Discover and calculate all available profiles."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            profile_path = os.path.join(input_params_path, name, 'profile.json')
            if not os.path.exists(profile_path):
                continue
            try:
                with open(profile_path, 'r') as f:
                    profile = json.load(f)
                self.plans[name] = self.calculator.calculate(profile)
                self.profiles[name] = profile
            except (OSError, ValueError) as e:
                # Log but don't fail on individual profile errors
                logger.warning("Failed to load profile '%s': %s", name, e)

        # Set default if not specified
        if self.default_profile is None and self.profiles:
            self.default_profile = next(iter(self.profiles))

    def _get_plan(self, profile: Optional[str] = None) -> PlanData:
        """Get the plan for the specified profile or the default."""
        profile_name = profile or self.default_profile

        if profile_name not in self.plans:
            available = list(self.plans.keys())
            raise ValueError(
                f"Profile '{profile_name}' not found. Available profiles: {available}"
            )

        return self.plans[profile_name]

    def list_profiles(self) -> dict:
        """List all available profiles."""
        profiles_info = {}
        for name, plan in self.plans.items():
            profiles_info[name] = {
                "salary_annual": plan.prefill.salary_annual,
                "state": plan.state,
                "employer_match_enabled": plan.prefill.employer_match_enabled,
                "current_401k_pct": plan.prefill.current_401k_pct,
                "next_leap_id": plan.leap_stack.next_leap_id,
            }

        return {
            "available_profiles": list(self.plans.keys()),
            "default_profile": self.default_profile,
            "profiles_info": profiles_info,
        }

    def reload_profiles(self) -> dict:
        """Reload all profiles from disk, refreshing the cache."""
        old_profiles = set(self.plans.keys())

        self.profiles.clear()
        self.plans.clear()
        self.default_profile = None
        self._discover_profiles()

        new_profiles = set(self.plans.keys())
        return {
            "status": "success",
            "message": f"Reloaded {len(self.plans)} profiles",
            "profiles_loaded": list(self.plans.keys()),
            "default_profile": self.default_profile,
            "changes": {
                "added": sorted(new_profiles - old_profiles),
                "removed": sorted(old_profiles - new_profiles),
                "reloaded": sorted(old_profiles & new_profiles),
            },
        }

    def estimate_tax(self, salary_annual: float, state: str) -> dict:
        """Gross to take-home breakdown for a salary and state."""
        return self.estimator.estimate(salary_annual, state).to_dict()

    def solve_gross(self, take_home_annual: float, state: str) -> dict:
        """Gross salary needed for an annual take-home target."""
        breakdown = self.estimator.solve_gross_from_take_home(take_home_annual, state)
        result = breakdown.to_dict()
        result["target_take_home_annual"] = take_home_annual
        return result

    def _trajectory_inputs(self, gross_annual: float, current_401k_pct: float,
                           optimized_401k_pct: Optional[float], has_employer_match: bool,
                           match_cap_pct: float, match_rate_pct: float, real_return: float) -> TrajectoryInputs:
        if optimized_401k_pct is None:
            optimized_401k_pct = get_recommended_leap(
                has_employer_match, match_cap_pct, current_401k_pct, gross_annual, self.deferral_cap
            ).optimized_401k_pct
        return TrajectoryInputs(
            gross_annual=gross_annual,
            current_401k_pct=current_401k_pct,
            optimized_401k_pct=optimized_401k_pct,
            match_pct=match_cap_pct,
            has_employer_match=has_employer_match,
            match_rate_pct=match_rate_pct,
            real_return=real_return,
            deferral_cap=self.deferral_cap,
        )

    def run_trajectory(self, gross_annual: float, current_401k_pct: float,
                       optimized_401k_pct: Optional[float] = None, has_employer_match: bool = False,
                       match_cap_pct: float = DEFAULT_MATCH_CAP_PCT,
                       match_rate_pct: float = DEFAULT_MATCH_RATE_PCT,
                       real_return: float = REAL_RETURN_DEFAULT) -> dict:
        """Baseline vs. optimized 401(k) balances by year.

        When optimized_401k_pct is omitted the recommended leap's target is used.
        """
        inputs = self._trajectory_inputs(gross_annual, current_401k_pct, optimized_401k_pct,
                                         has_employer_match, match_cap_pct, match_rate_pct, real_return)
        result = asdict(run_trajectory(inputs))
        result["optimized_401k_pct"] = inputs.optimized_401k_pct
        return result

    def cost_of_delay(self, gross_annual: float, current_401k_pct: float,
                      optimized_401k_pct: Optional[float] = None, has_employer_match: bool = False,
                      match_cap_pct: float = DEFAULT_MATCH_CAP_PCT,
                      match_rate_pct: float = DEFAULT_MATCH_RATE_PCT,
                      real_return: float = REAL_RETURN_DEFAULT, delay_months: int = 12) -> dict:
        """Net worth lost at the horizon by waiting before making the change."""
        inputs = self._trajectory_inputs(gross_annual, current_401k_pct, optimized_401k_pct,
                                         has_employer_match, match_cap_pct, match_rate_pct, real_return)
        return {
            "optimized_401k_pct": inputs.optimized_401k_pct,
            "delay_months": delay_months,
            "cost_of_delay": cost_of_delay(inputs, delay_months),
        }

    def net_worth_impact(self, monthly_delta: float, use_case: str = 'investing',
                         real_return: float = REAL_RETURN_DEFAULT, debt_apr_pct: float = 18) -> dict:
        """Impact of a recurring monthly change at 1, 10 and 30 years."""
        inputs = ImpactInputs(monthly_delta=monthly_delta, use_case=use_case,
                              real_return=real_return, debt_apr=debt_apr_pct / 100)
        return {
            "monthly_delta": monthly_delta,
            "use_case": use_case,
            "horizons": [asdict(h) for h in compute_impacts(inputs)],
        }

    def rent_plan(self, take_home_monthly: Optional[float] = None, debt_monthly: float = 0,
                  profile: Optional[str] = None) -> dict:
        """Safe rent range, upfront cash and budget.

        Uses the profile's plan when take_home_monthly is omitted.
        """
        if take_home_monthly is None:
            plan = self._get_plan(profile).rent_plan
        else:
            plan = build_rent_plan(take_home_monthly, debt_monthly)
        result = asdict(plan)
        if plan.tax_breakdown is not None:
            result["tax_breakdown"] = plan.tax_breakdown.to_dict()
        return result

    def recommended_leap(self, has_employer_match: bool, match_cap_pct: float,
                         current_401k_pct: float, salary_annual: float = 0) -> dict:
        """The single 401(k) move to recommend."""
        return asdict(get_recommended_leap(has_employer_match, match_cap_pct, current_401k_pct,
                                           salary_annual, self.deferral_cap))

    def build_leap_stack(self, profile: Optional[str] = None) -> dict:
        """Ranked leap stack for a profile."""
        plan = self._get_plan(profile)
        result = _leap_stack_dict(plan.leap_stack)
        result["allocator_url"] = build_allocator_prefill_url(self.config, plan.prefill)
        result["profile"] = profile or self.default_profile
        return result

    def capital_routing(self, post_tax_savings_monthly: float, ef_current: float = 0,
                        unlock: Optional[Dict[str, Any]] = None) -> dict:
        """Route a monthly savings pool across EF, debt, retirement and brokerage."""
        result = compute_capital_routing(post_tax_savings_monthly, ef_current,
                                         AllocatorUnlockData.from_dict(unlock))
        data = asdict(result)
        data["total_allocated"] = result.total_allocated
        return data

    def primary_leap(self, profile: Optional[str] = None) -> dict:
        """Primary leap and its supporting leaps for a profile."""
        plan = self._get_plan(profile)
        primary = plan.primary
        return {
            "profile": profile or self.default_profile,
            "kind": primary.kind,
            "leap": primary.leap.to_dict() if primary.leap is not None else None,
            "retirement_15": asdict(primary.retirement_15) if primary.retirement_15 is not None else None,
            "supporting_leaps": [leap.to_dict() for leap in plan.supporting_leaps],
        }

    def stack_preview(self, has_employer_match: bool, current_401k_pct: float,
                      match_cap_pct: float = DEFAULT_MATCH_CAP_PCT) -> dict:
        """Five-step preview of the full stack shown before unlocking."""
        steps = get_stack_preview_steps(has_employer_match, current_401k_pct, match_cap_pct)
        return {"steps": [asdict(step) for step in steps]}

    def market_rent(self, metro: str, state: str, safe_low: Optional[float] = None,
                    safe_high: Optional[float] = None) -> dict:
        """Market rent range for a metro, optionally compared to a safe range."""
        median, region = self.zori_store.median_rent_for_region(metro, state)
        if median is None:
            return {
                "metro": metro,
                "state": state,
                "found": False,
                "options": self.zori_store.metro_options_for_state(state),
            }
        market = calculate_market_rent_range(median)
        result = {"metro": metro, "state": state, "found": True, "region_name": region, **asdict(market)}
        if safe_low is not None and safe_high is not None:
            result["position"] = compare_market_to_safe(market.market_low, market.market_high, safe_low, safe_high)
        return result
