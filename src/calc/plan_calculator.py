"""Unified plan calculator that runs the whole funnel for one profile.

The calculation follows the order the product walks a user through:
1. Taxes and take-home - gross salary to net pay (API or fallback estimate)
2. 401(k) - recommended leap, 30-year trajectory and the cost of waiting
3. Allocator - leap stack, capital routing and the primary leap
4. Rent - safe range, budget and upfront cash, plus metro market rent
"""

from typing import Optional

from calc.constants import DEFAULT_CURRENT_401K_PCT, DEFAULT_MATCH_CAP_PCT, DEFAULT_MATCH_RATE_PCT
from calc.leap_decision import get_recommended_leap
from calc.leap_stack_builder import build_leaps
from calc.net_worth_impact import ImpactInputs, compute_impacts
from calc.primary_leap_selector import PrimaryLeapInputs, get_supporting_leaps, select_primary_leap
from calc.rent_calculator import build_rent_plan
from calc.take_home import TakeHomeCalculator, TakeHomeInputs
from calc.trajectory_calculator import TrajectoryInputs, cost_of_delay, run_trajectory
from market.hud_rents import CITY_TO_HUD_KEY, compare_rent_ranges, get_hud_rent_range
from market.zori_store import ZoriDataStore, calculate_market_rent_range, compare_market_to_safe
from model.AllocatorInputs import AllocatorPrefill, AllocatorUnlockData
from model.PlanData import MarketComparison, PlanData
from model.validation import validate_salary, validate_state
from tax.FederalDetails import FederalDetails


class PlanCalculator:
    """Calculator that builds complete plan data for a profile.

    The tax estimator is passed in so the caller decides between the live
    API and the fallback; the ZORI store is optional and only used when the
    profile names a metro.
    """

    def __init__(self, estimator, federal: FederalDetails, zori_store: Optional[ZoriDataStore] = None):
        self.estimator = estimator
        self.federal = federal
        self.zori_store = zori_store
        self.take_home_calculator = TakeHomeCalculator(estimator)

    def calculate(self, profile: dict) -> PlanData:
        """Calculate every result for a profile.

        Args:
            profile: The profile dictionary (profile.json)

        Returns:
            PlanData with taxes, trajectory, leap stack and rent plan
        """
        salary = validate_salary(profile.get('salaryAnnual'))
        state = validate_state(profile.get('state'))
        tax_year = profile.get('taxYear', getattr(self.estimator, 'tax_year', self.federal.first_year))
        deferral_cap = self.federal.max401k(tax_year)

        match_spec = profile.get('employerMatch', {})
        has_match = match_spec.get('enabled', False)
        match_rate_pct = match_spec.get('ratePct', DEFAULT_MATCH_RATE_PCT)
        match_cap_pct = match_spec.get('capPct', DEFAULT_MATCH_CAP_PCT)
        current_pct = profile.get('current401kPct', DEFAULT_CURRENT_401K_PCT)

        hsa_spec = profile.get('hsa', {})
        unlock = AllocatorUnlockData.from_dict(self._unlock_fields(profile.get('unlock', {})))

        # Taxes and take-home
        tax = self.estimator.estimate(salary, state)
        current_hsa = unlock.current_hsa_annual
        if current_hsa is None:
            current_hsa = hsa_spec.get('currentAnnual', 0)
        take_home = self.take_home_calculator.calculate(
            TakeHomeInputs(salary_annual=salary, employee_401k_pct=current_pct,
                           current_hsa_annual=current_hsa, state_code=state))

        # 401(k)
        recommendation = get_recommended_leap(has_match, match_cap_pct, current_pct, salary, deferral_cap)
        trajectory_inputs = TrajectoryInputs(
            gross_annual=salary,
            current_401k_pct=current_pct,
            optimized_401k_pct=recommendation.optimized_401k_pct,
            match_pct=match_cap_pct,
            has_employer_match=has_match,
            match_rate_pct=match_rate_pct,
            real_return=profile.get('realReturn', 0.07),
            deferral_cap=deferral_cap,
        )
        trajectory = run_trajectory(trajectory_inputs)
        delay_cost = cost_of_delay(trajectory_inputs)

        # Allocator
        prefill = AllocatorPrefill(
            salary_annual=salary,
            state=state,
            employer_match_enabled=has_match,
            match_rate_pct=match_rate_pct,
            match_cap_pct=match_cap_pct,
            current_401k_pct=current_pct,
            recommended_401k_pct=recommendation.optimized_401k_pct,
            estimated_net_monthly_income=tax.net_income_monthly,
            leap_delta_30yr=trajectory.delta_30yr if trajectory.delta_30yr > 0 else None,
            cost_of_delay_12mo=delay_cost,
            hsa_eligible=hsa_spec.get('eligible', False),
            current_hsa_annual=hsa_spec.get('currentAnnual'),
            hsa_coverage_type=hsa_spec.get('coverage', 'single'),
            pay_frequency=profile.get('payFrequency', 'monthly'),
            intent=profile.get('intent', 'unlock_full_stack'),
        )
        monthly_capital = max(0.0, take_home['net_monthly'] - (unlock.essential_monthly or 0))
        leap_stack = build_leaps(prefill, unlock, monthly_capital_available=monthly_capital,
                                 deferral_cap=deferral_cap)
        primary = select_primary_leap(PrimaryLeapInputs(
            employer_match_enabled=has_match,
            current_401k_pct=current_pct,
            match_cap_pct=match_cap_pct,
            k401_at_cap=leap_stack.k401_at_cap,
            salary_annual=salary,
            unlock=unlock,
            leaps=leap_stack.leaps,
            deferral_cap=deferral_cap,
        ))

        # Rent
        rent_spec = profile.get('rent', {})
        rent_plan = build_rent_plan(tax.net_income_monthly, rent_spec.get('debtMonthly', 0),
                                    tax_breakdown=tax, city=rent_spec.get('city'))
        market_comparison = self._market_comparison(rent_spec.get('metro'), rent_spec.get('city'),
                                                    state, rent_plan)

        impact_inputs = None
        impacts = []
        impact_spec = profile.get('netWorthImpact')
        if impact_spec:
            impact_inputs = ImpactInputs(
                monthly_delta=impact_spec.get('monthlyDelta', 0),
                use_case=impact_spec.get('useCase', 'investing'),
                debt_apr=impact_spec.get('debtAprPct', 18) / 100,
            )
            impacts = compute_impacts(impact_inputs)

        return PlanData(
            state=state,
            tax_year=tax_year,
            deferral_cap=deferral_cap,
            tax=tax,
            take_home=take_home,
            net_take_home_monthly=take_home['net_monthly'],
            recommendation=recommendation,
            trajectory=trajectory,
            cost_of_delay_12mo=delay_cost,
            prefill=prefill,
            unlock=unlock,
            monthly_capital_available=monthly_capital,
            leap_stack=leap_stack,
            primary=primary,
            supporting_leaps=get_supporting_leaps(leap_stack.leaps, primary.kind),
            rent_plan=rent_plan,
            market_comparison=market_comparison,
            impact_inputs=impact_inputs,
            impacts=impacts,
        )

    @staticmethod
    def _unlock_fields(unlock_spec: dict) -> dict:
        keys = {
            'essentialMonthly': 'essential_monthly',
            'carriesBalance': 'carries_balance',
            'debtAprRange': 'debt_apr_range',
            'debtBalance': 'debt_balance',
            'retirementFocus': 'retirement_focus',
            'hsaEligible': 'hsa_eligible',
            'currentHsaAnnual': 'current_hsa_annual',
            'hsaCoverageType': 'hsa_coverage_type',
        }
        return {keys[k]: v for k, v in unlock_spec.items() if k in keys}

    def _market_comparison(self, metro: Optional[str], city: Optional[str], state: str,
                           rent_plan) -> Optional[MarketComparison]:
        """ZORI metro market rent when the metro is known, else the HUD range for the city."""
        safe = rent_plan.rent_range
        if metro and self.zori_store is not None:
            median, region = self.zori_store.median_rent_for_region(metro, state)
            if median is not None:
                market = calculate_market_rent_range(median)
                return MarketComparison(
                    region_name=region,
                    market_low=market.market_low,
                    market_high=market.market_high,
                    position=compare_market_to_safe(market.market_low, market.market_high, safe.low, safe.high),
                    source='zori',
                    median_rent=median,
                )

        hud = get_hud_rent_range(city) if city else None
        if hud is None:
            return None
        return MarketComparison(
            region_name=CITY_TO_HUD_KEY[city],
            market_low=hud['low'],
            market_high=hud['high'],
            position=compare_rent_ranges(safe.low, safe.high, hud['low'], hud['high']),
            source='hud',
        )
