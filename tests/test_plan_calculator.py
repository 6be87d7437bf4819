"""Tests for the PlanCalculator class.

These run the whole funnel for the bundled profiles with the fallback tax
estimator, so no network access is needed.
"""

import os
import sys
import json
import pytest
from unittest.mock import Mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.plan_calculator import PlanCalculator
from market.zori_store import ZoriDataStore
from model.validation import InputValidationError
from planner_config import DEFAULT_ZORI_CSV
from tax.FederalDetails import FederalDetails
from tax.StateDetails import StateDetails
from tax.TaxEstimator import FallbackTaxEstimator

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def load_profile(name):
    with open(os.path.join(REPO_ROOT, 'input-parameters', name, 'profile.json'), 'r') as f:
        return json.load(f)


@pytest.fixture
def calculator():
    federal = FederalDetails()
    estimator = FallbackTaxEstimator(federal, StateDetails())
    return PlanCalculator(estimator, federal, ZoriDataStore(DEFAULT_ZORI_CSV))


class TestExampleProfile:

    @pytest.fixture
    def plan(self, calculator):
        return calculator.calculate(load_profile('example'))

    def test_taxes(self, plan):
        assert plan.state == 'TX'
        assert plan.tax.net_income_annual == 68350
        assert plan.net_take_home_monthly == pytest.approx(5468)

    def test_deferral_cap_for_year(self, plan):
        assert plan.tax_year == 2025
        assert plan.deferral_cap == 23500

    def test_recommendation_captures_match(self, plan):
        assert plan.recommendation.type == 'capture_match'
        assert plan.recommendation.optimized_401k_pct == 5
        assert plan.trajectory.delta_30yr > 0
        assert plan.cost_of_delay_12mo > 0

    def test_leap_stack(self, plan):
        assert plan.leap_stack.next_leap_id == 'match'
        assert plan.next_leap.id == 'match'
        debt = plan.leap_stack.find('debt')
        assert debt.title == 'High-APR debt: $6,000 at 22% APR'

    def test_routing_uses_take_home_after_pretax(self, plan):
        assert plan.monthly_capital_available == pytest.approx(5468 - 2800)
        routing = plan.leap_stack.routing
        assert routing.total_allocated == pytest.approx(plan.monthly_capital_available)

    def test_primary_and_supporting(self, plan):
        assert plan.primary.kind == 'match'
        assert [leap.id for leap in plan.supporting_leaps] == ['emergency_fund', 'debt', 'retirement_split']

    def test_rent_plan(self, plan):
        # (68350 / 12 - 250) * 28% and 35%, to the nearest $25
        assert plan.rent_plan.rent_range.low == 1525
        assert plan.rent_plan.rent_range.high == 1900
        assert plan.rent_plan.city == 'Austin'

    def test_zori_market_comparison(self, plan):
        market = plan.market_comparison
        assert market.source == 'zori'
        assert market.region_name == 'Austin, TX'
        assert market.median_rent == 1650
        assert (market.market_low, market.market_high) == (1575, 1850)
        assert market.position == 'overlap'

    def test_net_worth_impacts(self, plan):
        assert [h.years for h in plan.impacts] == [1, 10, 30]
        assert plan.impact_inputs.monthly_delta == 200


class TestNewGradProfile:

    @pytest.fixture
    def plan(self, calculator):
        return calculator.calculate(load_profile('new-grad'))

    def test_no_match(self, plan):
        match = plan.leap_stack.find('match')
        assert match.title == 'No employer match'
        assert match.status == 'complete'
        assert plan.leap_stack.next_leap_id is None

    def test_primary_is_retirement_floor(self, plan):
        assert plan.primary.kind == 'retirement_15'
        assert plan.primary.retirement_15.target_pct == 15

    def test_taxes(self, plan):
        # 22% federal + 6% NY + 7.65% FICA on 68,000
        assert plan.tax.total_tax_annual == 24242
        assert plan.tax.net_income_annual == 43758

    def test_market(self, plan):
        assert plan.market_comparison.region_name == 'New York, NY'
        assert plan.market_comparison.position == 'above'

    def test_no_impacts(self, plan):
        assert plan.impacts == []
        assert plan.impact_inputs is None


class TestMarketFallback:

    def test_hud_when_no_metro(self, calculator):
        profile = load_profile('example')
        profile['rent'] = {'city': 'Chicago'}
        market = calculator.calculate(profile).market_comparison
        assert market.source == 'hud'
        assert market.region_name == 'Chicago, IL'
        assert (market.market_low, market.market_high) == (1200, 1500)
        assert market.median_rent is None

    def test_no_market_for_unknown_city(self, calculator):
        profile = load_profile('example')
        profile['rent'] = {'city': 'Smallville'}
        assert calculator.calculate(profile).market_comparison is None

    def test_zori_store_optional(self):
        federal = FederalDetails()
        calculator = PlanCalculator(FallbackTaxEstimator(federal, StateDetails()), federal)
        plan = calculator.calculate(load_profile('example'))
        assert plan.market_comparison.source == 'hud'


class TestValidation:

    def test_missing_salary(self, calculator):
        profile = load_profile('example')
        del profile['salaryAnnual']
        with pytest.raises(InputValidationError) as excinfo:
            calculator.calculate(profile)
        assert excinfo.value.field == 'salary'

    def test_missing_state(self, calculator):
        profile = load_profile('example')
        profile['state'] = ''
        with pytest.raises(InputValidationError):
            calculator.calculate(profile)

    def test_estimator_not_called_for_invalid_profile(self):
        estimator = Mock()
        calculator = PlanCalculator(estimator, FederalDetails())
        with pytest.raises(InputValidationError):
            calculator.calculate({'salaryAnnual': 0, 'state': 'TX'})
        estimator.estimate.assert_not_called()


def test_tax_year_selects_deferral_cap(calculator):
    profile = load_profile('example')
    profile['taxYear'] = 2026
    plan = calculator.calculate(profile)
    assert plan.deferral_cap == 24500
