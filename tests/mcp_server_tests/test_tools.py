"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from planner_config import PlannerConfig
from tools import LeapPlannerTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory with input-parameters/testprofile/profile.json."""
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprofile'),
        os.path.join(input_params_dir, 'testprofile')
    )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def tools(test_base_path):
    """LeapPlannerTools on the test profile with the fallback tax estimator."""
    return LeapPlannerTools(test_base_path, 'testprofile', config=PlannerConfig())


class TestProfiles:
    """Tests for profile discovery and caching."""

    def test_discovers_profile(self, tools):
        assert list(tools.plans) == ['testprofile']
        assert tools.default_profile == 'testprofile'

    def test_default_is_first_profile(self, test_base_path):
        tools = LeapPlannerTools(test_base_path, config=PlannerConfig())
        assert tools.default_profile == 'testprofile'

    def test_list_profiles(self, tools):
        result = tools.list_profiles()
        assert result['available_profiles'] == ['testprofile']
        info = result['profiles_info']['testprofile']
        assert info['salary_annual'] == 90000
        assert info['state'] == 'CA'
        assert info['employer_match_enabled'] is True
        assert info['next_leap_id'] == 'emergency_fund'

    def test_unknown_profile(self, tools):
        with pytest.raises(ValueError, match="Profile 'nobody' not found"):
            tools.build_leap_stack('nobody')

    def test_missing_input_parameters(self, tmp_path):
        tools = LeapPlannerTools(str(tmp_path), config=PlannerConfig())
        assert tools.list_profiles()['available_profiles'] == []
        assert tools.default_profile is None

    def test_invalid_profile_is_skipped(self, tmp_path):
        for name, content in (('good', None), ('broken', '{not json'), ('nosalary', '{"state": "TX"}')):
            folder = tmp_path / 'input-parameters' / name
            folder.mkdir(parents=True)
            if content is None:
                shutil.copy(os.path.join(FIXTURES_PATH, 'testprofile', 'profile.json'), folder / 'profile.json')
            else:
                (folder / 'profile.json').write_text(content)
        tools = LeapPlannerTools(str(tmp_path), config=PlannerConfig())
        assert list(tools.plans) == ['good']

    def test_reload_profiles(self, tmp_path):
        folder = tmp_path / 'input-parameters' / 'first'
        folder.mkdir(parents=True)
        shutil.copy(os.path.join(FIXTURES_PATH, 'testprofile', 'profile.json'), folder / 'profile.json')
        tools = LeapPlannerTools(str(tmp_path), config=PlannerConfig())

        second = tmp_path / 'input-parameters' / 'second'
        second.mkdir()
        shutil.copy(folder / 'profile.json', second / 'profile.json')
        result = tools.reload_profiles()

        assert result['status'] == 'success'
        assert result['profiles_loaded'] == ['first', 'second']
        assert result['changes'] == {'added': ['second'], 'removed': [], 'reloaded': ['first']}


class TestEngineTools:
    """Tests for the tools that take explicit arguments."""

    def test_estimate_tax(self, tools):
        result = tools.estimate_tax(100000, 'TX')
        assert result['net_income_annual'] == 68350
        assert result['source'] == 'fallback'

    def test_solve_gross(self, tools):
        result = tools.solve_gross(42210, 'TX')
        assert result['target_take_home_annual'] == 42210
        assert abs(result['net_income_annual'] - 42210) <= 1

    def test_run_trajectory_defaults_to_recommendation(self, tools):
        result = tools.run_trajectory(100000, 3, has_employer_match=True)
        assert result['optimized_401k_pct'] == 5
        assert len(result['optimized_by_year']) == 31
        assert result['delta_30yr'] > 0

    def test_run_trajectory_explicit_target(self, tools):
        result = tools.run_trajectory(60000, 5, optimized_401k_pct=10, real_return=0.0)
        assert result['delta_30yr'] == 90000

    def test_cost_of_delay(self, tools):
        result = tools.cost_of_delay(60000, 5, optimized_401k_pct=10, real_return=0.0)
        assert result == {'optimized_401k_pct': 10, 'delay_months': 12, 'cost_of_delay': 3000}

    def test_net_worth_impact(self, tools):
        result = tools.net_worth_impact(100, use_case='cash')
        assert [h['years'] for h in result['horizons']] == [1, 10, 30]
        assert result['horizons'][0]['impact'] == 1200

    def test_net_worth_impact_unknown_use_case(self, tools):
        with pytest.raises(ValueError):
            tools.net_worth_impact(100, use_case='lottery')

    def test_rent_plan_explicit(self, tools):
        result = tools.rent_plan(5000)
        assert result['rent_range']['formatted'] == '$1,400–$1,750'
        assert result['tax_breakdown'] is None

    def test_rent_plan_from_profile(self, tools):
        result = tools.rent_plan()
        assert result['tax_breakdown']['net_income_annual'] == 55215
        assert result['city'] == 'SF Bay Area'

    def test_recommended_leap(self, tools):
        result = tools.recommended_leap(True, 5, 3)
        assert result['type'] == 'capture_match'
        assert result['summary'] == 'Increase 401(k) from 3% → 5%'

    def test_capital_routing(self, tools):
        result = tools.capital_routing(1000, 0, {
            'essential_monthly': 2000,
            'carries_balance': True,
            'debt_apr_range': '20+',
            'debt_balance': 5000,
            'retirement_focus': 'medium',
        })
        assert result['ef_alloc'] == pytest.approx(400)
        assert result['debt_alloc'] == pytest.approx(240)
        assert result['total_allocated'] == pytest.approx(1000)
        assert result['months_to_ef_target'] == 15

    def test_capital_routing_without_unlock(self, tools):
        result = tools.capital_routing(1000)
        assert result['retirement_alloc'] == pytest.approx(600)

    def test_stack_preview(self, tools):
        result = tools.stack_preview(True, 3)
        assert [s['step_number'] for s in result['steps']] == [1, 2, 3, 4, 5]
        assert result['steps'][1]['status'] == 'in_progress'

    def test_market_rent_found(self, tools):
        result = tools.market_rent('Austin', 'TX', safe_low=1400, safe_high=1750)
        assert result['found'] is True
        assert result['region_name'] == 'Austin, TX'
        assert result['market_low'] == 1575
        assert result['position'] == 'overlap'

    def test_market_rent_not_found_lists_options(self, tools):
        result = tools.market_rent('Nowhere', 'TX')
        assert result['found'] is False
        assert result['options'][-1]['value'] == '__OTHER__'


class TestProfileTools:
    """Tests for the tools that read a cached profile plan."""

    def test_build_leap_stack(self, tools):
        result = tools.build_leap_stack()
        assert result['profile'] == 'testprofile'
        assert result['next_leap_id'] == 'emergency_fund'
        assert [leap['id'] for leap in result['leaps']] == [
            'match', 'hsa', 'emergency_fund', 'debt', 'retirement_split', 'brokerage']
        assert result['leaps'][0]['category'] == 'match'
        assert result['match_captured'] is True
        assert result['allocator_url'].startswith('https://www.weleap.ai/allocator?salaryAnnual=90000')

    def test_leap_stack_is_json_serializable(self, tools):
        json.dumps(tools.build_leap_stack(), default=str)

    def test_primary_leap(self, tools):
        result = tools.primary_leap('testprofile')
        assert result['kind'] == 'retirement_15'
        assert result['retirement_15'] == {'current_pct': 4, 'target_pct': 15}
        assert result['leap'] is None
        assert [leap['id'] for leap in result['supporting_leaps']] == [
            'emergency_fund', 'debt', 'retirement_split']
