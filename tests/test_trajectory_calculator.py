"""Tests for the 401(k) trajectory simulation and cost of delay."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.trajectory_calculator import (
    TrajectoryInputs,
    cost_of_delay,
    employer_match_monthly,
    fv_monthly_contributions,
    monthly_contribution,
    run_trajectory,
    trajectory_inputs_from_prefill,
)
from model.AllocatorInputs import AllocatorPrefill


def make_inputs(**overrides):
    values = dict(
        gross_annual=100000,
        current_401k_pct=3,
        optimized_401k_pct=5,
        match_pct=5,
        has_employer_match=True,
    )
    values.update(overrides)
    return TrajectoryInputs(**values)


class TestFutureValue:

    def test_zero_rate_is_linear(self):
        assert fv_monthly_contributions(250, 0, 12) == 3000

    def test_positive_rate_beats_linear(self):
        assert fv_monthly_contributions(250, 0.07 / 12, 12) > 3000

    def test_zero_months(self):
        assert fv_monthly_contributions(250, 0.07 / 12, 0) == 0


class TestEmployerMatch:

    def test_dollar_for_dollar_up_to_cap(self):
        # 3% of 100k matched 100% = 3000/year
        assert employer_match_monthly(100000, 3, 100, 5) == pytest.approx(250)

    def test_match_stops_at_cap(self):
        assert employer_match_monthly(100000, 10, 100, 5) == pytest.approx(5000 / 12)

    def test_partial_match_rate(self):
        # 50% match on the first 5%: 2.5% of salary
        assert employer_match_monthly(100000, 6, 50, 5) == pytest.approx(2500 / 12)


class TestMonthlyContribution:

    def test_employee_plus_match(self):
        inputs = make_inputs()
        assert monthly_contribution(inputs, 3) == pytest.approx(6000 / 12)

    def test_no_match(self):
        inputs = make_inputs(has_employer_match=False)
        assert monthly_contribution(inputs, 3) == pytest.approx(3000 / 12)

    def test_employee_capped_at_deferral_limit(self):
        inputs = make_inputs(gross_annual=200000, has_employer_match=False)
        assert monthly_contribution(inputs, 50) == pytest.approx(23500 / 12)

    def test_custom_deferral_cap(self):
        inputs = make_inputs(gross_annual=200000, has_employer_match=False, deferral_cap=24500)
        assert monthly_contribution(inputs, 50) == pytest.approx(24500 / 12)


class TestRunTrajectory:

    def test_year_zero_is_zero(self):
        result = run_trajectory(make_inputs())
        assert result.baseline_by_year[0] == 0
        assert result.optimized_by_year[0] == 0

    def test_length_and_labels(self):
        result = run_trajectory(make_inputs())
        assert len(result.baseline_by_year) == 31
        assert len(result.optimized_by_year) == 31
        assert result.year_labels == list(range(31))

    @pytest.mark.parametrize("real_return", [0.0, 0.03, 0.07])
    @pytest.mark.parametrize("current,optimized", [(0, 5), (3, 5), (10, 23.5), (5, 0)])
    def test_paths_are_non_decreasing(self, real_return, current, optimized):
        result = run_trajectory(make_inputs(current_401k_pct=current, optimized_401k_pct=optimized,
                                            real_return=real_return))
        for path in (result.baseline_by_year, result.optimized_by_year):
            assert all(b >= a for a, b in zip(path, path[1:]))

    @pytest.mark.parametrize("current,optimized", [(3, 5), (5, 3), (5, 5), (0, 15)])
    def test_delta_is_end_difference(self, current, optimized):
        result = run_trajectory(make_inputs(current_401k_pct=current, optimized_401k_pct=optimized))
        assert result.delta_30yr == result.optimized_end - result.baseline_end
        assert result.baseline_end == result.baseline_by_year[-1]
        assert result.optimized_end == result.optimized_by_year[-1]

    def test_zero_return_sums_contributions(self):
        inputs = make_inputs(gross_annual=60000, current_401k_pct=5, optimized_401k_pct=10,
                             has_employer_match=False, real_return=0.0, years=3)
        result = run_trajectory(inputs)
        assert result.baseline_by_year == [0, 3000, 6000, 9000]
        assert result.optimized_by_year == [0, 6000, 12000, 18000]
        assert result.delta_30yr == 9000

    def test_values_are_whole_dollars(self):
        result = run_trajectory(make_inputs())
        assert all(isinstance(v, int) for v in result.optimized_by_year)

    def test_negative_delta_when_optimized_is_lower(self):
        result = run_trajectory(make_inputs(current_401k_pct=10, optimized_401k_pct=5))
        assert result.delta_30yr < 0


class TestCostOfDelay:

    def test_non_negative_when_increasing(self):
        assert cost_of_delay(make_inputs()) > 0

    def test_zero_when_no_change(self):
        inputs = make_inputs(current_401k_pct=5, optimized_401k_pct=5, real_return=0.0)
        assert cost_of_delay(inputs) == 0

    def test_measured_against_trajectory_end(self):
        inputs = make_inputs()
        monthly_rate = inputs.real_return / 12
        baseline = fv_monthly_contributions(monthly_contribution(inputs, 3), monthly_rate, 12)
        delayed_end = (baseline * (1 + monthly_rate) ** 348
                       + fv_monthly_contributions(monthly_contribution(inputs, 5), monthly_rate, 348))
        expected = run_trajectory(inputs).optimized_end - delayed_end
        assert cost_of_delay(inputs) == pytest.approx(expected, abs=1)

    def test_zero_return_is_missed_contributions(self):
        inputs = make_inputs(gross_annual=60000, current_401k_pct=5, optimized_401k_pct=10,
                             has_employer_match=False, real_return=0.0)
        # 12 months at 250/month instead of 500/month
        assert cost_of_delay(inputs) == 3000

    def test_longer_delay_costs_more(self):
        inputs = make_inputs()
        assert cost_of_delay(inputs, delay_months=24) > cost_of_delay(inputs, delay_months=12)

    def test_delay_longer_than_horizon_is_clamped(self):
        inputs = make_inputs(years=1, real_return=0.0, has_employer_match=False,
                             gross_annual=60000, current_401k_pct=5, optimized_401k_pct=10)
        assert cost_of_delay(inputs, delay_months=36) == 3000


def test_inputs_from_prefill():
    prefill = AllocatorPrefill(
        salary_annual=80000,
        state='CA',
        employer_match_enabled=True,
        current_401k_pct=2,
        recommended_401k_pct=6,
        match_rate_pct=50,
        match_cap_pct=6,
    )
    inputs = trajectory_inputs_from_prefill(prefill)
    assert inputs.gross_annual == 80000
    assert inputs.current_401k_pct == 2
    assert inputs.optimized_401k_pct == 6
    assert inputs.match_pct == 6
    assert inputs.match_rate_pct == 50
    assert inputs.has_employer_match is True

    override = trajectory_inputs_from_prefill(prefill, optimized_401k_pct=10, deferral_cap=24500)
    assert override.optimized_401k_pct == 10
    assert override.deferral_cap == 24500
