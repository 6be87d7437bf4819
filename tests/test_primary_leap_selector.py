"""Tests for selecting the primary leap."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.leap_stack_builder import build_leaps
from calc.primary_leap_selector import (
    PrimaryLeapInputs,
    get_supporting_leaps,
    retirement_target_pct,
    select_primary_leap,
)
from model.AllocatorInputs import AllocatorPrefill, AllocatorUnlockData


def select(current_pct, unlock=None, match_enabled=True, salary=100000, k401_at_cap=False):
    prefill = AllocatorPrefill(salary_annual=salary, state='TX', employer_match_enabled=match_enabled,
                               current_401k_pct=current_pct, recommended_401k_pct=5)
    leaps = build_leaps(prefill, unlock).leaps
    return select_primary_leap(PrimaryLeapInputs(
        employer_match_enabled=match_enabled,
        current_401k_pct=current_pct,
        match_cap_pct=5,
        k401_at_cap=k401_at_cap,
        salary_annual=salary,
        unlock=unlock,
        leaps=leaps,
    ))


class TestSelectPrimaryLeap:

    def test_match_first(self):
        result = select(3)
        assert result.kind == 'match'
        assert result.leap.category == 'match'
        assert result.leap.is_payroll is True

    @pytest.mark.parametrize("current", [5, 10])
    def test_retirement_floor(self, current):
        result = select(current)
        assert result.kind == 'retirement_15'
        assert result.retirement_15.current_pct == current
        assert result.retirement_15.target_pct == 15
        assert result.leap is None

    def test_growth_split_without_debt(self):
        result = select(16, AllocatorUnlockData(essential_monthly=2000, carries_balance=False))
        assert result.kind == 'growth_split'
        assert result.leap.category == 'retirement_split'

    def test_debt_when_balance_carried(self):
        unlock = AllocatorUnlockData(essential_monthly=2000, carries_balance=True,
                                     debt_apr_range='20+', debt_balance=4000)
        result = select(16, unlock)
        assert result.kind == 'debt'
        assert result.leap.is_active is True

    def test_at_cap_skips_retirement_floor(self):
        result = select(10, match_enabled=False, k401_at_cap=True)
        assert result.kind == 'growth_split'

    def test_no_match_skips_match(self):
        assert select(0, match_enabled=False).kind == 'retirement_15'

    def test_deterministic(self):
        assert select(5) == select(5)


class TestRetirementTarget:

    def test_fifteen_percent_floor(self):
        assert retirement_target_pct(100000) == 15
        assert retirement_target_pct(0) == 15

    def test_lowered_to_deferral_limit(self):
        # 23,500 is 11.75% of 200k
        assert retirement_target_pct(200000) == pytest.approx(11.75)
        assert retirement_target_pct(200000, deferral_cap=24500) == pytest.approx(12.25)


class TestSupportingLeaps:

    @pytest.fixture
    def leaps(self):
        unlock = AllocatorUnlockData(essential_monthly=2000, carries_balance=True,
                                     debt_apr_range='20+', debt_balance=4000, retirement_focus='low')
        prefill = AllocatorPrefill(salary_annual=90000, state='CA', employer_match_enabled=True,
                                   current_401k_pct=3, recommended_401k_pct=5)
        return build_leaps(prefill, unlock).leaps

    def test_match_primary_keeps_all_supporting(self, leaps):
        ids = [leap.id for leap in get_supporting_leaps(leaps, 'match')]
        assert ids == ['emergency_fund', 'debt', 'retirement_split']

    def test_debt_primary_excludes_debt(self, leaps):
        ids = [leap.id for leap in get_supporting_leaps(leaps, 'debt')]
        assert ids == ['emergency_fund', 'retirement_split']

    def test_growth_split_primary_excludes_split(self, leaps):
        ids = [leap.id for leap in get_supporting_leaps(leaps, 'growth_split')]
        assert ids == ['emergency_fund', 'debt']

    def test_unknown_kind(self, leaps):
        with pytest.raises(ValueError, match="Unknown primary kind"):
            get_supporting_leaps(leaps, 'lottery')
