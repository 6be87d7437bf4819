"""Tests for rounding and display formatting."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.formatting import (
    format_compact_currency,
    format_currency,
    format_currency_range,
    format_currency_signed,
    format_pct,
    format_percent,
)
from calc.rounding import round_half_up, round_to_nearest, round_to_nearest_25, round_to_nearest_100


class TestRounding:

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (-2.5, -2), (1.49, 1), (0, 0)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_nearest_25(self):
        assert round_to_nearest_25(1120) == 1125
        assert round_to_nearest_25(1112.4) == 1100

    def test_nearest_100(self):
        assert round_to_nearest_100(4150) == 4200
        assert round_to_nearest_100(816.67) == 800

    def test_step_must_be_positive(self):
        with pytest.raises(ValueError):
            round_to_nearest(10, 0)


class TestCurrency:

    def test_format_currency(self):
        assert format_currency(1234.4) == '$1,234'
        assert format_currency(-1234) == '-$1,234'
        assert format_currency(0) == '$0'

    def test_tiny_negative_is_not_signed(self):
        assert format_currency(-0.2) == '$0'

    def test_signed(self):
        assert format_currency_signed(1200) == '+$1,200'
        assert format_currency_signed(-600) == '-$600'
        assert format_currency_signed(0) == '+$0'

    def test_range_uses_en_dash(self):
        assert format_currency_range(1400, 1750) == '$1,400–$1,750'

    def test_compact(self):
        assert format_compact_currency(17200) == '~$17K'
        assert format_compact_currency(950) == '~$950'


class TestPercent:

    @pytest.mark.parametrize("value,expected", [(5, '5%'), (11.75, '11.75%'), (23.5, '23.5%'), (0, '0%')])
    def test_format_pct(self, value, expected):
        assert format_pct(value) == expected

    def test_format_percent(self):
        assert format_percent(22) == '22%'
        assert format_percent(0.1234 * 100, 1) == '12.3%'
