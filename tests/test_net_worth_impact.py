"""Tests for the net worth impact of a recurring monthly change."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.net_worth_impact import (
    ImpactInputs,
    compute_cash_impact,
    compute_debt_impact,
    compute_impact,
    compute_impacts,
    compute_investing_impact,
    impact_sentence,
    rent_net_worth_protection_30yr,
)


def test_investing_zero_return_is_linear():
    assert compute_investing_impact(100, 0.0, 10) == 12000


def test_investing_compounds():
    assert compute_investing_impact(100, 0.07, 10) > 12000


def test_investing_is_sign_symmetric():
    assert compute_investing_impact(-100, 0.07, 10) == pytest.approx(-compute_investing_impact(100, 0.07, 10))


def test_cash_has_no_growth():
    assert compute_cash_impact(200, 1) == 2400
    assert compute_cash_impact(-200, 2) == -4800


def test_debt_interest_saved():
    # 12,000 extra principal over 10 years at 18%: 12000 * 1.8 / 2
    assert compute_debt_impact(100, 0.18, 10) == pytest.approx(10800)


def test_debt_negative_delta_costs_interest():
    assert compute_debt_impact(-100, 0.18, 10) == pytest.approx(-10800)


def test_unknown_use_case_raises():
    with pytest.raises(ValueError, match="Unknown use case"):
        compute_impact(ImpactInputs(monthly_delta=100, use_case='lottery'), 10)


def test_compute_impacts_default_horizons():
    impacts = compute_impacts(ImpactInputs(monthly_delta=100))
    assert [h.years for h in impacts] == [1, 10, 30]
    assert impacts[0].impact < impacts[1].impact < impacts[2].impact


def test_compute_impacts_custom_horizons():
    impacts = compute_impacts(ImpactInputs(monthly_delta=50, use_case='cash'), horizons=[5])
    assert len(impacts) == 1
    assert impacts[0].impact == 3000


class TestImpactSentence:

    def test_investing_positive(self):
        sentence = impact_sentence('investing', 100, 1200)
        assert sentence == "If you invest $100/month, future-you gains about +$1,200."

    def test_investing_negative(self):
        sentence = impact_sentence('investing', -100, -1200)
        assert sentence == "If you pull out $100/month, future-you is about -$1,200 lower."

    def test_cash_negative(self):
        sentence = impact_sentence('cash', -50, -600)
        assert sentence == "If you spend $50/month more from savings, you'll have -$600 less."

    def test_debt_positive(self):
        sentence = impact_sentence('debt', 100, 10800)
        assert sentence == "If you pay $100/month extra, you could save about +$10,800 in interest."

    def test_debt_negative_reports_a_loss(self):
        impacts = compute_impacts(ImpactInputs(monthly_delta=-200, use_case='debt'))
        assert [h.impact for h in impacts] == pytest.approx([-216, -21600, -194400])
        assert impacts[0].sentence == "Paying $200/month less could cost you about -$216 in extra interest."

    def test_unknown_use_case_falls_back(self):
        assert impact_sentence('other', 10, 5) == "Future impact: +$5."

    def test_sentences_attached_to_impacts(self):
        impacts = compute_impacts(ImpactInputs(monthly_delta=100, use_case='investing', real_return=0.0),
                                  horizons=[1])
        assert impacts[0].sentence == "If you invest $100/month, future-you gains about +$1,200."


class TestRentProtection:

    @pytest.mark.parametrize("take_home", [0, None, -100])
    def test_zero_for_no_take_home(self, take_home):
        assert rent_net_worth_protection_30yr(take_home) == 0

    def test_five_percent_overspend_invested(self):
        expected = round(compute_investing_impact(250, 0.07, 30))
        assert rent_net_worth_protection_30yr(5000) == pytest.approx(expected, abs=1)
