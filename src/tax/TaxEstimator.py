"""Take-home tax estimation.

Two estimators share one interface:

- FallbackTaxEstimator: deterministic, bracket-based effective rates loaded
  from the reference files. Always available.
- ApiNinjasTaxEstimator: calls the API Ninjas income tax calculator and
  degrades to the fallback on any failure, timeout, or missing API key.

Callers never see an exception from a dependency failure; the result's
`source` field tells them which estimator produced it.
"""

import logging
from typing import Optional

import httpx

from model.TaxBreakdown import TaxBreakdown
from model.validation import InputValidationError
from planner_config import PlannerConfig
from tax.FederalDetails import FederalDetails
from tax.StateDetails import StateDetails
from calc.rounding import round_half_up

logger = logging.getLogger(__name__)

SOLVE_MAX_ITERATIONS = 50
SOLVE_TOLERANCE = 1


class FallbackTaxEstimator:
    """Conservative effective-rate estimate of federal, state and FICA tax."""

    def __init__(self, federal: FederalDetails, state: StateDetails, tax_year: int = 2025):
        self.federal = federal
        self.state = state
        self.tax_year = tax_year

    def estimate(self, gross_annual: float, state_code: str) -> TaxBreakdown:
        """Estimate taxes on a gross annual income.

        Every component is taxed on the full gross at its effective rate.
        Non-positive income yields an all-zero breakdown.
        """
        income = max(0.0, gross_annual)
        federal_tax = income * self.federal.effectiveRate(income, self.tax_year)
        state_tax = income * self.state.effectiveRate(state_code)
        fica_tax = income * self.state.ficaRate()
        total_tax = federal_tax + state_tax + fica_tax

        return TaxBreakdown(
            gross_annual=gross_annual,
            federal_tax_annual=round_half_up(federal_tax),
            state_tax_annual=round_half_up(state_tax),
            fica_tax_annual=round_half_up(fica_tax),
            total_tax_annual=round_half_up(total_tax),
            net_income_annual=round_half_up(income - total_tax),
            source='fallback',
        )

    def estimate_tax_annual(self, taxable_income_annual: float, state_code: str) -> int:
        """Total annual tax on an already-reduced taxable income (after 401(k) and HSA)."""
        if taxable_income_annual <= 0:
            return 0
        return self.estimate(taxable_income_annual, state_code).total_tax_annual

    def solve_gross_from_take_home(self, take_home_annual: float, state_code: str) -> TaxBreakdown:
        """Find the gross salary whose fallback take-home matches the target.

        Binary search between take-home and twice take-home, stopping when
        the net is within $1 or after 50 iterations.
        """
        if take_home_annual is None or take_home_annual <= 0:
            raise InputValidationError('takeHomeAnnual', 'Take-home pay must be greater than zero.')

        low = take_home_annual
        high = take_home_annual * 2
        for _ in range(SOLVE_MAX_ITERATIONS):
            guess = round_half_up((low + high) / 2)
            result = self.estimate(guess, state_code)
            diff = result.net_income_annual - take_home_annual
            if abs(diff) <= SOLVE_TOLERANCE:
                return result
            if diff < 0:
                low = guess
            else:
                high = guess

        return self.estimate(round_half_up((low + high) / 2), state_code)


class ApiNinjasTaxEstimator:
    """Live tax estimate from API Ninjas, with the fallback estimator behind it."""

    def __init__(self, config: PlannerConfig, fallback: FallbackTaxEstimator,
                 client: Optional[httpx.Client] = None):
        self.config = config
        self.fallback = fallback
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.config.tax_timeout_seconds)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _fetch(self, gross_annual: float, state_code: str) -> TaxBreakdown:
        response = self._get_client().get(
            self.config.tax_api_url,
            params={
                'country': 'US',
                'region': state_code,
                'income': str(gross_annual),
                'filing_status': 'single',
            },
            headers={'X-Api-Key': self.config.api_ninjas_key},
            timeout=self.config.tax_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()

        state_tax = data.get('region_taxes_owed') or 0
        fica_tax = data.get('fica_total') or (
            (data.get('fica_social_security') or 0) + (data.get('fica_medicare') or 0))
        total_tax = data.get('total_taxes_owed') or 0
        net_income = data.get('income_after_tax') or (gross_annual - total_tax)
        federal_tax = total_tax - state_tax - fica_tax

        return TaxBreakdown(
            gross_annual=gross_annual,
            federal_tax_annual=round_half_up(federal_tax),
            state_tax_annual=round_half_up(state_tax),
            fica_tax_annual=round_half_up(fica_tax),
            total_tax_annual=round_half_up(total_tax),
            net_income_annual=round_half_up(net_income),
            source='api',
        )

    def estimate(self, gross_annual: float, state_code: str) -> TaxBreakdown:
        if not self.config.api_ninjas_key:
            logger.warning("API_NINJAS_KEY not configured, using fallback tax estimate")
            return self.fallback.estimate(gross_annual, state_code)

        try:
            return self._fetch(gross_annual, state_code)
        except httpx.TimeoutException:
            logger.warning("Tax API request timed out, falling back to estimate")
        except httpx.HTTPStatusError as e:
            logger.warning("Tax API request failed: %s %s", e.response.status_code, e.response.text)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.error("Error calling tax API: %s", e)
        return self.fallback.estimate(gross_annual, state_code)

    def estimate_tax_annual(self, taxable_income_annual: float, state_code: str) -> int:
        return self.fallback.estimate_tax_annual(taxable_income_annual, state_code)

    def solve_gross_from_take_home(self, take_home_annual: float, state_code: str) -> TaxBreakdown:
        # The API has no reverse mode
        return self.fallback.solve_gross_from_take_home(take_home_annual, state_code)


def create_tax_estimator(config: PlannerConfig, federal: Optional[FederalDetails] = None,
                         state: Optional[StateDetails] = None,
                         client: Optional[httpx.Client] = None):
    """Build the estimator for a config: live API when a key is set, fallback otherwise."""
    fallback = FallbackTaxEstimator(federal or FederalDetails(), state or StateDetails(), config.tax_year)
    if config.api_ninjas_key:
        return ApiNinjasTaxEstimator(config, fallback, client=client)
    return fallback
