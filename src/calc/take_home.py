from dataclasses import dataclass
from typing import Dict

from tax.TaxEstimator import FallbackTaxEstimator


@dataclass
class TakeHomeInputs:
    """Salary and pre-tax elections for a single take-home estimate."""
    salary_annual: float
    employee_401k_pct: float
    current_hsa_annual: float
    state_code: str


class TakeHomeCalculator:
    """Calculator that computes realistic take-home pay after pre-tax savings.

    Taxable income = gross - 401(k) - HSA. Tax on the taxable income uses the
    same effective-rate logic as the fallback tax estimator, which is passed
    in so file I/O stays with the caller.
    """

    def __init__(self, estimator: FallbackTaxEstimator):
        self.estimator = estimator

    def calculate(self, inputs: TakeHomeInputs) -> Dict:
        """Calculate the annual and monthly take-home for the given elections.

        Args:
            inputs: Salary, 401(k) percentage, HSA dollars and state

        Returns:
            Dictionary with pre-tax amounts, taxable income, tax and net take-home
        """
        gross_annual = inputs.salary_annual
        pretax_401k_annual = gross_annual * inputs.employee_401k_pct / 100
        pretax_hsa_annual = inputs.current_hsa_annual
        taxable_income_annual = gross_annual - pretax_401k_annual - pretax_hsa_annual

        if taxable_income_annual <= 0:
            total_tax_annual = 0
            net_annual = 0.0
        else:
            total_tax_annual = self.estimator.estimate_tax_annual(taxable_income_annual, inputs.state_code)
            net_annual = taxable_income_annual - total_tax_annual

        return {
            'gross_annual': gross_annual,
            'pretax_401k_annual': pretax_401k_annual,
            'pretax_hsa_annual': pretax_hsa_annual,
            'taxable_income_annual': max(0.0, taxable_income_annual),
            'total_tax_annual': total_tax_annual,
            'net_annual': net_annual,
            'net_monthly': net_annual / 12,
        }

    def net_take_home_monthly(self, inputs: TakeHomeInputs) -> float:
        """Net monthly take-home after 401(k), HSA and taxes."""
        return self.calculate(inputs)['net_monthly']
