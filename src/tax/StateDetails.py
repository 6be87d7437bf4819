import os
import json
from typing import Optional


class StateDetails:
    def __init__(self, ref_path: Optional[str] = None):
        # load state-details.json for flat state rates and FICA rates
        state_path = ref_path or os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'state-details.json'))
        with open(state_path, 'r') as f:
            self.details = json.load(f)

        self.default_rate = self.details.get('defaultRate', 0.0)
        self.state_rates = {code.upper(): rate for code, rate in self.details.get('states', {}).items()}

    def effectiveRate(self, state_code: str) -> float:
        """Flat effective state rate for a two-letter state code.

        States missing from the reference file use the default rate.
        """
        return self.state_rates.get((state_code or '').strip().upper(), self.default_rate)

    def ficaRate(self) -> float:
        """Combined Social Security and Medicare employee rate.

        The Social Security wage base is ignored in this simplified model.
        """
        fica = self.details.get('fica', {})
        return fica.get('socialSecurity', 0) + fica.get('medicare', 0)

    def taxBurden(self, taxable_income: float, state_code: str) -> float:
        """State tax on a taxable income at the flat effective rate."""
        return max(0.0, taxable_income) * self.effectiveRate(state_code)
