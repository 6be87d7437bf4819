"""Allocator inputs: the prefill carried over from the impact tool and the
answers the user unlocks step by step.

Prefill travels between pages as query-string parameters. Parsing never
raises: a query missing salary, state, or intent yields None.
"""

from dataclasses import dataclass, fields
from typing import Mapping, Optional, Union
from urllib.parse import parse_qsl

from calc.constants import DEFAULT_MATCH_CAP_PCT, DEFAULT_MATCH_RATE_PCT, apr_range_to_percent
from model.validation import VALID_INTENTS, parse_number

RETIREMENT_FOCUS_VALUES = ('high', 'medium', 'low')
HSA_COVERAGE_TYPES = ('single', 'family')
DEFAULT_PREFILL_SOURCE = 'leap_impact_tool'


@dataclass
class AllocatorUnlockData:
    """Answers gathered after the plan is unlocked. None means not answered yet."""
    essential_monthly: Optional[float] = None
    carries_balance: Optional[bool] = None
    debt_apr_range: Optional[str] = None
    debt_balance: Optional[float] = None
    retirement_focus: Optional[str] = None
    hsa_eligible: Optional[bool] = None
    current_hsa_annual: Optional[float] = None
    hsa_coverage_type: Optional[str] = None

    def __post_init__(self):
        if self.retirement_focus is not None and self.retirement_focus not in RETIREMENT_FOCUS_VALUES:
            raise ValueError(f"Unknown retirement focus: {self.retirement_focus}")
        if self.hsa_coverage_type is not None and self.hsa_coverage_type not in HSA_COVERAGE_TYPES:
            raise ValueError(f"Unknown HSA coverage type: {self.hsa_coverage_type}")

    @property
    def has_debt_balance(self) -> bool:
        return self.carries_balance is True and (self.debt_balance or 0) > 0

    @property
    def debt_apr_pct(self) -> Optional[float]:
        """Midpoint APR for the answered range, or None."""
        return apr_range_to_percent(self.debt_apr_range)

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> 'AllocatorUnlockData':
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class AllocatorPrefill:
    """Impact-tool results handed to the allocator."""
    salary_annual: float
    state: str
    employer_match_enabled: bool
    current_401k_pct: float
    recommended_401k_pct: float
    match_rate_pct: float = DEFAULT_MATCH_RATE_PCT
    match_cap_pct: float = DEFAULT_MATCH_CAP_PCT
    estimated_net_monthly_income: Optional[float] = None
    leap_delta_30yr: Optional[float] = None
    cost_of_delay_12mo: Optional[float] = None
    hsa_eligible: bool = False
    current_hsa_annual: Optional[float] = None
    hsa_coverage_type: str = 'single'
    pay_frequency: str = 'monthly'
    intent: str = 'lock_plan'
    source: str = DEFAULT_PREFILL_SOURCE

    @classmethod
    def from_dict(cls, data: Mapping) -> 'AllocatorPrefill':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _non_negative(value, default: float = 0.0) -> float:
    number = parse_number(value)
    if number is None:
        return default
    return max(0.0, number)


def parse_prefill(params: Union[str, Mapping[str, str]]) -> Optional[AllocatorPrefill]:
    """Rebuild an AllocatorPrefill from query parameters.

    Args:
        params: A query string ("salaryAnnual=...&state=...") or a mapping of
            parameter name to value

    Returns:
        AllocatorPrefill, or None when salary, state, or intent is missing or invalid
    """
    if isinstance(params, str):
        params = dict(parse_qsl(params.lstrip('?')))

    salary = parse_number(params.get('salaryAnnual'))
    state = (params.get('state') or '').strip()
    intent = params.get('intent')
    if salary is None or salary <= 0 or not state or intent not in VALID_INTENTS:
        return None

    employer_match_pct = _non_negative(params.get('employerMatchPct'))
    if 'matchCapPct' in params:
        match_cap_pct = _non_negative(params.get('matchCapPct'))
    else:
        match_cap_pct = employer_match_pct or DEFAULT_MATCH_CAP_PCT
    if 'matchRatePct' in params:
        match_rate_pct = _non_negative(params.get('matchRatePct'))
    else:
        match_rate_pct = DEFAULT_MATCH_RATE_PCT

    return AllocatorPrefill(
        salary_annual=salary,
        state=state,
        pay_frequency=params.get('payFrequency') or 'monthly',
        employer_match_enabled=params.get('employerMatchEnabled') == '1',
        match_rate_pct=match_rate_pct,
        match_cap_pct=match_cap_pct,
        current_401k_pct=_non_negative(params.get('current401kPct')),
        recommended_401k_pct=_non_negative(params.get('recommended401kPct')) or match_cap_pct,
        estimated_net_monthly_income=parse_number(params.get('estimatedNetMonthlyIncome')),
        leap_delta_30yr=parse_number(params.get('leapDelta30yr')),
        cost_of_delay_12mo=parse_number(params.get('costOfDelay12Mo')),
        hsa_eligible=params.get('hsaEligible') == '1',
        current_hsa_annual=parse_number(params.get('currentHsaAnnual')),
        hsa_coverage_type='family' if params.get('hsaCoverageType') == 'family' else 'single',
        intent=intent,
        source=params.get('source') or DEFAULT_PREFILL_SOURCE,
    )
