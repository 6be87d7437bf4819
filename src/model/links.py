"""Deep links into the allocator.

Links are absolute so they work from email. ALLOCATOR_URL in the config
points at an external allocator app; otherwise the site's /allocator page
is used.
"""

from typing import Optional
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

from calc.rounding import round_half_up
from model.AllocatorInputs import AllocatorPrefill
from planner_config import PlannerConfig

ALLOCATOR_PATH = '/allocator'


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _with_params(base: str, params: dict) -> str:
    parts = urlsplit(base)
    query = dict(parse_qsl(parts.query))
    query.update(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def allocator_base(config: PlannerConfig) -> str:
    if config.allocator_url:
        return config.allocator_url
    return config.site_url.rstrip('/') + ALLOCATOR_PATH


def build_allocator_url(config: PlannerConfig, salary: float, state: str,
                        net_monthly: Optional[float] = None,
                        recommended_401k_pct: Optional[float] = None) -> str:
    params = {'salary': _number(salary), 'state': state}
    if net_monthly is not None:
        params['netMonthly'] = str(round_half_up(net_monthly))
    if recommended_401k_pct is not None:
        params['401k'] = _number(recommended_401k_pct)
    return _with_params(allocator_base(config), params)


def build_allocator_prefill_url(config: PlannerConfig, prefill: AllocatorPrefill) -> str:
    """Allocator URL carrying the full prefill, readable by parse_prefill."""
    params = {
        'salaryAnnual': _number(prefill.salary_annual),
        'state': prefill.state,
    }
    if prefill.pay_frequency:
        params['payFrequency'] = prefill.pay_frequency
    params['employerMatchEnabled'] = '1' if prefill.employer_match_enabled else '0'
    params['employerMatchPct'] = _number(prefill.match_cap_pct)
    params['matchCapPct'] = _number(prefill.match_cap_pct)
    params['matchRatePct'] = _number(prefill.match_rate_pct)
    params['current401kPct'] = _number(prefill.current_401k_pct)
    params['recommended401kPct'] = _number(prefill.recommended_401k_pct)
    if prefill.estimated_net_monthly_income is not None:
        params['estimatedNetMonthlyIncome'] = str(round_half_up(prefill.estimated_net_monthly_income))
    if prefill.leap_delta_30yr is not None:
        params['leapDelta30yr'] = _number(prefill.leap_delta_30yr)
    if prefill.cost_of_delay_12mo is not None:
        params['costOfDelay12Mo'] = str(round_half_up(prefill.cost_of_delay_12mo))
    if prefill.hsa_eligible:
        params['hsaEligible'] = '1'
        params['hsaCoverageType'] = prefill.hsa_coverage_type
    if prefill.current_hsa_annual is not None:
        params['currentHsaAnnual'] = _number(prefill.current_hsa_annual)
    params['intent'] = prefill.intent
    params['source'] = prefill.source
    # The prefill page always lives on this site
    return _with_params(config.site_url.rstrip('/') + ALLOCATOR_PATH, params)
