"""Builds the ranked Leap stack from the impact-tool prefill and unlock answers.

Order is fixed: payroll levers first (401(k) match, then HSA), then the
post-tax routing items (emergency fund, high-APR debt, retirement /
brokerage split). Brokerage is folded into the split and listed for
display only.

At most one leap is `next`: the match while it is not captured, otherwise
the emergency fund once essential spend is known.
"""

from dataclasses import dataclass
from typing import List, Optional

from calc.capital_routing import CapitalRoutingResult, compute_capital_routing, is_high_apr_debt_active
from calc.constants import (
    DEFAULT_MATCH_CAP_PCT,
    DEFAULT_MATCH_RATE_PCT,
    EF_FIRST_MILESTONE_MONTHS,
    HIGH_APR_THRESHOLD_PCT,
    HSA_LIMIT_FAMILY,
    HSA_LIMIT_SINGLE,
    HSA_RECOMMENDED_START,
    K401_EMPLOYEE_CAP,
    MONTHS_PER_YEAR,
    REAL_RETURN_DEFAULT,
    retirement_split,
)
from calc.formatting import format_compact_currency, format_currency, format_pct
from calc.leap_decision import compute_401k_status
from calc.rounding import round_half_up
from calc.trajectory_calculator import employer_match_monthly, fv_monthly_contributions
from model.AllocatorInputs import AllocatorPrefill, AllocatorUnlockData
from model.Leap import (
    UNLOCK_CTA,
    BrokerageLeap,
    DebtLeap,
    EmergencyFundLeap,
    HsaLeap,
    Leap,
    MatchLeap,
    RetirementSplitLeap,
)

INACTIVE_BADGE = '0% (inactive)'
DEBT_EXTRA_PAYMENT_DEFAULT = 100
DEBT_MIN_PAYMENT_PCT = 0.02
IMPACT_YEARS = 30


@dataclass
class FlowSummary:
    percent_only: str
    with_dollars: Optional[str] = None


@dataclass
class LeapStackResult:
    leaps: List[Leap]
    next_leap_id: Optional[str]
    flow_summary: FlowSummary
    match_captured: bool
    k401_at_cap: bool
    routing: Optional[CapitalRoutingResult]

    def find(self, category: str) -> Optional[Leap]:
        return next((leap for leap in self.leaps if leap.category == category), None)


def contribution_delta_monthly(salary_annual: float, current_pct: float, recommended_pct: float,
                               match_rate_pct: float, match_cap_pct: float, has_match: bool) -> float:
    """Extra monthly dollars (employee + employer match) from moving current_pct to recommended_pct."""
    employee_current = salary_annual * current_pct / 100 / MONTHS_PER_YEAR
    employee_recommended = salary_annual * recommended_pct / 100 / MONTHS_PER_YEAR
    match_current = match_recommended = 0.0
    if has_match:
        match_current = employer_match_monthly(salary_annual, current_pct, match_rate_pct, match_cap_pct)
        match_recommended = employer_match_monthly(salary_annual, recommended_pct, match_rate_pct, match_cap_pct)
    return (employee_recommended - employee_current) + (match_recommended - match_current)


def estimate_match_impact_30yr(salary_annual: float, current_pct: float, recommended_pct: float,
                               match_rate_pct: float, match_cap_pct: float, has_match: bool,
                               real_return: float = REAL_RETURN_DEFAULT) -> int:
    """30-year value of the extra monthly contribution; 0 when nothing is added."""
    delta_monthly = contribution_delta_monthly(salary_annual, current_pct, recommended_pct,
                                               match_rate_pct, match_cap_pct, has_match)
    if delta_monthly <= 0:
        return 0
    return round_half_up(fv_monthly_contributions(delta_monthly, real_return / MONTHS_PER_YEAR,
                                                  IMPACT_YEARS * MONTHS_PER_YEAR))


def interest_saved_12mo(balance: float, apr_pct: float, extra_per_month: float) -> int:
    """Approximate interest paid over 12 months while paying a 2% minimum plus an extra amount.

    Used as the "saves ~$X interest" figure on the debt leap.
    """
    monthly_rate = apr_pct / 100 / MONTHS_PER_YEAR
    remaining = balance
    total_interest = 0.0
    for _ in range(MONTHS_PER_YEAR):
        if remaining <= 0:
            break
        interest = remaining * monthly_rate
        total_interest += interest
        payment = extra_per_month + remaining * DEBT_MIN_PAYMENT_PCT
        remaining = max(0.0, remaining + interest - min(payment, remaining + interest))
    return round_half_up(total_interest)


def _has_unlock_data(unlock: Optional[AllocatorUnlockData]) -> bool:
    if unlock is None:
        return False
    if unlock.essential_monthly is None and unlock.retirement_focus is None:
        return False
    if unlock.carries_balance is False:
        return True
    return (unlock.carries_balance is True and bool(unlock.debt_apr_range)
            and unlock.debt_balance is not None)


def _build_match_leap(prefill: Optional[AllocatorPrefill], match_captured: bool,
                      match_cap_pct: float, match_rate_pct: float, recommended_pct: float) -> MatchLeap:
    if prefill is None or not prefill.employer_match_enabled:
        return MatchLeap(id='match', title='No employer match', status='complete')

    current_pct = prefill.current_401k_pct
    if match_captured:
        return MatchLeap(
            id='match',
            title='401(k) match captured',
            status='complete',
            target_value=recommended_pct,
            current_value=current_pct,
            delta_value=0,
        )

    if prefill.leap_delta_30yr is not None:
        impact_30 = prefill.leap_delta_30yr
    else:
        impact_30 = estimate_match_impact_30yr(prefill.salary_annual, current_pct, recommended_pct,
                                               match_rate_pct, match_cap_pct, True)
    annual_increase = contribution_delta_monthly(prefill.salary_annual, current_pct, recommended_pct,
                                                 match_rate_pct, match_cap_pct, True) * MONTHS_PER_YEAR
    return MatchLeap(
        id='match',
        title=f"Increase 401(k) from {format_pct(current_pct)} → {format_pct(recommended_pct)}",
        subtitle='Unlocks employer match (free money).',
        status='next',
        target_value=recommended_pct,
        current_value=current_pct,
        delta_value=recommended_pct - current_pct,
        timeline_text='Start next paycheck',
        impact_text=f"Adds {format_compact_currency(impact_30)} over 30 years",
        annual_contribution_increase=max(0, round_half_up(annual_increase)),
    )


def _build_hsa_leap(prefill: Optional[AllocatorPrefill], unlock: Optional[AllocatorUnlockData]) -> HsaLeap:
    def pick(unlock_value, prefill_value, default):
        if unlock_value is not None:
            return unlock_value
        if prefill_value is not None:
            return prefill_value
        return default

    eligible = pick(unlock.hsa_eligible if unlock else None,
                    prefill.hsa_eligible if prefill else None, False)
    current = pick(unlock.current_hsa_annual if unlock else None,
                   prefill.current_hsa_annual if prefill else None, 0)
    coverage = pick(unlock.hsa_coverage_type if unlock else None,
                    prefill.hsa_coverage_type if prefill else None, 'single')

    if not eligible:
        return HsaLeap(id='hsa', title='HSA', subtitle='No HSA-eligible plan.', status='complete')

    hsa_max = HSA_LIMIT_FAMILY if coverage == 'family' else HSA_LIMIT_SINGLE
    target = min(hsa_max, HSA_RECOMMENDED_START) if current == 0 else hsa_max
    if current >= hsa_max:
        return HsaLeap(id='hsa', title='HSA maxed', status='complete', target_value=target,
                       current_value=current, delta_value=0,
                       hsa_current_annual=current, hsa_max_annual=hsa_max)

    if current == 0:
        subtitle = f"Start HSA toward ${target:,}/year"
    else:
        subtitle = f"Increase HSA toward ${hsa_max:,} ({coverage})"
    return HsaLeap(
        id='hsa',
        title='Contribute to HSA',
        subtitle=subtitle,
        status='queued',
        target_value=target,
        current_value=current,
        delta_value=max(0, target - current),
        impact_text='Tax-free in, tax-free growth, tax-free out for health.',
        hsa_current_annual=current,
        hsa_max_annual=hsa_max,
    )


def _build_emergency_fund_leap(unlock: Optional[AllocatorUnlockData], match_captured: bool,
                               routing: Optional[CapitalRoutingResult], has_unlock_data: bool) -> EmergencyFundLeap:
    essential_monthly = (unlock.essential_monthly if unlock else None) or 0
    known = essential_monthly > 0
    first_milestone = essential_monthly * EF_FIRST_MILESTONE_MONTHS

    if routing is not None and routing.months_to_ef_target is not None:
        timeline = f"~{routing.months_to_ef_target} months to 3-month buffer"
    elif not has_unlock_data:
        timeline = 'Unlock for estimate'
    else:
        timeline = None

    return EmergencyFundLeap(
        id='emergency_fund',
        title=(f"Build a 1-month safety buffer: {format_currency(first_milestone)} target"
               if known else 'Build a 1-month safety buffer'),
        subtitle=('First milestone: 1 month. Extend to 3–6 months after.'
                  if known else 'Unlock to see your target.'),
        status='next' if (known and match_captured) else 'queued',
        target_value=first_milestone if known else None,
        current_value=0,
        delta_value=first_milestone if known else None,
        timeline_text=timeline,
        impact_text='Lowers the chance you need high-interest credit.',
        requires_unlock=not known,
        cta=None if known else UNLOCK_CTA,
        allocation_badge='40%',
    )


def _build_debt_leap(unlock: Optional[AllocatorUnlockData]) -> DebtLeap:
    has_debt = unlock is not None and unlock.has_debt_balance
    apr_pct = unlock.debt_apr_pct if unlock else None
    high_apr = apr_pct is not None and apr_pct >= HIGH_APR_THRESHOLD_PCT

    if has_debt and high_apr:
        saved = interest_saved_12mo(unlock.debt_balance, apr_pct, DEBT_EXTRA_PAYMENT_DEFAULT)
        return DebtLeap(
            id='debt',
            title=f"High-APR debt: {format_currency(unlock.debt_balance)} at {format_pct(apr_pct)} APR",
            status='queued',
            target_value=0,
            current_value=unlock.debt_balance,
            delta_value=-unlock.debt_balance,
            impact_text=f"Paying +${DEBT_EXTRA_PAYMENT_DEFAULT}/mo saves ~${saved:,} interest in 12 months.",
            why_now_text='Guaranteed return equal to APR.',
            allocation_badge='40% of remaining',
            debt_apr_pct=apr_pct,
        )

    carries_balance = unlock.carries_balance if unlock else None
    no_high_apr_debt = carries_balance is False or (has_debt and apr_pct is not None and not high_apr)
    needs_unlock = carries_balance is None or (
        carries_balance is True and (unlock.debt_balance is None or not unlock.debt_apr_range))
    if no_high_apr_debt or not needs_unlock:
        return DebtLeap(id='debt', title='High-APR debt', status='complete',
                        allocation_badge=INACTIVE_BADGE)
    return DebtLeap(
        id='debt',
        title='High-APR debt (≥10% APR)',
        status='queued',
        requires_unlock=True,
        cta=UNLOCK_CTA,
        allocation_badge=INACTIVE_BADGE,
    )


def _build_split_leap(unlock: Optional[AllocatorUnlockData]) -> RetirementSplitLeap:
    focus = unlock.retirement_focus if unlock else None
    retirement_pct, brokerage_pct = retirement_split(focus)
    if focus is not None:
        title = (f"Retirement vs Brokerage: {format_pct(retirement_pct)} retirement / "
                 f"{format_pct(brokerage_pct)} brokerage")
    else:
        title = 'Retirement vs Brokerage (split of remaining)'
    return RetirementSplitLeap(
        id='retirement_split',
        title=title,
        subtitle=None if focus is not None else 'Set your retirement focus to see your split.',
        status='queued',
        impact_text='Improves tax-advantaged compounding.',
        requires_unlock=focus is None,
        cta=None if focus is not None else UNLOCK_CTA,
        allocation_badge=f"{retirement_pct}/{brokerage_pct} of remaining",
        split_retirement_pct=retirement_pct,
        split_brokerage_pct=brokerage_pct,
    )


def build_flow_summary(debt_active: bool, split: tuple,
                       routing: Optional[CapitalRoutingResult]) -> FlowSummary:
    """Describe the post-tax waterfall, in percentages and, when known, dollars."""
    split_label = f"{split[0]}/{split[1]}"
    debt_segment = 'Debt: 40% of remaining' if debt_active else 'Debt: 0% (inactive)'
    percent_only = f"EF: 40% → {debt_segment} → Remaining split {split_label} (retirement/brokerage)"

    with_dollars = None
    if routing is not None and routing.post_tax_savings_monthly > 0:
        with_dollars = (
            f"Of {format_currency(routing.post_tax_savings_monthly)}/mo: "
            f"EF {format_currency(routing.ef_alloc)} → "
            f"Debt {format_currency(routing.debt_alloc)} → "
            f"Retirement {format_currency(routing.retirement_alloc)} / "
            f"Brokerage {format_currency(routing.brokerage_alloc)}"
        )
    return FlowSummary(percent_only=percent_only, with_dollars=with_dollars)


def build_leaps(prefill: Optional[AllocatorPrefill], unlock: Optional[AllocatorUnlockData],
                monthly_capital_available: Optional[float] = None,
                deferral_cap: float = K401_EMPLOYEE_CAP) -> LeapStackResult:
    """Build the ordered Leap stack.

    Args:
        prefill: Impact-tool results (salary, match, contribution %)
        unlock: Unlocked answers; None when nothing is unlocked yet
        monthly_capital_available: Post-tax pool for routing; defaults to
            net monthly income minus essential spend
        deferral_cap: Employee 401(k) deferral limit in dollars

    Returns:
        LeapStackResult with leaps in priority order and the single `next` leap id
    """
    match_cap_pct = prefill.match_cap_pct if prefill else DEFAULT_MATCH_CAP_PCT
    match_rate_pct = prefill.match_rate_pct if prefill else DEFAULT_MATCH_RATE_PCT
    recommended_pct = (prefill.recommended_401k_pct if prefill else None) or match_cap_pct

    _, k401_at_cap, match_captured = compute_401k_status(
        prefill.salary_annual if prefill else 0,
        prefill.current_401k_pct if prefill else 0,
        bool(prefill and prefill.employer_match_enabled),
        match_cap_pct,
        deferral_cap,
    )

    net_monthly = (prefill.estimated_net_monthly_income if prefill else None) or 0
    essential_monthly = (unlock.essential_monthly if unlock else None) or 0
    if monthly_capital_available is not None:
        pool = max(0.0, monthly_capital_available)
    else:
        pool = max(0.0, net_monthly - essential_monthly)

    routing = None
    if pool > 0 or essential_monthly > 0 or monthly_capital_available is not None:
        routing = compute_capital_routing(pool, ef_current=0, unlock=unlock)

    has_unlock_data = _has_unlock_data(unlock)
    debt_leap = _build_debt_leap(unlock)
    split_leap = _build_split_leap(unlock)

    leaps = [
        _build_match_leap(prefill, match_captured, match_cap_pct, match_rate_pct, recommended_pct),
        _build_hsa_leap(prefill, unlock),
        _build_emergency_fund_leap(unlock, match_captured, routing, has_unlock_data),
        debt_leap,
        split_leap,
        BrokerageLeap(id='brokerage', title='Brokerage (part of split above)', status='queued',
                      allocation_badge='included in split'),
    ]

    # Routing assumes an APR when the range is unanswered; describe what it routes
    debt_routed = is_high_apr_debt_active(unlock) if routing is not None else debt_leap.is_active
    flow_summary = build_flow_summary(
        debt_routed,
        (split_leap.split_retirement_pct, split_leap.split_brokerage_pct),
        routing,
    )
    next_leap = next((leap for leap in leaps if leap.status == 'next'), None)

    return LeapStackResult(
        leaps=leaps,
        next_leap_id=next_leap.id if next_leap else None,
        flow_summary=flow_summary,
        match_captured=match_captured,
        k401_at_cap=k401_at_cap,
        routing=routing,
    )
