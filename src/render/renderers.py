"""Renderer classes for displaying plan results.

Each renderer takes the unified PlanData structure and prints the part of
the plan it is responsible for.
"""

from abc import ABC, abstractmethod

from calc.formatting import format_currency, format_pct
from model.PlanData import PlanData

WIDTH = 72


def _banner(title: str) -> None:
    print()
    print("=" * WIDTH)
    print(f"{title:^{WIDTH}}")
    print("=" * WIDTH)


def _section(title: str) -> None:
    print()
    print("-" * WIDTH)
    print(title)
    print("-" * WIDTH)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanData) -> None:
        """Render the data to output.

        Args:
            data: The PlanData for one profile
        """
        pass


class TaxRenderer(BaseRenderer):
    """Renderer for the gross to take-home breakdown."""

    def render(self, data: PlanData) -> None:
        tax = data.tax
        _banner(f"TAX SUMMARY FOR {data.tax_year} ({data.state})")

        _section("GROSS TO TAKE-HOME")
        print(f"  {'Gross Income:':<40} ${tax.gross_annual:>14,.2f}")
        print(f"  {'Federal Tax:':<40} ${tax.federal_tax_annual:>14,.2f}")
        print(f"  {'State Tax:':<40} ${tax.state_tax_annual:>14,.2f}")
        print(f"  {'FICA (Social Security + Medicare):':<40} ${tax.fica_tax_annual:>14,.2f}")
        print(f"  {'-' * 56}")
        print(f"  {'Total Tax:':<40} ${tax.total_tax_annual:>14,.2f}")
        print(f"  {'Effective Tax Rate:':<40} {tax.effective_tax_rate * 100:>14.2f}%")
        print(f"  {'Take-Home (annual):':<40} ${tax.net_income_annual:>14,.2f}")
        print(f"  {'Take-Home (monthly):':<40} ${tax.net_income_monthly:>14,.2f}")
        print(f"  {'Source:':<40} {tax.source:>15}")

        take_home = data.take_home
        _section("AFTER PRE-TAX SAVINGS")
        print(f"  {'401(k) Contribution:':<40} ${take_home['pretax_401k_annual']:>14,.2f}")
        print(f"  {'HSA Contribution:':<40} ${take_home['pretax_hsa_annual']:>14,.2f}")
        print(f"  {'Taxable Income:':<40} ${take_home['taxable_income_annual']:>14,.2f}")
        print(f"  {'Tax on Taxable Income:':<40} ${take_home['total_tax_annual']:>14,.2f}")
        print(f"  {'Net Take-Home (monthly):':<40} ${take_home['net_monthly']:>14,.2f}")
        print()


class TrajectoryRenderer(BaseRenderer):
    """Renderer for the baseline vs. optimized 401(k) trajectory."""

    def __init__(self, step: int = 5):
        """Initialize with the year interval between printed rows.

        Args:
            step: Print every step-th year (the final year is always printed)
        """
        self.step = step

    def render(self, data: PlanData) -> None:
        rec = data.recommendation
        traj = data.trajectory
        _banner("401(K) TRAJECTORY")
        print(f"  {rec.label}")
        print(f"  {rec.summary}")

        _section("NET WORTH BY YEAR")
        print(f"  {'Year':<8} {'Baseline':>18} {'Optimized':>18} {'Difference':>18}")
        print(f"  {'-' * 8} {'-' * 18} {'-' * 18} {'-' * 18}")
        last = traj.year_labels[-1]
        for year, baseline, optimized in zip(traj.year_labels, traj.baseline_by_year, traj.optimized_by_year):
            if year % self.step != 0 and year != last:
                continue
            print(f"  {year:<8} ${baseline:>17,} ${optimized:>17,} ${optimized - baseline:>17,}")

        print()
        print(f"  {'Baseline at year ' + str(last) + ':':<40} ${traj.baseline_end:>14,}")
        print(f"  {'Optimized at year ' + str(last) + ':':<40} ${traj.optimized_end:>14,}")
        print(f"  {'Difference:':<40} ${traj.delta_30yr:>14,}")
        print(f"  {'Cost of waiting 12 months:':<40} ${data.cost_of_delay_12mo:>14,}")
        print()


class LeapStackRenderer(BaseRenderer):
    """Renderer for the ranked leap stack and the primary leap."""

    def render(self, data: PlanData) -> None:
        stack = data.leap_stack
        _banner("YOUR LEAP STACK")

        primary = data.primary
        if primary.kind == 'retirement_15' and primary.retirement_15 is not None:
            target = primary.retirement_15
            headline = (f"Raise retirement saving from {format_pct(target.current_pct)} "
                        f"to {format_pct(target.target_pct)}")
        elif primary.leap is not None:
            headline = primary.leap.title
        else:
            headline = primary.kind
        print(f"  {'Primary leap:':<16} {headline}")
        print(f"  {'Next leap:':<16} {stack.next_leap_id or '-'}")

        _section("LEAPS (PRIORITY ORDER)")
        for index, leap in enumerate(stack.leaps, start=1):
            kind = 'payroll' if leap.is_payroll else 'post-tax'
            print(f"  {index}. [{leap.status:<8}] {leap.title}")
            details = [kind]
            if leap.allocation_badge:
                details.append(leap.allocation_badge)
            if leap.requires_unlock:
                details.append('needs unlock')
            print(f"     {' | '.join(details)}")
            for text in (leap.subtitle, leap.impact_text, leap.timeline_text):
                if text:
                    print(f"     {text}")

        _section("FLOW")
        print(f"  {stack.flow_summary.percent_only}")
        if stack.flow_summary.with_dollars:
            print(f"  {stack.flow_summary.with_dollars}")
        print()


class RoutingRenderer(BaseRenderer):
    """Renderer for the monthly dollar routing of post-tax savings."""

    def render(self, data: PlanData) -> None:
        routing = data.leap_stack.routing
        _banner("MONTHLY CAPITAL ROUTING")
        if routing is None:
            print("  No post-tax savings to route yet.")
            print()
            return

        print(f"  {'Post-tax savings (monthly):':<40} ${routing.post_tax_savings_monthly:>14,.2f}")
        print(f"  {'-' * 56}")
        print(f"  {'Emergency fund:':<40} ${routing.ef_alloc:>14,.2f}")
        print(f"  {'High-APR debt:':<40} ${routing.debt_alloc:>14,.2f}")
        print(f"  {'Retirement:':<40} ${routing.retirement_alloc:>14,.2f}")
        print(f"  {'Brokerage:':<40} ${routing.brokerage_alloc:>14,.2f}")
        if routing.ef_target > 0:
            print()
            print(f"  {'Emergency fund target (3 months):':<40} ${routing.ef_target:>14,.2f}")
            if routing.months_to_ef_target is not None:
                print(f"  {'Months to target:':<40} {routing.months_to_ef_target:>15}")
        print()


class RentRenderer(BaseRenderer):
    """Renderer for the rent affordability plan."""

    def render(self, data: PlanData) -> None:
        plan = data.rent_plan
        _banner("RENT PLAN")
        if plan is None:
            print("  No rent plan available.")
            return

        print(f"  {'Take-home (monthly):':<40} {format_currency(plan.take_home_monthly):>15}")
        if plan.debt_monthly:
            print(f"  {'Debt payments (monthly):':<40} {format_currency(plan.debt_monthly):>15}")
        print(f"  {'Safe rent range:':<40} {plan.rent_range.formatted:>15}")

        upfront = plan.upfront_cash
        _section("UPFRONT CASH BEFORE FIRST PAYCHECK")
        print(f"  {'Security deposit:':<40} ${upfront.deposit_low:>6,} - ${upfront.deposit_high:>6,}")
        print(f"  {'First month rent:':<40} ${upfront.first_month_low:>6,} - ${upfront.first_month_high:>6,}")
        print(f"  {f'Gap living costs ({upfront.gap_days} days):':<40} ${upfront.gap_living_costs:>6,}")
        print(f"  {'Moving / setup:':<40} ${upfront.moving_setup:>6,}")
        print(f"  {'Total:':<40} ${upfront.total_low:>6,} - ${upfront.total_high:>6,}")

        budget = plan.budget
        _section("MONTHLY BUDGET (50/30/20)")
        print(f"  {'Needs:':<40} ${budget.needs:>14,.2f}")
        print(f"  {'Wants:':<40} ${budget.wants:>14,.2f}")
        print(f"  {'Savings:':<40} ${budget.savings:>14,.2f}")
        print()
        print(f"  Staying in range protects ~{format_currency(plan.net_worth_protection_30yr)} over 30 years.")

        comparison = data.market_comparison
        if comparison is not None:
            source = 'ZORI' if comparison.source == 'zori' else 'HUD FMR'
            _section(f"MARKET RENT: {comparison.region_name} ({source})")
            if comparison.median_rent is not None:
                print(f"  {'Median rent:':<40} {format_currency(comparison.median_rent):>15}")
            print(f"  {'Market range:':<40} ${comparison.market_low:>6,} - ${comparison.market_high:>6,}")
            print(f"  {'Market vs. safe range:':<40} {comparison.position:>15}")
        print()


class NetWorthImpactRenderer(BaseRenderer):
    """Renderer for the net worth impact of a recurring monthly change."""

    def render(self, data: PlanData) -> None:
        _banner("NET WORTH IMPACT")
        if not data.impacts:
            print("  Add a netWorthImpact section to the profile to see this report.")
            print()
            return

        inputs = data.impact_inputs
        print(f"  {'Monthly change:':<40} {format_currency(inputs.monthly_delta):>15}")
        print(f"  {'Use case:':<40} {inputs.use_case:>15}")
        print()
        print(f"  {'Years':<8} {'Impact':>18}")
        print(f"  {'-' * 8} {'-' * 18}")
        for horizon in data.impacts:
            print(f"  {horizon.years:<8} {format_currency(horizon.impact):>18}")
        print()
        print(f"  {data.impacts[-1].sentence}")
        print()


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'Tax': TaxRenderer,
    'Trajectory': TrajectoryRenderer,
    'Leaps': LeapStackRenderer,
    'Routing': RoutingRenderer,
    'Rent': RentRenderer,
    'NetWorthImpact': NetWorthImpactRenderer,
}
