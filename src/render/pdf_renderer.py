"""Rent plan PDF, attached to the rent plan email."""

from datetime import date
from typing import Optional

from fpdf import FPDF

from calc.constants import GAP_DAYS
from calc.formatting import format_currency, format_currency_range
from calc.rent_calculator import RentPlan


def _pdf_safe(text) -> str:
    """Replace characters the core Helvetica font can't render."""
    s = str(text)
    s = s.replace("–", "-").replace("—", "-")
    s = s.replace("‘", "'").replace("’", "'")
    s = s.replace("“", '"').replace("”", '"')
    s = s.replace("→", "->").replace("×", "x")
    return s


class PlanPdfRenderer:
    """Renders a RentPlan (rent range, tax breakdown, upfront cash, budget) to PDF bytes."""

    def __init__(self, generated_on: Optional[date] = None):
        self.generated_on = generated_on

    def _heading(self, pdf: FPDF, title: str) -> None:
        pdf.ln(4)
        pdf.set_font("Helvetica", "B", 14)
        pdf.set_text_color(17, 24, 39)
        pdf.cell(0, 9, _pdf_safe(title), new_x="LMARGIN", new_y="NEXT")

    def _figure(self, pdf: FPDF, text: str) -> None:
        pdf.set_font("Helvetica", "B", 18)
        pdf.set_text_color(17, 24, 39)
        pdf.cell(0, 10, _pdf_safe(text), new_x="LMARGIN", new_y="NEXT")

    def _line(self, pdf: FPDF, text: str, bold: bool = False) -> None:
        pdf.set_font("Helvetica", "B" if bold else "", 10)
        if bold:
            pdf.set_text_color(17, 24, 39)
        else:
            pdf.set_text_color(107, 114, 128)
        pdf.cell(0, 6, _pdf_safe(text), new_x="LMARGIN", new_y="NEXT")

    def render(self, plan: RentPlan) -> bytes:
        pdf = FPDF()
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.set_margins(15, 15, 15)
        pdf.add_page()

        pdf.set_font("Helvetica", "B", 24)
        pdf.cell(0, 14, "Your Personal Rent Plan", new_x="LMARGIN", new_y="NEXT")
        generated_on = self.generated_on or date.today()
        self._line(pdf, f"Generated on {generated_on.strftime('%B %d, %Y')}")

        self._heading(pdf, "Your Real Monthly Take-Home")
        self._figure(pdf, format_currency(plan.take_home_monthly))
        self._line(pdf, f"{format_currency(plan.take_home_monthly * 12)} annually")

        tax = plan.tax_breakdown
        if tax is not None:
            self._heading(pdf, "Gross to Take-Home Breakdown")
            self._line(pdf, f"Gross annual income: {format_currency(tax.gross_annual)}")
            self._line(pdf, f"Federal tax: -{format_currency(tax.federal_tax_annual)}")
            self._line(pdf, f"State tax: -{format_currency(tax.state_tax_annual)}")
            self._line(pdf, f"FICA (Social Security + Medicare): -{format_currency(tax.fica_tax_annual)}")
            self._line(pdf, f"Total taxes: -{format_currency(tax.total_tax_annual)}", bold=True)
            self._line(pdf, f"Take-home (annual): {format_currency(tax.net_income_annual)}", bold=True)
            if tax.source == 'fallback':
                self._line(pdf, "Estimated with simplified effective tax rates.")

        self._heading(pdf, "Safe Rent Range")
        self._figure(pdf, plan.rent_range.formatted)
        debt_text = f" (adjusted for {format_currency(plan.debt_monthly)}/mo debt)" if plan.debt_monthly else ""
        self._line(pdf, f"Calculated as 28-35% of take-home pay{debt_text}.")

        upfront = plan.upfront_cash
        if upfront.total_high > 0:
            self._heading(pdf, "Upfront Cash Needed Before Your First Paycheck")
            self._figure(pdf, format_currency_range(upfront.total_low, upfront.total_high))
            self._line(pdf, "Security deposit (1x rent): "
                       f"{format_currency_range(upfront.deposit_low, upfront.deposit_high)}")
            self._line(pdf, "First month's rent: "
                       f"{format_currency_range(upfront.first_month_low, upfront.first_month_high)}")
            self._line(pdf, f"Gap living costs ({GAP_DAYS} days): {format_currency(upfront.gap_living_costs)}")
            self._line(pdf, f"Moving/setup costs: {format_currency(upfront.moving_setup)}")

        budget = plan.budget
        self._heading(pdf, "Suggested Monthly Breakdown")
        self._line(pdf, f"Needs (50%): {format_currency(budget.needs)}")
        self._line(pdf, f"Wants (30%): {format_currency(budget.wants)}")
        self._line(pdf, f"Savings (20%): {format_currency(budget.savings)}")

        if plan.net_worth_protection_30yr > 0:
            self._line(pdf, "Staying in range protects about "
                       f"{format_currency(plan.net_worth_protection_30yr)} of net worth over 30 years.")

        if plan.city:
            self._heading(pdf, "Job Details")
            self._line(pdf, f"City: {plan.city}")

        pdf.ln(8)
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(107, 114, 128)
        pdf.cell(0, 5, "This is an educational estimate, not financial advice.", align="C",
                 new_x="LMARGIN", new_y="NEXT")
        pdf.cell(0, 5, "Generated by WeLeap * weleap.ai", align="C", new_x="LMARGIN", new_y="NEXT")
        return bytes(pdf.output())
