"""Display formatting for currency and percentages.

Used by calculators that build display strings (leap titles, flow
summaries, impact sentences) and by the renderers.
"""

from calc.rounding import round_half_up


def format_currency(value: float) -> str:
    """Whole-dollar currency: $1,234 or -$1,234."""
    amount = round_half_up(abs(value))
    if value < 0 and amount != 0:
        return f"-${amount:,}"
    return f"${amount:,}"


def format_currency_signed(value: float) -> str:
    """Signed whole-dollar currency: +$1,234 or -$1,234."""
    amount = f"${round_half_up(abs(value)):,}"
    return f"+{amount}" if value >= 0 else f"-{amount}"


def format_currency_range(low: float, high: float) -> str:
    return f"{format_currency(low)}–{format_currency(high)}"


def format_compact_currency(value: float) -> str:
    """Approximate currency for impact text: ~$17K, ~$950."""
    if value >= 1000:
        return f"~${value / 1000:.0f}K"
    return f"~${round_half_up(value):,}"


def format_percent(value: float, decimals: int = 0) -> str:
    return f"{value:.{decimals}f}%"


def format_pct(value: float) -> str:
    """Contribution percentage with at most two decimals: 5%, 11.75%, 23.5%."""
    text = f"{value:.2f}".rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'
    return f"{text}%"
