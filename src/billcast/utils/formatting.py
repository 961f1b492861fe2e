"""Display formatting for amounts and dates."""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency, e.g. $1,234.56 or -$12.00."""
    quantized = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{symbol}{abs(quantized):,.2f}"


def format_short_date(value: date) -> str:
    """Format a date as e.g. "Mar 5"."""
    return f"{value.strftime('%b')} {value.day}"


def format_long_date(value: Optional[date]) -> str:
    """Format a date as e.g. "March 5, 2024", or "N/A" when missing."""
    if value is None:
        return "N/A"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def due_status_label(due_date: date, today: date) -> str:
    """Describe how soon a bill is due relative to today."""
    days_until_due = (due_date - today).days
    if days_until_due == 0:
        return "Due Today"
    if 0 < days_until_due <= 7:
        return f"Due in {days_until_due} day{'' if days_until_due == 1 else 's'}"
    return format_short_date(due_date)
