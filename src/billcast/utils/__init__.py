"""Utility functions for billcast."""

from billcast.utils.date_parser import parse_date, parse_iso_date, format_iso_date
from billcast.utils.amount_parser import parse_amount, coerce_amount
from billcast.utils.formatting import format_currency

__all__ = [
    "parse_date",
    "parse_iso_date",
    "format_iso_date",
    "parse_amount",
    "coerce_amount",
    "format_currency",
]
