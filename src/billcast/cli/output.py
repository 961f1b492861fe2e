"""Plain-text rendering shared by CLI commands."""

from datetime import date
from typing import Iterable

import click

from billcast.domain.entities import Occurrence
from billcast.domain.summary import group_by_category
from billcast.utils.date_parser import format_iso_date
from billcast.utils.formatting import due_status_label, format_currency


def echo_occurrences(occurrences: Iterable[Occurrence], today: date) -> None:
    """Print one line per occurrence."""
    for occ in occurrences:
        paid = " (paid)" if occ.is_paid else ""
        method = occ.obligation.payment_method
        method_label = f" | {method.label}" if method is not None else ""
        click.echo(
            f"{format_iso_date(occ.due_date)} | {occ.name:30s} | "
            f"{format_currency(occ.amount):>12s} | {due_status_label(occ.due_date, today)}"
            f"{method_label}{paid}"
        )


def echo_grouped_occurrences(occurrences: Iterable[Occurrence], today: date) -> None:
    """Print occurrences grouped by category with subtotals."""
    for group in group_by_category(occurrences):
        click.echo(f"\n{group.name} ({format_currency(group.total)})")
        click.echo("-" * 60)
        echo_occurrences(group.occurrences, today)


def echo_amount_line(label: str, amount) -> None:
    click.echo(f"{label:<40s} {format_currency(amount):>15s}")
