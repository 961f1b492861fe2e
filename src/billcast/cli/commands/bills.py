"""Bill listing and expansion commands."""

from datetime import timedelta

import click

from billcast.cli.context import get_snapshot
from billcast.cli.date_filters import resolve_cli_date_range, resolve_today, today_option
from billcast.cli.output import echo_grouped_occurrences, echo_occurrences
from billcast.domain.obligations import (
    attach_payment_methods,
    dedupe_card_payments,
    minimum_card_payments,
    monthly_obligations,
    obligations_in_range,
)
from billcast.config import OUTLOOK_DAYS
from billcast.domain.recurrence import expand_recurrence, next_due_date
from billcast.utils.date_parser import format_iso_date, parse_month
from billcast.utils.formatting import format_currency


def _stored_bills(snapshot):
    return attach_payment_methods(snapshot.bills, snapshot.credit_cards, snapshot.debit_cards)


@click.command("bills")
@click.option("--month", help="Month to list (YYYY-MM or relative like 'next month'); defaults to this month")
@click.option("--by-category", is_flag=True, help="Group bills by category")
@click.option("--minimums", is_flag=True, help="Also list minimum payments for cards that owe one")
@today_option
@click.pass_context
def list_bills(ctx, month: str | None, by_category: bool, minimums: bool, today_str: str | None):
    """List everything due in a calendar month.

    Includes stored bills and each credit card's scheduled payment.

    Examples:
        billcast bills
        billcast bills --month 2024-03 --by-category
    """
    today = resolve_today(ctx, today_str)
    snapshot = get_snapshot(ctx)

    reference_month = today
    if month:
        try:
            reference_month = parse_month(month, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)

    bills = _stored_bills(snapshot)
    if minimums:
        bills += minimum_card_payments(snapshot.credit_cards, snapshot.categories)

    occurrences = monthly_obligations(
        bills, snapshot.credit_cards, snapshot.categories, reference_month
    )
    if not occurrences:
        click.echo(f"No bills due in {reference_month.strftime('%B %Y')}.")
        return

    click.echo(f"\nBills for {reference_month.strftime('%B %Y')}:")
    if by_category:
        echo_grouped_occurrences(occurrences, today)
    else:
        click.echo("-" * 60)
        echo_occurrences(occurrences, today)
    total = sum(occ.amount for occ in occurrences)
    click.echo(f"\nTotal: {format_currency(total)}")


@click.command("upcoming")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'today')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'next month')")
@click.option("--this-month", is_flag=True, help="Rest of the current month")
@click.option("--next-month", is_flag=True, help="The whole of next month")
@click.option("--this-week", is_flag=True, help="Current week (Monday to Sunday)")
@click.option("--next-week", is_flag=True, help="Next week (Monday to Sunday)")
@click.option("--next-30-days", is_flag=True, help="Today plus 30 days (default)")
@today_option
@click.pass_context
def upcoming_bills(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    next_month: bool,
    this_week: bool,
    next_week: bool,
    next_30_days: bool,
    today_str: str | None,
):
    """List bills and card payments due in a date range.

    Repeated credit card payments (same amount, same day) are shown once.
    """
    today = resolve_today(ctx, today_str)
    period_flags = {
        "this-month": this_month,
        "next-month": next_month,
        "this-week": this_week,
        "next-week": next_week,
        "next-30-days": next_30_days,
    }
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        today=today,
        default_range=(today, today + timedelta(days=OUTLOOK_DAYS)),
    )
    if start is None:
        start = min(today, end)
    if end is None:
        end = start + timedelta(days=OUTLOOK_DAYS)

    snapshot = get_snapshot(ctx)
    occurrences = dedupe_card_payments(
        obligations_in_range(
            _stored_bills(snapshot), snapshot.credit_cards, snapshot.categories, start, end
        )
    )
    if not occurrences:
        click.echo(f"No bills due between {format_iso_date(start)} and {format_iso_date(end)}.")
        return

    click.echo(f"\nBills due {format_iso_date(start)} to {format_iso_date(end)}:")
    click.echo("-" * 60)
    echo_occurrences(occurrences, today)
    click.echo(f"\nTotal: {format_currency(sum(occ.amount for occ in occurrences))}")


@click.command("expand")
@click.argument("bill_id")
@click.option("--start-date", required=True, help="Window start (YYYY-MM-DD)")
@click.option("--end-date", required=True, help="Window end, inclusive (YYYY-MM-DD)")
@today_option
@click.pass_context
def expand_bill(ctx, bill_id: str, start_date: str, end_date: str, today_str: str | None):
    """Show every due date of one recurring bill within a window.

    Examples:
        billcast expand rent --start-date 2024-01-01 --end-date 2024-06-30
    """
    today = resolve_today(ctx, today_str)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={},
        today=today,
    )
    snapshot = get_snapshot(ctx)

    bill = next((b for b in snapshot.bills if b.id == bill_id), None)
    if bill is None:
        click.echo(f"Error: Bill '{bill_id}' not found", err=True)
        ctx.exit(1)

    if not bill.is_recurring:
        if bill.due_date is None:
            click.echo(f"'{bill.name}' is a one-time bill with no due date.")
        else:
            click.echo(f"'{bill.name}' is a one-time bill due {format_iso_date(bill.due_date)}.")
        return

    dates = expand_recurrence(bill, start, end)
    if not dates:
        click.echo(f"No due dates for '{bill.name}' in this window.")
    else:
        click.echo(f"\n{bill.name} ({bill.recurrence_interval.value}, {format_currency(bill.amount)}):")
        for due in dates:
            click.echo(f"  {format_iso_date(due)}")

    upcoming = next_due_date(bill, today)
    if upcoming is not None:
        click.echo(f"\nNext due after today: {format_iso_date(upcoming)}")


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(list_bills)
    cli.add_command(upcoming_bills)
    cli.add_command(expand_bill)
