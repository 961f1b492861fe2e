"""Cash-flow projection commands."""

from decimal import Decimal

import click

from billcast.cli.context import get_snapshot
from billcast.cli.date_filters import resolve_today, today_option
from billcast.cli.error_handling import handle_domain_error
from billcast.cli.output import echo_amount_line, echo_grouped_occurrences, echo_occurrences
from billcast.config import DEFAULT_WINDOW_MONTHS, OUTLOOK_DAYS
from billcast.domain.errors import DomainError
from billcast.domain.projection import ProjectionService
from billcast.utils.amount_parser import parse_amount
from billcast.utils.date_parser import format_iso_date
from billcast.utils.formatting import format_currency, format_long_date, format_short_date


@click.command("next-paycheck")
@today_option
@click.pass_context
def next_paycheck(ctx, today_str: str | None):
    """Show what is due before the next paycheck and what will be left.

    Lists bills and card payments due from today through the next pay date.
    Only unpaid items reduce the projected balance.
    """
    today = resolve_today(ctx, today_str)
    service = ProjectionService(get_snapshot(ctx))
    try:
        overview = service.next_paycheck_overview(today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nNext paycheck: {format_long_date(overview.next_pay_date)}")
    click.echo("=" * 60)
    if overview.obligations:
        echo_grouped_occurrences(overview.obligations, today)
    else:
        click.echo("Nothing due before the next paycheck.")
    click.echo("-" * 60)
    echo_amount_line("Available funds", overview.available_funds)
    echo_amount_line("Unpaid bills", overview.unpaid_total)
    echo_amount_line("Projected balance", overview.projected_balance)


@click.command("outlook")
@click.option("--days", type=int, default=OUTLOOK_DAYS, help="Horizon in days (default: 30)")
@today_option
@click.pass_context
def outlook(ctx, days: int, today_str: str | None):
    """Show funds, bills, card payments and paychecks over the next days."""
    if days <= 0:
        click.echo("Error: --days must be positive", err=True)
        ctx.exit(1)

    today = resolve_today(ctx, today_str)
    service = ProjectionService(get_snapshot(ctx))
    try:
        result = service.thirty_day_outlook(today, days=days)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"\nOutlook {format_iso_date(result.start_date)} to {format_iso_date(result.end_date)}"
    )
    click.echo("=" * 60)
    if result.pay_dates is not None:
        click.echo(f"Last pay date: {format_long_date(result.pay_dates.last_pay_date)}")
        click.echo(f"Next pay date: {format_long_date(result.pay_dates.next_pay_date)}")

    if result.bills:
        click.echo("\nBills:")
        echo_occurrences(result.bills, today)
    if result.card_payments:
        click.echo("\nCard payments:")
        for payment in result.card_payments:
            name = payment.card_name or payment.credit_card_id
            click.echo(
                f"{format_iso_date(payment.payment_date)} | {name:30s} | "
                f"{format_currency(payment.amount):>12s}"
            )
    if result.paychecks:
        click.echo("\nPaychecks:")
        for paycheck in result.paychecks:
            click.echo(
                f"{format_iso_date(paycheck.payment_date)} | {'Paycheck':30s} | "
                f"{format_currency(paycheck.amount):>12s}"
            )

    click.echo("-" * 60)
    echo_amount_line("Available funds", result.available_funds)
    echo_amount_line("Bills", result.bills_total)
    echo_amount_line("Card payments", result.card_payments_total)
    echo_amount_line("Expected paychecks", result.paychecks_total)
    echo_amount_line("Remaining after bills", result.remaining_after_bills)


@click.command("income-book")
@click.option(
    "--months",
    type=int,
    default=DEFAULT_WINDOW_MONTHS,
    help="Projection window in months (default: 6)",
)
@click.option(
    "--include-savings/--no-savings",
    default=True,
    help="Whether savings contributions reduce the balance (default: include)",
)
@click.option(
    "--starting-balance",
    help="Balance to start from (default: projected balance at the next paycheck)",
)
@click.option("--details", is_flag=True, help="List each period's bills")
@today_option
@click.pass_context
def income_book(
    ctx,
    months: int,
    include_savings: bool,
    starting_balance: str | None,
    details: bool,
    today_str: str | None,
):
    """Project the running balance paycheck by paycheck.

    Each paycheck opens a period that lasts until the next one. Bills due in
    the period are subtracted from the paycheck and carried forward.

    Examples:
        billcast income-book
        billcast income-book --months 3 --no-savings
        billcast income-book --starting-balance 1500 --details
    """
    if months <= 0:
        click.echo("Error: --months must be positive", err=True)
        ctx.exit(1)

    seed: Decimal | None = None
    if starting_balance is not None:
        try:
            seed = parse_amount(starting_balance)
        except ValueError as e:
            click.echo(f"Error: Invalid starting balance: {e}", err=True)
            ctx.exit(1)

    today = resolve_today(ctx, today_str)
    service = ProjectionService(get_snapshot(ctx))
    try:
        book = service.income_book(
            today,
            window_months=months,
            include_savings=include_savings,
            starting_balance=seed,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nIncome book for the next {book.window_months} month(s)")
    click.echo(f"Starting balance: {format_currency(book.starting_balance)}")
    click.echo("=" * 60)
    savings_header = f" {'Savings':>12s}" if book.include_savings else ""
    click.echo(
        f"{'Paycheck':10s} {'Amount':>12s} {'Bills':>12s}{savings_header} {'Balance':>12s}"
    )
    click.echo("-" * 60)
    for period in book.periods:
        savings_column = (
            f" {format_currency(period.savings_total):>12s}" if book.include_savings else ""
        )
        click.echo(
            f"{format_short_date(period.period_start):10s} "
            f"{format_currency(period.paycheck.amount):>12s} "
            f"{format_currency(period.obligations_total):>12s}"
            f"{savings_column} "
            f"{format_currency(period.ending_balance):>12s}"
        )
        if details and period.obligations:
            for occ in period.obligations:
                click.echo(
                    f"    {format_iso_date(occ.due_date)}  {occ.name:30s} "
                    f"{format_currency(occ.amount):>12s}"
                )


def register_commands(cli):
    """Register projection commands with main CLI."""
    cli.add_command(next_paycheck)
    cli.add_command(outlook)
    cli.add_command(income_book)
