"""Pay date commands."""

import click

from billcast.cli.context import get_snapshot
from billcast.cli.date_filters import resolve_today, today_option
from billcast.cli.error_handling import handle_domain_error
from billcast.domain.errors import DomainError
from billcast.domain.paychecks import PaycheckScheduler
from billcast.utils.date_parser import add_months
from billcast.utils.formatting import format_currency, format_long_date


@click.command("paydates")
@click.option(
    "--months",
    type=int,
    default=0,
    help="Also list upcoming paychecks for this many months",
)
@today_option
@click.pass_context
def paydates(ctx, months: int, today_str: str | None):
    """Show the last and next pay dates from the income profile.

    Examples:
        billcast paydates
        billcast paydates --months 3
    """
    today = resolve_today(ctx, today_str)
    snapshot = get_snapshot(ctx)
    scheduler = PaycheckScheduler(snapshot.paychecks, snapshot.profile)

    try:
        dates = scheduler.pay_dates(today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Income frequency: {snapshot.profile.income_frequency.value}")
    click.echo(f"Last pay date:    {format_long_date(dates.last_pay_date)}")
    click.echo(f"Next pay date:    {format_long_date(dates.next_pay_date)}")

    next_paycheck = scheduler.next_paycheck_date(today)
    source = "stored" if scheduler.has_stored_paychecks else "derived"
    click.echo(f"Next paycheck:    {format_long_date(next_paycheck)} ({source})")

    if months > 0:
        upcoming = scheduler.upcoming_paychecks(today, add_months(today, months))
        if not upcoming:
            click.echo(f"\nNo paychecks in the next {months} month(s).")
            return
        click.echo(f"\nPaychecks in the next {months} month(s):")
        for paycheck in upcoming:
            click.echo(
                f"  {format_long_date(paycheck.payment_date):20s} "
                f"{format_currency(paycheck.amount):>12s}"
            )


def register_commands(cli):
    """Register paydates command with main CLI."""
    cli.add_command(paydates)
