"""Summary command."""

import click

from billcast.cli.context import get_snapshot
from billcast.cli.output import echo_amount_line
from billcast.domain.summary import SummaryService
from billcast.utils.formatting import format_currency


@click.command()
@click.option("--minimums", is_flag=True, help="List minimum payments owed per card")
@click.pass_context
def summary(ctx, minimums: bool):
    """Show monthly income against bills, card minimums and debt.

    Also recommends how to split what is left between spending and paying
    down debt.
    """
    service = SummaryService(get_snapshot(ctx))
    result = service.financial_summary()
    recommendation = service.spending_recommendation()

    click.echo("\nMonthly financial summary")
    click.echo("=" * 60)
    echo_amount_line("Income", result.income)
    echo_amount_line("Bills (monthly equivalent)", result.total_bills)
    echo_amount_line("Card minimum payments", result.total_minimum_payments)
    echo_amount_line("Available income", result.available_income)
    click.echo("-" * 60)
    echo_amount_line("Total card debt", result.total_debt)
    click.echo(f"{'Debt-to-income ratio':<40s} {result.debt_to_income_ratio:>15.2f}")
    click.echo("-" * 60)
    echo_amount_line("Recommended spending", recommendation.spending)
    echo_amount_line("Recommended debt payment", recommendation.debt_payment)

    if minimums:
        due = service.minimum_payments_due()
        click.echo("\nMinimum payments:")
        if not due:
            click.echo("  No card owes a minimum payment.")
        for obligation in due:
            click.echo(f"  {obligation.name:30s} {format_currency(obligation.amount):>12s}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
