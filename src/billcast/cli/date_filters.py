"""CLI helpers for reference-date and date range resolution."""

from datetime import date

import click

from billcast.utils.date_parser import get_date_range, parse_date


def today_option(func):
    """Add the --today option every projection command takes."""
    return click.option(
        "--today",
        "today_str",
        help="Reference date (YYYY-MM-DD or relative like 'tomorrow'); defaults to the current date",
    )(func)


def resolve_today(ctx, today_str: str | None) -> date:
    """Resolve the reference date once, at the CLI boundary."""
    if not today_str:
        return date.today()
    try:
        return parse_date(today_str)
    except ValueError as e:
        click.echo(f"Error: Invalid --today date: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    today: date,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --next-month, --this-week, --next-week, --next-30-days) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --next-month, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period, today=today)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date, today=today)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date, today=today)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date.", err=True)
        ctx.exit(1)

    return start, end
