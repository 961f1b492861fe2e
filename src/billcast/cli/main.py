"""Main CLI entry point."""

import click

from billcast.config import DATA_PATH_ENV, DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV
from billcast.logging_config import setup_logging
from billcast.sources.factories import create_json_source

# Import and register all commands at module level
from billcast.cli.commands import bills, paydates, projection, summary


@click.group()
@click.option(
    "--data-path",
    type=click.Path(),
    help=f"Path to the finance data file (overrides {DATA_PATH_ENV} environment variable)",
    envvar=DATA_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    envvar=LOG_LEVEL_ENV,
    help="Logging verbosity (default: WARNING)",
)
@click.option("--json-logs", is_flag=True, help="Emit log records as JSON")
@click.pass_context
def cli(ctx, data_path: str | None, log_level: str, json_logs: bool):
    """Billcast - Bill and cash-flow projection.

    Expands recurring bills and card payments into due dates and projects
    your balance from paycheck to paycheck.
    """
    ctx.ensure_object(dict)
    setup_logging(level=log_level, json_output=json_logs)

    # Only resolve the data source when running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        ctx.obj["source"] = create_json_source(data_path=data_path)


# Register all commands
bills.register_commands(cli)
paydates.register_commands(cli)
projection.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
