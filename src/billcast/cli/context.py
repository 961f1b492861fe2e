"""Shared access to the finance snapshot for CLI commands."""

import click

from billcast.domain.entities import FinanceSnapshot
from billcast.domain.errors import DomainError
from billcast.cli.error_handling import handle_domain_error
from billcast.sources.loader import load_snapshot


def get_snapshot(ctx: click.Context) -> FinanceSnapshot:
    """Load the snapshot once per invocation, exiting on source errors."""
    obj = ctx.find_object(dict)
    if obj.get("snapshot") is None:
        source = obj["source"]
        try:
            source.connect()
            obj["snapshot"] = load_snapshot(source)
        except DomainError as e:
            handle_domain_error(ctx, e)
        finally:
            source.disconnect()
    return obj["snapshot"]
