"""Finance data sources for billcast application."""

from billcast.sources.base import FinanceSource
from billcast.sources.factories import create_json_source
from billcast.sources.loader import load_snapshot

__all__ = ["FinanceSource", "create_json_source", "load_snapshot"]
