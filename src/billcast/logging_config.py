"""Logging setup for the command line entry point."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter


class BillcastJsonFormatter(JsonFormatter):
    """JSON formatter that always carries the level and logger name."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """Configure the root logger.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
        json_output: If True, emit one JSON object per record
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        formatter = BillcastJsonFormatter("%(asctime)s %(level)s %(name)s %(message)s")
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
