"""Source factory functions for creating finance data sources."""

import os
from pathlib import Path
from typing import Optional

from billcast.config import DATA_PATH_ENV, DEFAULT_DATA_DIR, DEFAULT_DATA_FILE
from billcast.sources.json_file import JsonFileSource


def create_json_source(data_path: Optional[str] = None) -> JsonFileSource:
    """Create a JSON snapshot source.

    Args:
        data_path: Path to the JSON file. If None, checks BILLCAST_DATA_PATH
            environment variable, then defaults to ~/.billcast/finances.json

    Returns:
        JsonFileSource instance
    """
    if data_path is None:
        data_path = os.environ.get(DATA_PATH_ENV)

    if data_path is None:
        data_path = str(Path.home() / DEFAULT_DATA_DIR / DEFAULT_DATA_FILE)

    return JsonFileSource(data_path)
