"""
Utilities for handling output directories and archive asset names.
"""

import re
import shutil
from pathlib import Path

from bgm_builder.exceptions import MapIdError

_NUMERIC_NAME = re.compile(r"\s*[+-]?\d+\s*")


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def reset_dir(directory_path: Path) -> None:
    """Removes a directory tree (if present) and recreates it empty."""
    if directory_path.exists():
        shutil.rmtree(directory_path)
    create_dir(directory_path)


def normalize_map_id(name: str, suffix: str = "") -> str:
    """
    Turns an asset name into a map ID by integer round-trip.

    The optional suffix (e.g. '.img') is stripped first, so '000100.img'
    becomes '100'.

    Raises:
        MapIdError: If the remaining name is not an integer.
    """
    raw = name.removesuffix(suffix) if suffix else name
    if not _NUMERIC_NAME.fullmatch(raw):
        raise MapIdError(f"Asset name '{name}' is not a numeric map ID.")
    return str(int(raw))
