"""
Writes the merged dataset to disk.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path

import aiofiles

from bgm_builder.models.bgm import BgmRecord
from bgm_builder.utils.path import reset_dir

log = logging.getLogger(__name__)


async def prepare_output_dir(directory: Path) -> None:
    """Clears the output directory left by a previous build."""
    await asyncio.to_thread(reset_dir, directory)
    log.debug(f"Output directory {directory} is ready.")


def serialize_records(records: Sequence[BgmRecord], indent: int = 2) -> str:
    """Renders records as a pretty-printed JSON array, keeping non-ASCII text."""
    return json.dumps(
        [record.to_json_dict() for record in records],
        indent=indent,
        ensure_ascii=False,
    )


async def write_records(
    records: Sequence[BgmRecord], path: Path, indent: int = 2
) -> int:
    """
    Writes records to `path` and returns the number of bytes written.
    """
    payload = serialize_records(records, indent).encode("utf-8")
    async with aiofiles.open(path, "wb") as f:
        await f.write(payload)
    log.debug(f"Wrote {len(records)} records to {path}")
    return len(payload)
