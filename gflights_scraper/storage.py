"""Async JSON output for command line results"""

from pathlib import Path
from typing import Any, Tuple

import aiofiles
import orjson
from loguru import logger


def dump_json(data: Any) -> bytes:
    """Serialize results as indented JSON"""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


async def save_json(data: Any, output_file: Path) -> Tuple[Path, int]:
    """
    Write results to `output_file` without blocking the event loop.

    Args:
        data: JSON-serializable results
        output_file: Destination path; parent directories are created

    Returns:
        Tuple of (output_file, bytes_written)
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    json_bytes = dump_json(data)

    async with aiofiles.open(output_file, "wb") as f:
        await f.write(json_bytes)

    logger.info(f"💾 Saved results: {output_file} ({len(json_bytes) / 1024:.1f}KB)")
    return output_file, len(json_bytes)
