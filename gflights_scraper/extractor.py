"""Extraction of the inline `ds:1` data blob from a results page"""

from typing import Any, Optional

import orjson
from loguru import logger

from .config import DATA_KEY, DS1_MARKER

_OPENERS = "[{"
_CLOSERS = "]}"


def find_balanced_span(text: str, start: int) -> Optional[int]:
    """
    Scan from `start` until bracket depth returns to zero.

    Brackets inside JSON string literals are skipped.

    Returns:
        Index one past the closing bracket, or None if the span never balances
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        if depth == 0:
            return i + 1
    return None


def extract_embedded_data(html: str) -> Optional[Any]:
    """
    Pull the `ds:1` JSON value out of the page's AF_initDataCallback call.

    Returns:
        Decoded JSON, or None if the marker is missing or the blob is invalid
    """
    marker_pos = html.find(DS1_MARKER)
    if marker_pos == -1:
        logger.debug("ds:1 marker not found in page")
        return None

    data_pos = html.find(DATA_KEY, marker_pos)
    if data_pos == -1:
        logger.debug("ds:1 callback has no data key")
        return None

    start = data_pos + len(DATA_KEY)
    while start < len(html) and html[start].isspace():
        start += 1
    if start >= len(html) or html[start] not in _OPENERS:
        logger.debug("ds:1 data is not a JSON array or object")
        return None

    end = find_balanced_span(html, start)
    if end is None:
        logger.debug("ds:1 data never closes")
        return None

    try:
        return orjson.loads(html[start:end])
    except orjson.JSONDecodeError as e:
        logger.debug(f"ds:1 data is not valid JSON: {e}")
        return None
