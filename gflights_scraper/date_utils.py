"""Date utilities for search options and calendar data"""

import datetime
import re
from typing import Optional

from dateutil.parser import isoparse

from .exceptions import InvalidSearchError

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def validate_iso_date(date_str: str, field_name: str = "date") -> str:
    """
    Validate a calendar date in YYYY-MM-DD format.

    Args:
        date_str: Date string to check
        field_name: Name used in the error message

    Returns:
        The date string unchanged

    Raises:
        InvalidSearchError: If the string is not a real YYYY-MM-DD date
    """
    if not isinstance(date_str, str) or not _ISO_DATE.fullmatch(date_str):
        raise InvalidSearchError(f"Invalid {field_name} '{date_str}': expected YYYY-MM-DD")
    try:
        isoparse(date_str)
    except ValueError as e:
        raise InvalidSearchError(f"Invalid {field_name} '{date_str}': {e}")
    return date_str


def default_anchor_date(days_ahead: int, today: Optional[datetime.date] = None) -> str:
    """Date `days_ahead` days after today (UTC), as YYYY-MM-DD"""
    if today is None:
        today = datetime.datetime.now(datetime.timezone.utc).date()
    return (today + datetime.timedelta(days=days_ahead)).strftime("%Y-%m-%d")


def timestamp_ms_to_date(timestamp_ms: float) -> str:
    """Convert epoch milliseconds to a UTC calendar date"""
    moment = datetime.datetime.fromtimestamp(timestamp_ms / 1000, tz=datetime.timezone.utc)
    return moment.strftime("%Y-%m-%d")
