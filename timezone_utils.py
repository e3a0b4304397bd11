"""
Standardized date and timezone utilities for the EcoPilot backend.
Daily content is keyed by the UTC calendar date; local-time broadcasts use
the configured reminder timezone.
"""

import datetime
import re
from typing import List, Optional, Union

import pytz

from exceptions import MalformedInputError

UTC_TZ = pytz.utc
DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_current_utc_datetime() -> datetime.datetime:
    """
    Get current datetime in UTC.

    Returns:
        datetime.datetime: Timezone-aware current datetime
    """
    return datetime.datetime.now(UTC_TZ)


def get_current_utc_date() -> datetime.date:
    """
    Get current calendar date in UTC.

    Returns:
        datetime.date: Today's date in UTC
    """
    return get_current_utc_datetime().date()


def get_current_local_datetime(tz_name: str) -> datetime.datetime:
    """
    Get current datetime in a named timezone such as 'America/New_York'.

    Args:
        tz_name: IANA timezone name

    Returns:
        datetime.datetime: Timezone-aware current datetime in that zone
    """
    return datetime.datetime.now(pytz.timezone(tz_name))


def to_date_string(day: Union[datetime.date, datetime.datetime]) -> str:
    """Format a date as the ISO YYYY-MM-DD key used for Firestore documents."""
    if isinstance(day, datetime.datetime):
        day = day.astimezone(UTC_TZ).date() if day.tzinfo else day.date()
    return day.strftime(DATE_FORMAT)


def parse_date_string(value: Optional[str], default: Optional[datetime.date] = None) -> datetime.date:
    """
    Parse a YYYY-MM-DD string.

    Args:
        value: The string to parse; empty or None returns `default`
        default: Returned when no value is given

    Raises:
        MalformedInputError: if the value is not a valid calendar date
    """
    if not value:
        if default is None:
            raise MalformedInputError("A date in YYYY-MM-DD format is required.")
        return default
    if not _DATE_PATTERN.match(value):
        raise MalformedInputError(f"Invalid date '{value}', expected YYYY-MM-DD.")
    try:
        return datetime.datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise MalformedInputError(f"Invalid date '{value}': {e}") from e


def date_range(start: datetime.date, days: int) -> List[datetime.date]:
    """`days` consecutive dates beginning with `start`."""
    return [start + datetime.timedelta(days=i) for i in range(days)]


def days_before_string(day: datetime.date, days: int) -> str:
    return to_date_string(day - datetime.timedelta(days=days))
