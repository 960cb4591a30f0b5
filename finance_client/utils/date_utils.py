"""Date helpers for the backend's ISO-8601 wire format and calendar months.

The backend sends dates either as plain dates (``2024-12-31``) or as UTC
timestamps (``2024-01-15T00:00:00.000Z``). Grouping is always done on the
calendar date as sent, never on a rolling window.
"""

import datetime as dt
from typing import List, Optional, Tuple, Union

DateLike = Union[dt.date, dt.datetime, str, None]

MONTH_ABBREVIATIONS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


def parse_iso_datetime(value: Union[dt.date, dt.datetime, str]) -> dt.datetime:
    """Parse an ISO-8601 value into a datetime.

    Args:
        value: datetime, date or ISO string (trailing ``Z`` allowed)

    Returns:
        Parsed datetime (timezone-aware when the input carries an offset)

    Raises:
        ValueError: If the string is not valid ISO-8601

    Example:
        >>> parse_iso_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return dt.datetime.fromisoformat(text)


def parse_iso_date(value: DateLike) -> Optional[dt.date]:
    """Parse an ISO-8601 date or timestamp into a calendar date.

    Empty values yield None.

    Example:
        >>> parse_iso_date("2024-01-15T00:00:00.000Z")
        datetime.date(2024, 1, 15)
        >>> parse_iso_date("") is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return parse_iso_datetime(value).date()


def month_key(day: dt.date) -> str:
    """Format the calendar month of ``day`` as ``YYYY-MM``."""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: dt.date) -> str:
    """Format the calendar month of ``day`` as ``Mon YYYY`` (e.g. ``Jan 2024``)."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.year}"


def shift_months(day: dt.date, months: int) -> dt.date:
    """Return the first day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return dt.date(index // 12, index % 12 + 1, 1)


def start_of_month(day: dt.date) -> dt.date:
    """Return the first day of ``day``'s month."""
    return dt.date(day.year, day.month, 1)


def end_of_month(day: dt.date) -> dt.date:
    """Return the last day of ``day``'s month."""
    return shift_months(day, 1) - dt.timedelta(days=1)


def trailing_months(count: int, today: dt.date) -> List[dt.date]:
    """List the first days of the ``count`` months ending with ``today``'s month.

    Ordered oldest to newest.

    Example:
        >>> trailing_months(3, dt.date(2024, 2, 10))
        [datetime.date(2023, 12, 1), datetime.date(2024, 1, 1), datetime.date(2024, 2, 1)]
    """
    return [shift_months(today, offset) for offset in range(-(count - 1), 1)]


def year_bounds(year: int) -> Tuple[dt.date, dt.date]:
    """Return the first and last calendar day of ``year``."""
    return dt.date(year, 1, 1), dt.date(year, 12, 31)
