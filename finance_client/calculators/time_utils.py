"""Time calculation utilities for time-tracking entries.

This module provides low-level helpers for working hours:
- Parsing ``HH:MM`` clock times from the wire format
- Converting times to minutes since midnight
- Calculating worked hours from start, end and break

These utilities are timezone-agnostic and work with dt.time.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

TWO_PLACES = Decimal("0.01")


def parse_clock_time(value: Union[str, dt.time]) -> dt.time:
    """Parse an ``HH:MM`` (or ``HH:MM:SS``) clock time.

    Raises:
        ValueError: If the value is not a valid clock time

    Example:
        >>> parse_clock_time("08:30")
        datetime.time(8, 30)
    """
    if isinstance(value, dt.time):
        return value
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid clock time: {value!r}. Expected HH:MM")
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        raise ValueError(f"Invalid clock time: {value!r}. Expected HH:MM")
    return dt.time(*numbers)


def convert_time_to_minutes(time: dt.time) -> int:
    """Convert a dt.time object to minutes since midnight.

    Example:
        >>> convert_time_to_minutes(dt.time(9, 30))
        570
    """
    return time.hour * 60 + time.minute


def calculate_work_minutes(
    start_time: dt.time, end_time: dt.time, break_minutes: int = 0
) -> int:
    """Minutes worked between start and end minus the break, never negative.

    Example:
        >>> calculate_work_minutes(dt.time(8, 0), dt.time(16, 30), 30)
        480
        >>> calculate_work_minutes(dt.time(8, 0), dt.time(8, 15), 30)
        0
    """
    worked = (
        convert_time_to_minutes(end_time)
        - convert_time_to_minutes(start_time)
        - break_minutes
    )
    return max(0, worked)


def minutes_to_decimal_hours(minutes: int) -> Decimal:
    """Convert minutes to decimal hours with 2 decimal precision.

    Example:
        >>> minutes_to_decimal_hours(450)
        Decimal('7.50')
        >>> minutes_to_decimal_hours(10)
        Decimal('0.17')
    """
    hours = Decimal(minutes) / Decimal("60")
    return hours.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def calculate_work_hours(
    start_time: dt.time, end_time: dt.time, break_minutes: int = 0
) -> Decimal:
    """Worked hours for one entry as Decimal (2 places)."""
    return minutes_to_decimal_hours(
        calculate_work_minutes(start_time, end_time, break_minutes)
    )
