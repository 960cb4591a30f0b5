"""Time entry aggregator for the time-tracking dashboard.

This module reduces time entries into total and average hours and into
per-employee, per-project and per-day buckets.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from finance_client.models.time_entry import UNKNOWN_PROJECT, TimeEntry

logger = logging.getLogger(__name__)

UNKNOWN_EMPLOYEE = "Unbekannt"


@dataclass
class HoursBucket:
    """Hours and entry count for one employee, project or day.

    Attributes:
        key: Grouping key (employee id, project id or ISO date)
        name: Display name
        hours: Sum of worked hours
        entries: Number of time entries

    Example:
        >>> bucket = HoursBucket(key="m1", name="Anna Schmidt")
        >>> bucket.add(Decimal("8.00"))
        >>> bucket.hours, bucket.entries
        (Decimal('8.00'), 1)
    """

    key: str
    name: str
    hours: Decimal = Decimal("0")
    entries: int = 0

    def add(self, hours: Decimal) -> None:
        self.hours += hours
        self.entries += 1


@dataclass
class TimeStatistics:
    """Aggregated time-tracking statistics for a date range.

    Attributes:
        total_hours: Sum of worked hours
        average_hours_per_day: total_hours / number of days in the range
        total_entries: Number of time entries
        days: Number of calendar days in the range (inclusive)
        by_employee: Buckets per employee, in first-seen order
        by_project: Buckets per project, in first-seen order
        by_day: Buckets per working day, ordered by date
    """

    total_hours: Decimal = Decimal("0")
    average_hours_per_day: Decimal = Decimal("0")
    total_entries: int = 0
    days: int = 0
    by_employee: List[HoursBucket] = field(default_factory=list)
    by_project: List[HoursBucket] = field(default_factory=list)
    by_day: List[HoursBucket] = field(default_factory=list)


def _day_count(
    entries: Sequence[TimeEntry],
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
) -> int:
    """Inclusive number of days in the range, falling back to the entries' dates."""
    dates = [entry.date for entry in entries if entry.date is not None]
    start = start_date or (min(dates) if dates else None)
    end = end_date or (max(dates) if dates else None)
    if start is None or end is None or end < start:
        return 1
    return (end - start).days + 1


def calculate_time_statistics(
    entries: Sequence[TimeEntry],
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
) -> TimeStatistics:
    """Aggregate time entries.

    Args:
        entries: Time entries to aggregate
        start_date: First day of the range (defaults to the earliest entry)
        end_date: Last day of the range (defaults to the latest entry)

    Returns:
        TimeStatistics; all values are zero for an empty entry list

    Example:
        >>> stats = calculate_time_statistics(entries, dt.date(2024, 3, 4),
        ...                                   dt.date(2024, 3, 8))
        >>> stats.days
        5
    """
    if not entries:
        return TimeStatistics()

    by_employee: Dict[str, HoursBucket] = {}
    by_project: Dict[str, HoursBucket] = {}
    by_day: Dict[dt.date, HoursBucket] = {}
    total_hours = Decimal("0")

    for entry in entries:
        hours = entry.hours
        total_hours += hours

        employee_key = entry.employee_id or ""
        if employee_key not in by_employee:
            by_employee[employee_key] = HoursBucket(
                key=employee_key,
                name=entry.employee_name or employee_key or UNKNOWN_EMPLOYEE,
            )
        by_employee[employee_key].add(hours)

        project_key = entry.project_id or ""
        if project_key not in by_project:
            by_project[project_key] = HoursBucket(
                key=project_key, name=entry.project_display_name
            )
        by_project[project_key].add(hours)

        if entry.date is not None:
            if entry.date not in by_day:
                by_day[entry.date] = HoursBucket(
                    key=entry.date.isoformat(), name=entry.date.strftime("%d.%m.%Y")
                )
            by_day[entry.date].add(hours)

    days = _day_count(entries, start_date, end_date)
    average = (total_hours / days).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    logger.debug(
        f"Aggregated {len(entries)} time entries: {total_hours} hours over {days} days"
    )

    return TimeStatistics(
        total_hours=total_hours,
        average_hours_per_day=average,
        total_entries=len(entries),
        days=days,
        by_employee=list(by_employee.values()),
        by_project=list(by_project.values()),
        by_day=[by_day[day] for day in sorted(by_day)],
    )
