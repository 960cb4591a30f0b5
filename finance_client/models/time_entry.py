"""Time entry data model for the time-tracking (Zeiterfassung) endpoints.

This module defines the TimeEntry model which represents one employee's
working time on a project for a single day.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from finance_client.calculators.time_utils import calculate_work_hours, parse_clock_time
from finance_client.models.base import BaseDataModel, reference_id, to_optional_date

UNKNOWN_PROJECT = "Unbekanntes Projekt"


def _employee_name(employee: dict) -> Optional[str]:
    name = " ".join(
        part for part in (employee.get("vorname"), employee.get("nachname")) if part
    )
    return name or employee.get("name")


def _project_name(project: dict) -> Optional[str]:
    client = project.get("auftraggeber")
    if isinstance(client, dict) and client.get("name"):
        return client["name"]
    return project.get("name")


class TimeEntry(BaseDataModel):
    """Represents a single time entry.

    The backend may return ``mitarbeiterId`` and ``projektId`` either as
    bare ids or as populated objects; names are taken from populated
    objects when present. ``work_hours`` is computed from start, end and
    break when the backend did not send ``arbeitsstunden``.

    Attributes:
        id: Backend identifier (``_id``)
        employee_id: Employee reference
        employee_name: Employee display name, if populated
        project_id: Project reference
        project_name: Project display name, if populated
        date: Working day
        start_time: Start of work
        end_time: End of work
        break_minutes: Break duration in minutes
        work_hours: Worked hours (end - start - break, never negative)
        activity: What was worked on
        notes: Optional notes

    Example:
        >>> entry = TimeEntry.model_validate(
        ...     {"mitarbeiterId": {"_id": "m1", "vorname": "Anna", "nachname": "Schmidt"},
        ...      "projektId": "p1", "datum": "2024-03-04",
        ...      "startzeit": "08:00", "endzeit": "16:30", "pause": 30}
        ... )
        >>> entry.employee_name, entry.work_hours
        ('Anna Schmidt', Decimal('8.00'))
    """

    id: Optional[str] = Field(None, alias="_id")
    employee_id: Optional[str] = Field(None, alias="mitarbeiterId")
    employee_name: Optional[str] = Field(None, alias="mitarbeiterName")
    project_id: Optional[str] = Field(None, alias="projektId")
    project_name: Optional[str] = Field(None, alias="projektName")
    date: Optional[dt.date] = Field(None, alias="datum")
    start_time: Optional[dt.time] = Field(None, alias="startzeit")
    end_time: Optional[dt.time] = Field(None, alias="endzeit")
    break_minutes: int = Field(0, ge=0, alias="pause")
    work_hours: Optional[Decimal] = Field(None, ge=0, alias="arbeitsstunden")
    activity: Optional[str] = Field(None, alias="taetigkeit")
    notes: Optional[str] = Field(None, alias="notizen")

    @model_validator(mode="before")
    @classmethod
    def flatten_references(cls, data: Any) -> Any:
        """Split populated employee/project objects into id and name."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        employee = data.get("mitarbeiterId")
        if isinstance(employee, dict):
            data.setdefault("mitarbeiterName", _employee_name(employee))
        project = data.get("projektId")
        if isinstance(project, dict):
            data.setdefault("projektName", _project_name(project))
        return data

    @field_validator("id", "employee_id", "project_id", mode="before")
    @classmethod
    def convert_reference(cls, v: Any) -> Any:
        v = reference_id(v)
        return str(v) if v is not None else None

    @field_validator("date", mode="before")
    @classmethod
    def convert_date(cls, v: Any) -> Optional[dt.date]:
        return to_optional_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def convert_time(cls, v: Any) -> Optional[dt.time]:
        if v is None or v == "":
            return None
        return parse_clock_time(v)

    @field_validator("break_minutes", mode="before")
    @classmethod
    def convert_break(cls, v: Any) -> Any:
        return 0 if v is None or v == "" else v

    @model_validator(mode="after")
    def validate_time_logic(self) -> "TimeEntry":
        """Validate start/end ordering and fill in missing work hours.

        Raises:
            ValueError: If end_time is not after start_time
        """
        if self.start_time is None or self.end_time is None:
            return self

        if self.end_time <= self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) must be after start_time "
                f"({self.start_time})"
            )

        if self.work_hours is None:
            # bypass validate_assignment, which would re-enter this validator
            object.__setattr__(
                self,
                "work_hours",
                calculate_work_hours(
                    self.start_time, self.end_time, self.break_minutes
                ),
            )
        return self

    @property
    def hours(self) -> Decimal:
        """Worked hours, zero when neither sent nor computable."""
        return self.work_hours if self.work_hours is not None else Decimal("0")

    @property
    def project_display_name(self) -> str:
        return self.project_name or UNKNOWN_PROJECT
