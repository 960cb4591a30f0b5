"""
Time-tracking (Zeiterfassung) service.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from finance_client.aggregators.time_entry_aggregator import (
    TimeStatistics,
    calculate_time_statistics,
)
from finance_client.models.time_entry import TimeEntry
from finance_client.services.api_client import ApiClient
from finance_client.services.finance_service import (
    parse_record,
    parse_records,
    to_iso,
)
from finance_client.services.response_cache import ResponseCache
from finance_client.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)

TIME_ENTRIES = "/zeiterfassung"


class TimeTrackingService:
    """
    Time entries and their statistics.

    Shares the ApiClient (and therefore the response cache) with
    FinanceService, so a time entry mutation also invalidates cached
    finance reads.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    @classmethod
    def from_config(
        cls, config: Any, cache: Optional[ResponseCache] = None
    ) -> "TimeTrackingService":
        return cls(ApiClient.from_config(config, cache=cache))

    def get_time_entries(
        self,
        project_id: Optional[str] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> List[TimeEntry]:
        """
        List time entries.

        Args:
            project_id: Only entries of this project
            employee_id: Only entries of this employee
            start_date: First day (inclusive)
            end_date: Last day (inclusive)

        Returns:
            Parsed time entries
        """
        params = {
            "projektId": project_id,
            "mitarbeiterId": employee_id,
            "startDatum": to_iso(start_date),
            "endDatum": to_iso(end_date),
        }
        return parse_records(TimeEntry, self.client.get(TIME_ENTRIES, params))

    def get_time_entry(self, entry_id: str) -> TimeEntry:
        return parse_record(TimeEntry, self.client.get(f"{TIME_ENTRIES}/{entry_id}"))

    def create_time_entry(self, data: Dict[str, Any]) -> Any:
        return self.client.post(TIME_ENTRIES, data)

    def update_time_entry(self, entry_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(f"{TIME_ENTRIES}/{entry_id}", data)

    def delete_time_entry(self, entry_id: str) -> bool:
        self.client.delete(f"{TIME_ENTRIES}/{entry_id}")
        return True

    def get_projects(self) -> Any:
        """Projects time can be booked on (raw payload)."""
        return self.client.get(f"{TIME_ENTRIES}/projekte")

    def get_employees(self) -> Any:
        """Employees who can book time (raw payload)."""
        return self.client.get(f"{TIME_ENTRIES}/mitarbeiter")

    def get_backend_statistics(self, **params: Any) -> Any:
        """Statistics computed by the backend (raw payload)."""
        return self.client.get(
            f"{TIME_ENTRIES}/statistics",
            {key: to_iso(value) for key, value in params.items()},
        )

    @log_function_call(include_args=True)
    def get_time_statistics(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        project_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> TimeStatistics:
        """Fetch entries for a range and aggregate them client-side."""
        entries = self.get_time_entries(
            project_id=project_id,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
        )
        return calculate_time_statistics(entries, start_date, end_date)
