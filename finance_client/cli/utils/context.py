"""Service construction and argument parsing shared by CLI commands."""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Tuple

import click

from finance_client.cli.error_handlers import InvalidInputError
from finance_client.config.settings import FinanceClientConfig, get_config
from finance_client.services.api_client import ApiClient
from finance_client.services.finance_service import FinanceService
from finance_client.services.response_cache import ResponseCache
from finance_client.services.time_tracking_service import TimeTrackingService
from finance_client.utils.date_utils import end_of_month


@dataclass
class Services:
    """Services of one CLI invocation, sharing one client and cache."""

    config: FinanceClientConfig
    client: ApiClient
    finance: FinanceService
    time_tracking: TimeTrackingService


def build_services(config: Optional[FinanceClientConfig] = None) -> Services:
    """Create the services from configuration.

    Raises:
        pydantic.ValidationError: If the configuration is invalid
    """
    config = config or get_config()
    client = ApiClient.from_config(config, cache=ResponseCache.from_config(config))
    return Services(
        config=config,
        client=client,
        finance=FinanceService(client, max_workers=config.max_concurrent_requests),
        time_tracking=TimeTrackingService(client),
    )


def get_services(ctx: click.Context) -> Services:
    """Services stored on the root context, created on first use."""
    root = ctx.find_root()
    root.ensure_object(dict)
    if "services" not in root.obj:
        services = build_services()
        root.obj["services"] = services
        root.call_on_close(services.client.close)
    return root.obj["services"]


def is_debug(ctx: click.Context) -> bool:
    obj = ctx.find_root().obj or {}
    return bool(obj.get("debug"))


def parse_date_input(
    date_str: Optional[str], end_of_period: bool = False
) -> Optional[dt.date]:
    """Parse date string in YYYY-MM or YYYY-MM-DD format.

    Args:
        date_str: Date string (None passes through)
        end_of_period: For YYYY-MM, use the last day of the month

    Returns:
        Parsed date object

    Raises:
        InvalidInputError: If date format is invalid
    """
    if date_str is None:
        return None

    try:
        return dt.datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        pass

    try:
        parsed = dt.datetime.strptime(date_str, "%Y-%m")
    except ValueError:
        raise InvalidInputError(
            f"Invalid date format: {date_str}",
            recovery_hint="Expected YYYY-MM-DD or YYYY-MM",
        )

    first = dt.date(parsed.year, parsed.month, 1)
    return end_of_month(first) if end_of_period else first


def parse_date_range(
    start: Optional[str], end: Optional[str]
) -> Tuple[Optional[dt.date], Optional[dt.date]]:
    """Parse a start/end pair and check its order."""
    start_date = parse_date_input(start)
    end_date = parse_date_input(end, end_of_period=True)
    if start_date and end_date and end_date < start_date:
        raise InvalidInputError(
            f"End date {end_date} is before start date {start_date}"
        )
    return start_date, end_date
