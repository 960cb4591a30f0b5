"""Calculator modules for the finance client."""

from finance_client.calculators.status_calculator import (
    derive_invoice_status,
    derive_quote_status,
    derive_status,
    is_invoice_open,
    resolve_payment_status,
)
from finance_client.calculators.time_utils import (
    calculate_work_hours,
    calculate_work_minutes,
    convert_time_to_minutes,
    minutes_to_decimal_hours,
    parse_clock_time,
)

__all__ = [
    # status_calculator
    "derive_invoice_status",
    "derive_quote_status",
    "derive_status",
    "is_invoice_open",
    "resolve_payment_status",
    # time_utils
    "calculate_work_hours",
    "calculate_work_minutes",
    "convert_time_to_minutes",
    "minutes_to_decimal_hours",
    "parse_clock_time",
]
