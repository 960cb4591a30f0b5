"""Report writer for analytics tables and backend exports.

This module turns aggregator results into pandas DataFrames with fixed
columns, writes them as CSV files and stores export files downloaded from
the backend.
"""

import datetime as dt
import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from finance_client.aggregators.finance_aggregator import (
    CategoryTotal,
    FinancialMetrics,
    MonthlyAnalytics,
)
from finance_client.aggregators.time_entry_aggregator import HoursBucket

logger = logging.getLogger(__name__)

MONTHLY_COLUMNS = [
    "Month",
    "Month Key",
    "Revenue",
    "Expenses",
    "Profit",
    "Profit Margin (%)",
    "Invoices Created",
]

CATEGORY_COLUMNS = ["Category", "Amount", "Share (%)"]

METRIC_COLUMNS = ["Metric", "Value"]

HOURS_COLUMNS = ["Key", "Name", "Hours", "Entries"]


def _money(value: Decimal) -> float:
    """Convert a Decimal amount for DataFrame storage, rounded to cents."""
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def monthly_analytics_frame(series: Sequence[MonthlyAnalytics]) -> pd.DataFrame:
    """Build the monthly analytics table (one row per month, oldest first).

    Example:
        >>> df = monthly_analytics_frame(series)
        >>> list(df.columns)[:3]
        ['Month', 'Month Key', 'Revenue']
    """
    rows = [
        [
            entry.month,
            entry.month_key,
            _money(entry.revenue),
            _money(entry.expenses),
            _money(entry.profit),
            _money(entry.profit_margin),
            entry.invoices_created,
        ]
        for entry in series
    ]
    return pd.DataFrame(rows, columns=MONTHLY_COLUMNS)


def category_breakdown_frame(breakdown: Sequence[CategoryTotal]) -> pd.DataFrame:
    """Build the category table with each category's share of the total."""
    if not breakdown:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)

    df = pd.DataFrame(
        [[item.name, _money(item.value)] for item in breakdown],
        columns=CATEGORY_COLUMNS[:2],
    )
    total = df["Amount"].sum()
    df["Share (%)"] = (df["Amount"] / total * 100).round(2) if total else 0.0
    return df


def financial_metrics_frame(metrics: FinancialMetrics) -> pd.DataFrame:
    """Build a two-column Metric/Value table from summary KPIs."""
    rows = [
        ["Total revenue", _money(metrics.total_revenue)],
        ["Total expenses", _money(metrics.total_expenses)],
        ["Profit", _money(metrics.profit)],
        ["Profit margin (%)", _money(metrics.profit_margin)],
        ["Open invoices", metrics.open_invoices_count],
        ["Open invoices amount", _money(metrics.open_invoices_amount)],
        ["Overdue invoices", metrics.overdue_invoices_count],
        ["Overdue invoices amount", _money(metrics.overdue_invoices_amount)],
        ["Quote acceptance rate (%)", _money(metrics.quote_acceptance_rate)],
        ["Average invoice value", _money(metrics.average_invoice_value)],
        ["Average expense value", _money(metrics.average_expense_value)],
    ]
    return pd.DataFrame(rows, columns=METRIC_COLUMNS)


def hours_frame(buckets: Sequence[HoursBucket]) -> pd.DataFrame:
    """Build a table of hour buckets, most hours first."""
    if not buckets:
        return pd.DataFrame(columns=HOURS_COLUMNS)

    df = pd.DataFrame(
        [[b.key, b.name, _money(b.hours), b.entries] for b in buckets],
        columns=HOURS_COLUMNS,
    )
    return df.sort_values("Hours", ascending=False, kind="stable").reset_index(drop=True)


def write_csv(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write a DataFrame as UTF-8 CSV, creating parent directories.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"Wrote {len(df)} rows to {path}")
    return path


def export_filename(export_type: str, file_format: str, day: dt.date) -> str:
    """File name for a backend export, e.g. ``rechnungen_2024-03-01.csv``."""
    return f"{export_type}_{day.isoformat()}.{file_format}"


def save_export(
    content: bytes,
    export_type: str,
    file_format: str,
    output_dir: Union[str, Path],
    day: dt.date,
) -> Path:
    """Store a downloaded export file in ``output_dir``.

    Returns:
        Path of the written file
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(export_type, file_format, day)
    path.write_bytes(content)
    logger.info(f"Saved {len(content)} bytes to {path}")
    return path

