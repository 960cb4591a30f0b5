"""Writers module for analytics tables, CSV reports and export files."""

from finance_client.writers.report_writer import (
    category_breakdown_frame,
    export_filename,
    financial_metrics_frame,
    hours_frame,
    monthly_analytics_frame,
    save_export,
    write_csv,
)

__all__ = [
    "category_breakdown_frame",
    "export_filename",
    "financial_metrics_frame",
    "hours_frame",
    "monthly_analytics_frame",
    "save_export",
    "write_csv",
]
