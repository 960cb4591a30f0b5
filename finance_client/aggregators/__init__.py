"""Aggregators for finance and time-tracking records."""

from finance_client.aggregators.finance_aggregator import (
    CategoryTotal,
    CustomerAnalytics,
    FinancialMetrics,
    FinancialSummary,
    MonthlyAnalytics,
    calculate_category_breakdown,
    calculate_customer_analytics,
    calculate_financial_metrics,
    calculate_monthly_analytics,
)
from finance_client.aggregators.time_entry_aggregator import (
    HoursBucket,
    TimeStatistics,
    calculate_time_statistics,
)

__all__ = [
    "CategoryTotal",
    "CustomerAnalytics",
    "FinancialMetrics",
    "FinancialSummary",
    "HoursBucket",
    "MonthlyAnalytics",
    "TimeStatistics",
    "calculate_category_breakdown",
    "calculate_customer_analytics",
    "calculate_financial_metrics",
    "calculate_monthly_analytics",
    "calculate_time_statistics",
]
