"""
Backend services for the finance client.

This package provides:
- ResponseCache: TTL cache for backend reads, cleared on every write
- ApiClient: HTTP client with envelope unwrapping and error translation
- FinanceService: invoices, quotes, expenses and analytics
- TimeTrackingService: time entries and time statistics
"""

from .api_client import ApiClient
from .error_classifier import (
    ClientError,
    ConnectivityError,
    ErrorClassifier,
    FinanceAPIError,
    ServerError,
)
from .finance_service import FinanceService
from .response_cache import ResponseCache
from .time_tracking_service import TimeTrackingService

__all__ = [
    "ApiClient",
    "ClientError",
    "ConnectivityError",
    "ErrorClassifier",
    "FinanceAPIError",
    "FinanceService",
    "ResponseCache",
    "ServerError",
    "TimeTrackingService",
]
