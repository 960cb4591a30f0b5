"""Data models for the finance client.

This package contains Pydantic models for the backend's business records:
- BaseDataModel: Base class with common configuration
- Invoice / Payment: Invoices and their recorded payments
- Quote: Quotes
- Expense: Project expenses
- TimeEntry: Time-tracking entries
- Status vocabularies: InvoiceStatus, QuoteStatus, ExpenseStatus, ExpenseCategory
"""

from finance_client.models.base import BaseDataModel
from finance_client.models.expense import Expense
from finance_client.models.invoice import Invoice, Payment
from finance_client.models.quote import Quote
from finance_client.models.status import (
    ExpenseCategory,
    ExpenseStatus,
    InvoiceStatus,
    QuoteStatus,
)
from finance_client.models.time_entry import TimeEntry

__all__ = [
    "BaseDataModel",
    "Expense",
    "ExpenseCategory",
    "ExpenseStatus",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "Quote",
    "QuoteStatus",
    "TimeEntry",
]
