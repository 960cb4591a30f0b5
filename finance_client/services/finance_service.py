"""
Finance service for invoices, quotes, expenses and dashboard analytics.

Reads go through the ApiClient's response cache and are parsed into models;
mutations clear the cache and return the unwrapped backend payload.
Independent reads of one analytics view are fetched concurrently.
"""

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import ValidationError

from finance_client.aggregators.finance_aggregator import (
    CategoryTotal,
    CustomerAnalytics,
    FinancialSummary,
    MonthlyAnalytics,
    calculate_category_breakdown,
    calculate_customer_analytics,
    calculate_financial_metrics,
    calculate_monthly_analytics,
)
from finance_client.calculators.status_calculator import resolve_payment_status
from finance_client.models.base import BaseDataModel
from finance_client.models.expense import Expense
from finance_client.models.invoice import Invoice, Payment
from finance_client.models.quote import Quote
from finance_client.models.status import InvoiceStatus
from finance_client.services.api_client import ApiClient
from finance_client.services.error_classifier import ClientError
from finance_client.services.response_cache import ResponseCache
from finance_client.utils.date_utils import end_of_month, shift_months, year_bounds
from finance_client.utils.logging_utils import (
    LogContext,
    get_log_context,
    log_function_call,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseDataModel)

INVOICES = "/finanzen/rechnungen"
QUOTES = "/finanzen/angebote"
EXPENSES = "/finanzen/projektkosten"
OVERVIEW = "/finanzen/uebersicht"
SEARCH = "/finanzen/search"
EXPORT = "/finanzen/export"


def to_iso(value: Any) -> Any:
    """Format dates as ISO-8601 strings for query parameters and bodies."""
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value


def _iso_params(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: to_iso(value) for key, value in params.items()}


def parse_record(model: Type[ModelT], data: Any) -> ModelT:
    """
    Parse one backend record into a model.

    Raises:
        ClientError: If the record does not match the model (cause chained)
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(
            f"Malformed {model.__name__} record: {e.error_count()} validation error(s)"
        )
        raise ClientError() from e


def parse_records(model: Type[ModelT], data: Any) -> List[ModelT]:
    """Parse a list payload into models (None yields an empty list)."""
    if data is None:
        return []
    if isinstance(data, dict):
        data = [data]
    return [parse_record(model, item) for item in data]


def run_concurrently(
    tasks: Dict[str, Callable[[], Any]], max_workers: int = 4
) -> Dict[str, Any]:
    """
    Run independent fetches in parallel and wait for all of them.

    The caller's log context is carried into the worker threads. If any task
    fails, its exception is raised once all tasks have finished.

    Args:
        tasks: Name -> zero-argument callable
        max_workers: Thread pool size

    Returns:
        Name -> result
    """
    context = get_log_context()

    def _in_context(task: Callable[[], Any]) -> Any:
        with LogContext(**context):
            return task()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {name: executor.submit(_in_context, task) for name, task in tasks.items()}

    return {name: future.result() for name, future in futures.items()}


class FinanceService:
    """
    Client-side finance operations on top of the backend REST API.

    Example:
        >>> service = FinanceService.from_config(get_config())
        >>> summary = service.get_financial_summary(2024)
        >>> summary.metrics.profit
        Decimal('500')
    """

    def __init__(
        self,
        client: ApiClient,
        max_workers: int = 4,
        today: Optional[Callable[[], dt.date]] = None,
    ):
        """
        Initialize the finance service.

        Args:
            client: Backend client (owns the response cache)
            max_workers: Concurrent requests per analytics view
            today: Current-date provider, defaults to ``dt.date.today``
        """
        self.client = client
        self.max_workers = max_workers
        self._today = today or dt.date.today

    @classmethod
    def from_config(
        cls, config: Any, cache: Optional[ResponseCache] = None
    ) -> "FinanceService":
        return cls(
            ApiClient.from_config(config, cache=cache),
            max_workers=config.max_concurrent_requests,
        )

    def _fetch(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(endpoint, _iso_params(params or {}))

    def _fetch_all(self, tasks: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        return run_concurrently(tasks, max_workers=self.max_workers)

    # ------------------------------------------------------------------
    # Overview and summary
    # ------------------------------------------------------------------

    def get_financial_overview(
        self, start_date: Optional[dt.date] = None, end_date: Optional[dt.date] = None
    ) -> Any:
        """Backend-computed overview for a date range (raw payload)."""
        return self._fetch(OVERVIEW, {"startDate": start_date, "endDate": end_date})

    @log_function_call(include_args=True)
    def get_financial_summary(self, year: Optional[int] = None) -> FinancialSummary:
        """
        Overview plus client-side metrics for a calendar year.

        Args:
            year: Calendar year (defaults to the current year)

        Returns:
            FinancialSummary with overview, metrics and the source records

        Raises:
            FinanceAPIError: If any of the four fetches fails
        """
        today = self._today()
        year = year or today.year
        start, end = year_bounds(year)
        period = {"startDate": start, "endDate": end}

        results = self._fetch_all(
            {
                "overview": lambda: self.get_financial_overview(start, end),
                "invoices": lambda: self.get_invoices(**period),
                "quotes": lambda: self.get_quotes(**period),
                "expenses": lambda: self.get_expenses(**period),
            }
        )

        metrics = calculate_financial_metrics(
            results["invoices"], results["quotes"], results["expenses"], today=today
        )
        return FinancialSummary(
            year=year,
            overview=results["overview"],
            metrics=metrics,
            invoices=results["invoices"],
            quotes=results["quotes"],
            expenses=results["expenses"],
        )

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def get_invoices(self, **params: Any) -> List[Invoice]:
        """List invoices, filtered by backend query parameters."""
        return parse_records(Invoice, self._fetch(INVOICES, params))

    def get_invoice(self, invoice_id: str) -> Invoice:
        return parse_record(Invoice, self._fetch(f"{INVOICES}/{invoice_id}"))

    def create_invoice(self, data: Dict[str, Any]) -> Any:
        return self.client.post(INVOICES, data)

    def update_invoice(self, invoice_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(f"{INVOICES}/{invoice_id}", data)

    def delete_invoice(self, invoice_id: str) -> bool:
        self.client.delete(f"{INVOICES}/{invoice_id}")
        return True

    def update_invoice_status(self, invoice_id: str, status: str) -> Any:
        return self.update_invoice(invoice_id, {"status": status})

    def mark_invoice_as_paid(
        self, invoice_id: str, payment_date: Optional[dt.datetime] = None
    ) -> Any:
        """Set an invoice to paid, dated ``payment_date`` (defaults to now)."""
        paid_at = payment_date or dt.datetime.now(dt.timezone.utc)
        return self.update_invoice(
            invoice_id,
            {"status": InvoiceStatus.PAID.value, "bezahltAm": to_iso(paid_at)},
        )

    def record_payment(
        self,
        invoice_id: str,
        amount: Decimal,
        payment_date: Optional[dt.date] = None,
        method: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Any:
        """
        Record a (partial) payment against an invoice.

        The payment is appended to the invoice's payment list and added to
        its paid amount; the invoice becomes paid once the paid amount covers
        its total, partially paid otherwise.

        Args:
            invoice_id: Invoice to pay
            amount: Paid amount (must be positive)
            payment_date: Payment date (defaults to today)
            method: Payment method
            reference: Bank reference
            notes: Free-text notes

        Returns:
            Unwrapped backend payload of the update

        Raises:
            ValueError: If amount is not positive
        """
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValueError(f"Payment amount must be positive, got {amount}")

        invoice = self.get_invoice(invoice_id)
        payment = Payment(
            amount=amount,
            date=payment_date or self._today(),
            method=method,
            reference=reference,
            notes=notes,
        )
        payments = [*invoice.payments, payment]
        paid_amount = invoice.paid_amount + amount
        status = resolve_payment_status(invoice.total_amount, paid_amount)

        body: Dict[str, Any] = {
            "zahlungen": [p.to_api() for p in payments],
            "bezahltBetrag": str(paid_amount),
            "status": status,
        }
        if status == InvoiceStatus.PAID.value:
            body["bezahltAm"] = to_iso(payment.date)

        logger.info(
            f"Recording payment of {amount} on invoice {invoice_id} "
            f"({paid_amount}/{invoice.total_amount}, {status})"
        )
        return self.update_invoice(invoice_id, body)

    def bulk_update_invoice_status(self, invoice_ids: Iterable[str], status: str) -> Any:
        return self.client.put(
            f"{INVOICES}/bulk-status",
            {"invoiceIds": list(invoice_ids), "status": status},
        )

    def bulk_delete_invoices(self, invoice_ids: Iterable[str]) -> Any:
        return self.client.delete(f"{INVOICES}/bulk", {"invoiceIds": list(invoice_ids)})

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def get_quotes(self, **params: Any) -> List[Quote]:
        return parse_records(Quote, self._fetch(QUOTES, params))

    def get_quote(self, quote_id: str) -> Quote:
        return parse_record(Quote, self._fetch(f"{QUOTES}/{quote_id}"))

    def create_quote(self, data: Dict[str, Any]) -> Any:
        return self.client.post(QUOTES, data)

    def update_quote(self, quote_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(f"{QUOTES}/{quote_id}", data)

    def delete_quote(self, quote_id: str) -> bool:
        self.client.delete(f"{QUOTES}/{quote_id}")
        return True

    def convert_quote_to_invoice(self, quote_id: str) -> Any:
        """Let the backend create an invoice from an accepted quote."""
        return self.client.post(f"{QUOTES}/{quote_id}/convert-to-invoice")

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def get_expenses(self, **params: Any) -> List[Expense]:
        return parse_records(Expense, self._fetch(EXPENSES, params))

    def get_expense(self, expense_id: str) -> Expense:
        return parse_record(Expense, self._fetch(f"{EXPENSES}/{expense_id}"))

    def create_expense(self, data: Dict[str, Any]) -> Any:
        return self.client.post(EXPENSES, data)

    def update_expense(self, expense_id: str, data: Dict[str, Any]) -> Any:
        return self.client.put(f"{EXPENSES}/{expense_id}", data)

    def delete_expense(self, expense_id: str) -> bool:
        self.client.delete(f"{EXPENSES}/{expense_id}")
        return True

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    @log_function_call
    def get_monthly_analytics(self, months: int = 12) -> List[MonthlyAnalytics]:
        """
        Revenue, expenses and profit for the trailing ``months`` months.

        Raises:
            ValueError: If months is less than 1
            FinanceAPIError: If a fetch fails
        """
        if months < 1:
            raise ValueError(f"months must be at least 1, got {months}")

        today = self._today()
        start = shift_months(today, -(months - 1))
        end = end_of_month(today)
        period = {"startDate": start, "endDate": end}

        results = self._fetch_all(
            {
                "invoices": lambda: self.get_invoices(**period),
                "expenses": lambda: self.get_expenses(**period),
            }
        )
        return calculate_monthly_analytics(
            results["invoices"], results["expenses"], months=months, today=today
        )

    @log_function_call
    def get_category_breakdown(
        self, start_date: Optional[dt.date] = None, end_date: Optional[dt.date] = None
    ) -> List[CategoryTotal]:
        """Expense totals per category, largest first."""
        expenses = self.get_expenses(startDate=start_date, endDate=end_date)
        return calculate_category_breakdown(expenses)

    @log_function_call(include_args=True)
    def get_customer_analytics(
        self, customer_id: str, year: Optional[int] = None
    ) -> CustomerAnalytics:
        """Revenue, open amount and quote conversion of one customer in a year."""
        year = year or self._today().year
        start, end = year_bounds(year)
        params = {"startDate": start, "endDate": end, "kundeId": customer_id}

        results = self._fetch_all(
            {
                "invoices": lambda: self.get_invoices(**params),
                "quotes": lambda: self.get_quotes(**params),
            }
        )
        return calculate_customer_analytics(
            results["invoices"], results["quotes"], customer_id=customer_id
        )

    # ------------------------------------------------------------------
    # Search and export
    # ------------------------------------------------------------------

    def search_financial_documents(self, query: str, doc_type: str = "all") -> Any:
        """Full-text search over invoices, quotes and expenses (never cached)."""
        return self.client.get(SEARCH, {"q": query, "type": doc_type}, use_cache=False)

    def export_data(
        self,
        export_type: str,
        file_format: str = "csv",
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> bytes:
        """
        Download an export file produced by the backend.

        Args:
            export_type: What to export, e.g. "rechnungen"
            file_format: File format understood by the backend ("csv", "pdf", ...)
            start_date: Optional start of the period
            end_date: Optional end of the period

        Returns:
            Raw file content
        """
        params = _iso_params(
            {"format": file_format, "startDate": start_date, "endDate": end_date}
        )
        return self.client.get_binary(f"{EXPORT}/{export_type}", params)
