"""Financial aggregations over invoices, quotes and expenses.

This module reduces raw record collections into the derived views shown on
the finance dashboard: monthly revenue/expense series, expense category
totals, summary KPIs and per-customer analytics. All functions are pure;
``today`` can be injected for reproducible results.
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence

from finance_client.calculators.status_calculator import derive_invoice_status
from finance_client.models.expense import Expense
from finance_client.models.invoice import Invoice
from finance_client.models.quote import Quote
from finance_client.models.status import InvoiceStatus
from finance_client.utils.date_utils import month_key, month_label, trailing_months

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _ratio(numerator: Decimal, denominator: Decimal, scale: int = 1) -> Decimal:
    """Divide and round to cents, returning 0 when the denominator is 0."""
    if not denominator:
        return ZERO
    return (Decimal(numerator) / Decimal(denominator) * scale).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


def profit_margin(revenue: Decimal, profit: Decimal) -> Decimal:
    """Profit as a percentage of revenue (0 without revenue)."""
    return _ratio(profit, revenue, 100)


@dataclass
class MonthlyAnalytics:
    """Revenue, expenses and profit for one calendar month.

    Attributes:
        month: Display label, e.g. "Jan 2024"
        month_key: Sortable key, e.g. "2024-01"
        revenue: Totals of invoices paid in the month
        expenses: Amounts of expenses dated in the month
        profit: revenue - expenses
        profit_margin: profit / revenue * 100, 0 without revenue
        invoices_created: Invoices issued in the month
    """

    month: str
    month_key: str
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    profit: Decimal = ZERO
    profit_margin: Decimal = ZERO
    invoices_created: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "monthKey": self.month_key,
            "revenue": self.revenue,
            "expenses": self.expenses,
            "profit": self.profit,
            "profitMargin": self.profit_margin,
            "invoicesCreated": self.invoices_created,
        }


@dataclass
class CategoryTotal:
    """Sum of expense amounts for one category."""

    name: str
    value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class FinancialMetrics:
    """Summary KPIs for a period.

    Attributes:
        total_revenue: Totals of paid invoices
        total_expenses: Amounts of all expenses
        profit: total_revenue - total_expenses
        profit_margin: profit / total_revenue * 100, 0 without revenue
        open_invoices_count: Invoices neither paid nor cancelled
        open_invoices_amount: Totals of open invoices
        overdue_invoices_count: Open invoices past their due date
        overdue_invoices_amount: Totals of overdue invoices
        quote_acceptance_rate: Accepted quotes / all quotes * 100
        average_invoice_value: total_revenue / paid invoice count
        average_expense_value: total_expenses / expense count
    """

    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    profit: Decimal = ZERO
    profit_margin: Decimal = ZERO
    open_invoices_count: int = 0
    open_invoices_amount: Decimal = ZERO
    overdue_invoices_count: int = 0
    overdue_invoices_amount: Decimal = ZERO
    quote_acceptance_rate: Decimal = ZERO
    average_invoice_value: Decimal = ZERO
    average_expense_value: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses,
            "profit": self.profit,
            "profitMargin": self.profit_margin,
            "openInvoicesCount": self.open_invoices_count,
            "openInvoicesAmount": self.open_invoices_amount,
            "overdueInvoicesCount": self.overdue_invoices_count,
            "overdueInvoicesAmount": self.overdue_invoices_amount,
            "quoteAcceptanceRate": self.quote_acceptance_rate,
            "avgInvoiceValue": self.average_invoice_value,
            "avgExpenseValue": self.average_expense_value,
        }


@dataclass
class FinancialSummary:
    """Backend overview for a year combined with client-side metrics."""

    year: int
    overview: Any
    metrics: FinancialMetrics
    invoices: List[Invoice] = field(default_factory=list)
    quotes: List[Quote] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)


@dataclass
class CustomerAnalytics:
    """Revenue and quote conversion for a single customer.

    Attributes:
        customer_id: Customer reference
        total_revenue: Totals of the customer's paid invoices
        open_amount: Totals of the customer's open invoices
        invoice_count: Number of invoices
        quote_count: Number of quotes
        quote_conversion_rate: Accepted quotes / all quotes * 100
        average_invoice_value: total_revenue / invoice_count
    """

    customer_id: Optional[str] = None
    total_revenue: Decimal = ZERO
    open_amount: Decimal = ZERO
    invoice_count: int = 0
    quote_count: int = 0
    quote_conversion_rate: Decimal = ZERO
    average_invoice_value: Decimal = ZERO
    invoices: List[Invoice] = field(default_factory=list)
    quotes: List[Quote] = field(default_factory=list)


def calculate_monthly_analytics(
    invoices: Sequence[Invoice],
    expenses: Sequence[Expense],
    months: int = 12,
    today: Optional[dt.date] = None,
) -> List[MonthlyAnalytics]:
    """Build the revenue/expense series for the trailing calendar months.

    Args:
        invoices: Invoices (only paid ones count towards revenue)
        expenses: Expenses
        months: Number of months, ending with the current month
        today: Reference date (defaults to the current date)

    Returns:
        Exactly ``months`` entries ordered oldest to newest

    Raises:
        ValueError: If months is less than 1

    Example:
        >>> series = calculate_monthly_analytics([], [], months=3,
        ...                                      today=dt.date(2024, 2, 10))
        >>> [entry.month for entry in series]
        ['Dec 2023', 'Jan 2024', 'Feb 2024']
    """
    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")

    today = today or dt.date.today()
    series = {
        month_key(start): MonthlyAnalytics(month=month_label(start), month_key=month_key(start))
        for start in trailing_months(months, today)
    }

    for invoice in invoices:
        if invoice.is_paid and invoice.paid_on is not None:
            entry = series.get(month_key(invoice.paid_on))
            if entry is not None:
                entry.revenue += invoice.total_amount
        if invoice.issue_date is not None:
            entry = series.get(month_key(invoice.issue_date))
            if entry is not None:
                entry.invoices_created += 1

    for expense in expenses:
        if expense.date is None:
            continue
        entry = series.get(month_key(expense.date))
        if entry is not None:
            entry.expenses += expense.amount

    for entry in series.values():
        entry.profit = entry.revenue - entry.expenses
        entry.profit_margin = profit_margin(entry.revenue, entry.profit)

    logger.debug(
        f"Built monthly analytics for {months} months from {len(invoices)} "
        f"invoices and {len(expenses)} expenses"
    )
    return list(series.values())


def calculate_category_breakdown(expenses: Sequence[Expense]) -> List[CategoryTotal]:
    """Sum expense amounts per category, largest first.

    Expenses without a category are counted as ``Sonstige``. Categories with
    equal totals keep the order in which they first appeared.

    Example:
        >>> breakdown = calculate_category_breakdown([
        ...     Expense(kategorie="Material", betrag=200),
        ...     Expense(kategorie="Personal", betrag=800),
        ... ])
        >>> [(c.name, c.value) for c in breakdown]
        [('Personal', Decimal('800')), ('Material', Decimal('200'))]
    """
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[expense.category_name] += expense.amount

    # sorted() is stable, dict preserves first-seen order
    return [
        CategoryTotal(name=name, value=value)
        for name, value in sorted(totals.items(), key=lambda item: item[1], reverse=True)
    ]


def _sum_totals(invoices: Sequence[Invoice]) -> Decimal:
    return sum((invoice.total_amount for invoice in invoices), ZERO)


def calculate_financial_metrics(
    invoices: Sequence[Invoice],
    quotes: Sequence[Quote],
    expenses: Sequence[Expense],
    today: Optional[dt.date] = None,
) -> FinancialMetrics:
    """Compute the summary KPIs.

    Args:
        invoices: Invoices of the period
        quotes: Quotes of the period
        expenses: Expenses of the period
        today: Reference date for overdue detection (defaults to today)

    Returns:
        FinancialMetrics; every ratio is 0 when its denominator is 0
    """
    today = today or dt.date.today()

    paid = [invoice for invoice in invoices if invoice.is_paid]
    open_invoices = [invoice for invoice in invoices if invoice.is_open]
    overdue = [
        invoice
        for invoice in open_invoices
        if derive_invoice_status(invoice.status, invoice.due_date, today)
        == InvoiceStatus.OVERDUE.value
    ]
    accepted = [quote for quote in quotes if quote.is_accepted]

    total_revenue = _sum_totals(paid)
    total_expenses = sum((expense.amount for expense in expenses), ZERO)
    profit = total_revenue - total_expenses

    return FinancialMetrics(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        profit=profit,
        profit_margin=profit_margin(total_revenue, profit),
        open_invoices_count=len(open_invoices),
        open_invoices_amount=_sum_totals(open_invoices),
        overdue_invoices_count=len(overdue),
        overdue_invoices_amount=_sum_totals(overdue),
        quote_acceptance_rate=_ratio(Decimal(len(accepted)), Decimal(len(quotes)), 100),
        average_invoice_value=_ratio(total_revenue, Decimal(len(paid))),
        average_expense_value=_ratio(total_expenses, Decimal(len(expenses))),
    )


def calculate_customer_analytics(
    invoices: Sequence[Invoice],
    quotes: Sequence[Quote],
    customer_id: Optional[str] = None,
) -> CustomerAnalytics:
    """Compute revenue and quote conversion for one customer.

    The average invoice value divides paid revenue by the number of all of
    the customer's invoices, not only the paid ones.
    """
    paid_revenue = _sum_totals([invoice for invoice in invoices if invoice.is_paid])
    accepted = sum(1 for quote in quotes if quote.is_accepted)

    return CustomerAnalytics(
        customer_id=customer_id,
        total_revenue=paid_revenue,
        open_amount=_sum_totals([invoice for invoice in invoices if invoice.is_open]),
        invoice_count=len(invoices),
        quote_count=len(quotes),
        quote_conversion_rate=_ratio(Decimal(accepted), Decimal(len(quotes)), 100),
        average_invoice_value=_ratio(paid_revenue, Decimal(len(invoices))),
        invoices=list(invoices),
        quotes=list(quotes),
    )
