"""Derived status calculations.

Overdue invoices and expired quotes are not stored by the backend; both are
pure functions of (status, relevant date, today) evaluated whenever records
are displayed or aggregated. This module is their single definition.
"""

import datetime as dt
from decimal import Decimal
from typing import Collection, Optional

from finance_client.models.status import (
    SETTLED_INVOICE_STATUSES,
    InvoiceStatus,
    QuoteStatus,
)


def derive_status(
    status: str,
    relevant_date: Optional[dt.date],
    today: dt.date,
    eligible: Collection[str],
    derived: str,
    exclude: bool = False,
) -> str:
    """Return ``derived`` if ``status`` qualifies and ``relevant_date`` has passed.

    Args:
        status: Stored status
        relevant_date: Due date or validity end date (None never derives)
        today: Current calendar date
        eligible: Statuses the derivation applies to
        derived: Status to return when the date has passed
        exclude: Treat ``eligible`` as the statuses that are NOT derived

    Returns:
        The derived status, or the stored status unchanged

    Example:
        >>> derive_status("versendet", dt.date(2024, 1, 31), dt.date(2024, 2, 1),
        ...               {"versendet"}, "abgelaufen")
        'abgelaufen'
    """
    if relevant_date is None:
        return status

    applies = (status not in eligible) if exclude else (status in eligible)
    if applies and today > relevant_date:
        return derived
    return status


def derive_invoice_status(
    status: str, due_date: Optional[dt.date], today: dt.date
) -> str:
    """Mark unsettled invoices past their due date as overdue.

    Example:
        >>> derive_invoice_status("versendet", dt.date(2024, 3, 1), dt.date(2024, 3, 2))
        'ueberfaellig'
        >>> derive_invoice_status("bezahlt", dt.date(2024, 3, 1), dt.date(2024, 3, 2))
        'bezahlt'
    """
    return derive_status(
        status,
        due_date,
        today,
        eligible=SETTLED_INVOICE_STATUSES,
        derived=InvoiceStatus.OVERDUE.value,
        exclude=True,
    )


def derive_quote_status(
    status: str, valid_until: Optional[dt.date], today: dt.date
) -> str:
    """Mark sent quotes past their validity end date as expired."""
    return derive_status(
        status,
        valid_until,
        today,
        eligible={QuoteStatus.SENT.value},
        derived=QuoteStatus.EXPIRED.value,
    )


def is_invoice_open(status: str) -> bool:
    """An invoice is open while it is neither paid nor cancelled."""
    return status not in SETTLED_INVOICE_STATUSES


def resolve_payment_status(total_amount: Decimal, paid_amount: Decimal) -> str:
    """Status after recording payments: paid once the total is covered.

    Example:
        >>> resolve_payment_status(Decimal("100"), Decimal("40"))
        'teilbezahlt'
        >>> resolve_payment_status(Decimal("100"), Decimal("100"))
        'bezahlt'
    """
    if paid_amount >= total_amount:
        return InvoiceStatus.PAID.value
    return InvoiceStatus.PARTIALLY_PAID.value
