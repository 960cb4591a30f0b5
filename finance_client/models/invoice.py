"""Invoice data models.

This module defines the Invoice (Rechnung) model and the Payment model for
the partial payments recorded against an invoice.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field, field_validator

from finance_client.models.base import (
    BaseDataModel,
    normalize_status,
    reference_id,
    to_decimal,
    to_optional_date,
)
from finance_client.models.status import SETTLED_INVOICE_STATUSES, InvoiceStatus


class Payment(BaseDataModel):
    """A (partial) payment recorded against an invoice.

    Attributes:
        amount: Paid amount
        date: Payment date
        method: Payment method (e.g. "Überweisung")
        reference: Bank reference
        notes: Free-text notes
    """

    amount: Decimal = Field(Decimal("0"), alias="betrag")
    date: Optional[dt.date] = Field(None, alias="datum")
    method: Optional[str] = Field(None, alias="zahlungsart")
    reference: Optional[str] = Field(None, alias="referenz")
    notes: Optional[str] = Field(None, alias="notizen")

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def convert_date(cls, v: Any) -> Optional[dt.date]:
        return to_optional_date(v)


class Invoice(BaseDataModel):
    """Represents an invoice as transferred by the backend.

    Only ``status`` and ``total_amount`` matter for most aggregates; every
    other field is optional because list endpoints return partial records.

    Attributes:
        id: Backend identifier (``_id``)
        number: Invoice number, e.g. "RE-2024-001"
        customer_id: Customer reference
        customer_name: Denormalized customer name
        issue_date: Date the invoice was issued
        due_date: Payment due date
        total_amount: Gross total
        net_amount: Net total
        tax_amount: VAT amount
        status: Stored status (see InvoiceStatus)
        paid_on: Date the invoice was fully paid
        paid_amount: Sum of recorded payments
        payments: Recorded partial payments

    Example:
        >>> invoice = Invoice.model_validate(
        ...     {"_id": "1", "status": "versendet", "gesamtbetrag": 500,
        ...      "faelligkeitsdatum": "2024-12-31"}
        ... )
        >>> invoice.total_amount
        Decimal('500')
    """

    id: Optional[str] = Field(None, alias="_id")
    number: Optional[str] = Field(None, alias="rechnungNummer")
    customer_id: Optional[str] = Field(None, alias="kundeId")
    customer_name: Optional[str] = Field(None, alias="kundeName")
    issue_date: Optional[dt.date] = Field(None, alias="rechnungsdatum")
    due_date: Optional[dt.date] = Field(None, alias="faelligkeitsdatum")
    total_amount: Decimal = Field(Decimal("0"), alias="gesamtbetrag")
    net_amount: Optional[Decimal] = Field(None, alias="nettobetrag")
    tax_amount: Optional[Decimal] = Field(None, alias="mwstBetrag")
    status: str = Field(InvoiceStatus.DRAFT.value, description="Stored status")
    paid_on: Optional[dt.date] = Field(None, alias="bezahltAm")
    paid_amount: Decimal = Field(Decimal("0"), alias="bezahltBetrag")
    payments: List[Payment] = Field(default_factory=list, alias="zahlungen")

    @field_validator("id", "customer_id", mode="before")
    @classmethod
    def convert_reference(cls, v: Any) -> Any:
        """Accept populated references (``{"_id": ..., "name": ...}``)."""
        v = reference_id(v)
        return str(v) if v is not None else None

    @field_validator("total_amount", "paid_amount", mode="before")
    @classmethod
    def convert_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("net_amount", "tax_amount", mode="before")
    @classmethod
    def convert_optional_amount(cls, v: Any) -> Optional[Decimal]:
        if v is None:
            return None
        return to_decimal(v)

    @field_validator("issue_date", "due_date", "paid_on", mode="before")
    @classmethod
    def convert_date(cls, v: Any) -> Optional[dt.date]:
        return to_optional_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def convert_status(cls, v: Any) -> Any:
        if v is None:
            return InvoiceStatus.DRAFT.value
        return normalize_status(v)

    @field_validator("payments", mode="before")
    @classmethod
    def convert_payments(cls, v: Any) -> Any:
        return v or []

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    @property
    def is_open(self) -> bool:
        """Neither paid nor cancelled."""
        return self.status not in SETTLED_INVOICE_STATUSES

    @property
    def remaining_amount(self) -> Decimal:
        """Amount still to be paid (never negative)."""
        return max(self.total_amount - self.paid_amount, Decimal("0"))

