"""Quote (Angebot) data model."""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator

from finance_client.models.base import (
    BaseDataModel,
    normalize_status,
    reference_id,
    to_decimal,
    to_optional_date,
)
from finance_client.models.status import QuoteStatus


class Quote(BaseDataModel):
    """Represents a quote as transferred by the backend.

    Attributes:
        id: Backend identifier (``_id``)
        number: Quote number
        customer_id: Customer reference
        project_id: Project reference
        issue_date: Date the quote was issued
        valid_until: Last day the quote can be accepted
        total_amount: Gross total
        discount_percent: Discount in percent (0-100)
        status: Stored status (see QuoteStatus)
    """

    id: Optional[str] = Field(None, alias="_id")
    number: Optional[str] = Field(None, alias="angebotsnummer")
    customer_id: Optional[str] = Field(None, alias="kundeId")
    project_id: Optional[str] = Field(None, alias="projektId")
    issue_date: Optional[dt.date] = Field(None, alias="angebotsdatum")
    valid_until: Optional[dt.date] = Field(None, alias="gueltigBis")
    total_amount: Decimal = Field(Decimal("0"), alias="gesamtbetrag")
    discount_percent: Optional[Decimal] = Field(None, ge=0, le=100, alias="rabatt")
    status: str = Field(QuoteStatus.DRAFT.value)

    @field_validator("id", "customer_id", "project_id", mode="before")
    @classmethod
    def convert_reference(cls, v: Any) -> Any:
        v = reference_id(v)
        return str(v) if v is not None else None

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("discount_percent", mode="before")
    @classmethod
    def convert_discount(cls, v: Any) -> Optional[Decimal]:
        if v is None:
            return None
        return to_decimal(v)

    @field_validator("issue_date", "valid_until", mode="before")
    @classmethod
    def convert_date(cls, v: Any) -> Optional[dt.date]:
        return to_optional_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def convert_status(cls, v: Any) -> Any:
        if v is None:
            return QuoteStatus.DRAFT.value
        return normalize_status(v)

    @property
    def is_accepted(self) -> bool:
        return self.status == QuoteStatus.ACCEPTED

    def days_until_expiry(self, today: dt.date) -> Optional[int]:
        """Days left until ``valid_until`` (negative once expired)."""
        if self.valid_until is None:
            return None
        return (self.valid_until - today).days
