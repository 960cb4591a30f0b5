"""Expense (Projektkosten) data model."""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from finance_client.models.base import (
    BaseDataModel,
    normalize_status,
    reference_id,
    to_decimal,
    to_optional_date,
)
from finance_client.models.status import ExpenseCategory, ExpenseStatus


class Expense(BaseDataModel):
    """Represents a project expense as transferred by the backend.

    The category is free text on the wire. Empty categories are kept as
    None here and bucketed as ``ExpenseCategory.OTHER`` by the aggregators.

    Attributes:
        id: Backend identifier (``_id``)
        description: What the money was spent on
        supplier: Supplier name
        category: Expense category (see ExpenseCategory)
        amount: Expense amount
        date: Expense date
        project_id: Project (Umzug) reference
        status: Approval status (see ExpenseStatus)
        rejection_reason: Set only when the expense was rejected
    """

    id: Optional[str] = Field(None, alias="_id")
    description: Optional[str] = Field(None, alias="beschreibung")
    supplier: Optional[str] = Field(None, alias="lieferant")
    category: Optional[str] = Field(None, alias="kategorie")
    amount: Decimal = Field(Decimal("0"), alias="betrag")
    date: Optional[dt.date] = Field(None, alias="datum")
    project_id: Optional[str] = Field(None, alias="umzugId")
    status: Optional[str] = Field(None)
    rejection_reason: Optional[str] = Field(None, alias="ablehnungsgrund")

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def convert_reference(cls, v: Any) -> Any:
        v = reference_id(v)
        return str(v) if v is not None else None

    @field_validator("category", mode="before")
    @classmethod
    def convert_category(cls, v: Any) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def convert_date(cls, v: Any) -> Optional[dt.date]:
        return to_optional_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def convert_status(cls, v: Any) -> Any:
        return normalize_status(v)

    @model_validator(mode="before")
    @classmethod
    def drop_stale_rejection_reason(cls, data: Any) -> Any:
        """Drop a rejection reason on expenses that are not rejected.

        The backend keeps the reason after an expense is resubmitted; it
        only describes the current state while the expense is rejected.
        """
        if not isinstance(data, dict):
            return data
        if normalize_status(data.get("status")) == ExpenseStatus.REJECTED.value:
            return data
        return {
            key: value
            for key, value in data.items()
            if key not in ("ablehnungsgrund", "rejection_reason")
        }

    @property
    def category_name(self) -> str:
        """Category used for grouping, defaulting to ``Sonstige``."""
        return self.category or ExpenseCategory.OTHER.value
