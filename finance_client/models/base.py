"""Base model for all backend records.

This module provides a base Pydantic model with common configuration and
the shared field converters used by every entity: money values become
``Decimal``, ISO date strings become ``dt.date`` and status strings are
normalized.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from finance_client.utils.date_utils import parse_iso_date


class BaseDataModel(BaseModel):
    """Base class for all backend records.

    Records are parsed from the backend's German camelCase wire format via
    field aliases, and can be built from snake_case field names as well.
    Unknown wire fields are ignored because the backend returns more data
    than the client uses.

    Example:
        >>> from pydantic import Field
        >>> class Customer(BaseDataModel):
        ...     customer_id: str = Field(alias="kundeId")
        >>> Customer.model_validate({"kundeId": "k1", "extra": 1}).customer_id
        'k1'
        >>> Customer(customer_id="k1").to_api()
        {'kundeId': 'k1'}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, time
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        # Accept both wire aliases and Python field names
        populate_by_name=True,
        # The backend adds fields freely
        extra="ignore",
        frozen=False,
    )

    def to_api(self) -> Dict[str, Any]:
        """Serialize to the backend's wire format (aliases, JSON types, no None)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def to_decimal(v: Any) -> Decimal:
    """Convert a wire amount to Decimal; missing amounts count as zero.

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if v is None or v == "":
        return Decimal("0")
    if isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert {v!r} to Decimal")
    try:
        return Decimal(str(v))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {v!r} to Decimal: {e}")


def to_optional_date(v: Any) -> Optional[dt.date]:
    """Convert a wire date or timestamp to a calendar date.

    Raises:
        ValueError: If the value is not valid ISO-8601
    """
    try:
        return parse_iso_date(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date {v!r}: {e}")


def normalize_status(v: Any) -> Any:
    """Lower-case and strip status strings (``"Bezahlt "`` -> ``"bezahlt"``)."""
    if isinstance(v, str):
        return v.strip().lower()
    return v


def reference_id(v: Any) -> Any:
    """Extract the ``_id`` of a populated reference, or return the bare id."""
    if isinstance(v, dict):
        return v.get("_id") or v.get("id")
    return v
