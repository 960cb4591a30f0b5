"""Tests for the base model and shared field converters."""

import datetime as dt
import doctest
from decimal import Decimal
from typing import Optional

import pytest
from pydantic import Field, ValidationError, field_validator

from finance_client.models.base import (
    BaseDataModel,
    normalize_status,
    reference_id,
    to_decimal,
    to_optional_date,
)


class Customer(BaseDataModel):
    customer_id: str = Field(alias="kundeId")
    balance: Decimal = Field(Decimal("0"), alias="saldo")
    since: Optional[dt.date] = Field(None, alias="kundeSeit")

    @field_validator("balance", mode="before")
    @classmethod
    def convert_balance(cls, v):
        return to_decimal(v)

    @field_validator("since", mode="before")
    @classmethod
    def convert_since(cls, v):
        return to_optional_date(v)


class TestBaseDataModel:
    def test_parses_wire_aliases_and_ignores_unknown_fields(self):
        customer = Customer.model_validate(
            {"kundeId": "k1", "saldo": "12.5", "unbekannt": True}
        )

        assert customer.customer_id == "k1"
        assert customer.balance == Decimal("12.5")
        assert not hasattr(customer, "unbekannt")

    def test_accepts_python_field_names(self):
        customer = Customer(customer_id="k1")

        assert customer.customer_id == "k1"

    def test_to_api_uses_aliases_and_drops_none(self):
        customer = Customer(customer_id="k1", balance=Decimal("10.00"))

        assert customer.to_api() == {"kundeId": "k1", "saldo": "10.00"}

    def test_to_api_serializes_dates_as_iso(self):
        customer = Customer(customer_id="k1", since=dt.date(2024, 1, 15))

        assert customer.to_api()["kundeSeit"] == "2024-01-15"

    def test_validate_assignment(self):
        customer = Customer(customer_id="k1")

        with pytest.raises(ValidationError):
            customer.balance = "not a number"


class TestConverters:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            (12, Decimal("12")),
            (12.5, Decimal("12.5")),
            ("99.99", Decimal("99.99")),
            (Decimal("1.10"), Decimal("1.10")),
        ],
    )
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", ["abc", True, [1]])
    def test_to_decimal_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_to_optional_date(self):
        assert to_optional_date("2024-01-15T00:00:00.000Z") == dt.date(2024, 1, 15)
        assert to_optional_date(None) is None

    def test_to_optional_date_rejects_invalid(self):
        with pytest.raises(ValueError, match="Invalid date"):
            to_optional_date("gestern")

    @pytest.mark.parametrize(
        "value,expected",
        [("Bezahlt ", "bezahlt"), ("OFFEN", "offen"), (None, None)],
    )
    def test_normalize_status(self, value, expected):
        assert normalize_status(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ({"_id": "abc", "name": "Müller"}, "abc"),
            ({"id": "xyz"}, "xyz"),
            ("plain", "plain"),
            (None, None),
        ],
    )
    def test_reference_id(self, value, expected):
        assert reference_id(value) == expected


def test_base_model_docstring_example_runs():
    finder = doctest.DocTestFinder(recurse=False)
    runner = doctest.DocTestRunner()
    for test in finder.find(BaseDataModel, globs={"BaseDataModel": BaseDataModel}):
        runner.run(test)

    results = runner.summarize(verbose=False)
    assert results.attempted == 4
    assert results.failed == 0
