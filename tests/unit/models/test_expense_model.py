"""Tests for the Expense model."""

import datetime as dt
from decimal import Decimal

import pytest

from finance_client.models import Expense, ExpenseCategory, ExpenseStatus


class TestExpense:
    def test_parse_wire_record(self):
        expense = Expense.model_validate(
            {
                "_id": "e1",
                "beschreibung": "Umzugskartons",
                "lieferant": "Karton AG",
                "kategorie": " Material ",
                "betrag": "199.90",
                "datum": "2024-02-03T00:00:00.000Z",
                "umzugId": {"_id": "u1"},
                "status": "Genehmigt",
            }
        )

        assert expense.description == "Umzugskartons"
        assert expense.category == "Material"
        assert expense.amount == Decimal("199.90")
        assert expense.date == dt.date(2024, 2, 3)
        assert expense.project_id == "u1"
        assert expense.status == ExpenseStatus.APPROVED

    @pytest.mark.parametrize("category", [None, "", "   "])
    def test_empty_category_groups_as_other(self, category):
        expense = Expense.model_validate({"kategorie": category, "betrag": 10})

        assert expense.category is None
        assert expense.category_name == ExpenseCategory.OTHER.value

    def test_rejection_reason_kept_for_rejected_expense(self):
        expense = Expense.model_validate(
            {"status": "abgelehnt", "ablehnungsgrund": "Beleg fehlt"}
        )

        assert expense.rejection_reason == "Beleg fehlt"

    def test_stale_rejection_reason_dropped(self):
        expense = Expense.model_validate(
            {"status": "eingereicht", "ablehnungsgrund": "Beleg fehlt"}
        )

        assert expense.rejection_reason is None

    def test_to_api_omits_missing_fields(self):
        expense = Expense(category="Personal", amount=Decimal("300"))

        assert expense.to_api() == {"kategorie": "Personal", "betrag": "300"}
