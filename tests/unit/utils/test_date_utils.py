"""Tests for date helpers."""

import datetime as dt

import pytest

from finance_client.utils.date_utils import (
    end_of_month,
    month_key,
    month_label,
    parse_iso_date,
    parse_iso_datetime,
    shift_months,
    start_of_month,
    trailing_months,
    year_bounds,
)


class TestParseIso:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-12-31", dt.date(2024, 12, 31)),
            ("2024-01-15T00:00:00Z", dt.date(2024, 1, 15)),
            ("2024-01-15T23:30:00+02:00", dt.date(2024, 1, 15)),
            (dt.datetime(2024, 3, 1, 12, 0), dt.date(2024, 3, 1)),
            (dt.date(2024, 3, 1), dt.date(2024, 3, 1)),
        ],
    )
    def test_parse_iso_date(self, value, expected):
        assert parse_iso_date(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_values_are_none(self, value):
        assert parse_iso_date(value) is None

    def test_utc_suffix_is_timezone_aware(self):
        parsed = parse_iso_datetime("2024-01-15T10:30:00Z")

        assert parsed.tzinfo == dt.timezone.utc
        assert parsed.hour == 10

    def test_invalid_value_raises(self):
        with pytest.raises(ValueError):
            parse_iso_date("31.12.2024")


class TestMonths:
    def test_month_key_and_label(self):
        day = dt.date(2024, 3, 17)

        assert month_key(day) == "2024-03"
        assert month_label(day) == "Mar 2024"

    @pytest.mark.parametrize(
        "day,offset,expected",
        [
            (dt.date(2024, 1, 31), -1, dt.date(2023, 12, 1)),
            (dt.date(2024, 12, 5), 1, dt.date(2025, 1, 1)),
            (dt.date(2024, 6, 15), -11, dt.date(2023, 7, 1)),
            (dt.date(2024, 6, 15), 0, dt.date(2024, 6, 1)),
        ],
    )
    def test_shift_months(self, day, offset, expected):
        assert shift_months(day, offset) == expected

    def test_start_and_end_of_month(self):
        assert start_of_month(dt.date(2024, 2, 10)) == dt.date(2024, 2, 1)
        assert end_of_month(dt.date(2024, 2, 10)) == dt.date(2024, 2, 29)
        assert end_of_month(dt.date(2023, 12, 1)) == dt.date(2023, 12, 31)

    def test_trailing_months_oldest_first(self):
        months = trailing_months(3, dt.date(2024, 2, 10))

        assert months == [
            dt.date(2023, 12, 1),
            dt.date(2024, 1, 1),
            dt.date(2024, 2, 1),
        ]

    def test_trailing_months_twelve(self):
        months = trailing_months(12, dt.date(2024, 6, 30))

        assert len(months) == 12
        assert months[0] == dt.date(2023, 7, 1)
        assert months[-1] == dt.date(2024, 6, 1)

    def test_year_bounds(self):
        assert year_bounds(2024) == (dt.date(2024, 1, 1), dt.date(2024, 12, 31))
