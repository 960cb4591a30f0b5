"""Unit tests for CLI service construction and argument parsing."""

import datetime as dt
from unittest.mock import MagicMock, patch

import click
import pytest

from finance_client.cli.error_handlers import InvalidInputError
from finance_client.cli.utils.context import (
    build_services,
    get_services,
    is_debug,
    parse_date_input,
    parse_date_range,
)


class TestParseDateInput:
    def test_full_date(self):
        assert parse_date_input("2024-03-15") == dt.date(2024, 3, 15)

    def test_month_start(self):
        assert parse_date_input("2024-02") == dt.date(2024, 2, 1)

    def test_month_end(self):
        assert parse_date_input("2024-02", end_of_period=True) == dt.date(2024, 2, 29)

    def test_full_date_ignores_end_of_period(self):
        assert parse_date_input("2024-02-10", end_of_period=True) == dt.date(2024, 2, 10)

    def test_none(self):
        assert parse_date_input(None) is None

    @pytest.mark.parametrize("value", ["15.03.2024", "2024/03/15", "2024-13", "März"])
    def test_invalid(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_date_input(value)

        assert exc_info.value.recovery_hint == "Expected YYYY-MM-DD or YYYY-MM"


class TestParseDateRange:
    def test_month_range(self):
        assert parse_date_range("2024-01", "2024-03") == (
            dt.date(2024, 1, 1),
            dt.date(2024, 3, 31),
        )

    def test_open_range(self):
        assert parse_date_range(None, "2024-03-10") == (None, dt.date(2024, 3, 10))

    def test_end_before_start(self):
        with pytest.raises(InvalidInputError, match="before start date"):
            parse_date_range("2024-03-10", "2024-03-01")


class TestServices:
    def test_build_services_share_client(self, test_config):
        services = build_services(test_config)

        assert services.finance.client is services.client
        assert services.time_tracking.client is services.client
        assert services.finance.max_workers == 4
        assert services.client.cache.ttl_seconds == 300.0
        services.client.close()

    def test_get_services_created_once_and_closed(self):
        services = MagicMock()

        @click.command()
        @click.pass_context
        def probe(ctx):
            assert get_services(ctx) is get_services(ctx)

        with patch(
            "finance_client.cli.utils.context.build_services", return_value=services
        ) as build:
            ctx = click.Context(probe)
            with ctx:
                ctx.invoke(probe)

        build.assert_called_once_with()
        services.client.close.assert_called_once()

    def test_is_debug(self):
        ctx = click.Context(click.Command("x"), obj={"debug": True})
        assert is_debug(ctx) is True

        assert is_debug(click.Context(click.Command("y"))) is False
