"""Customer analytics command."""

from typing import Optional

import click

from finance_client.cli.error_handlers import with_error_handling
from finance_client.cli.utils.context import get_services, is_debug
from finance_client.cli.utils.formatters import (
    format_currency,
    format_info,
    format_percent,
    format_table,
)


@click.command(name="customer")
@click.argument("customer_id")
@click.option("--year", type=int, default=None, help="Calendar year (default: current year)")
@click.pass_context
def customer(ctx: click.Context, customer_id: str, year: Optional[int]):
    """Show revenue and quote conversion for one customer.

    Example:
        finance-cli customer 64f1c2e8a1b2 --year 2024
    """
    with with_error_handling(is_debug(ctx)):
        services = get_services(ctx)
        click.echo(format_info(f"Fetching analytics for customer {customer_id}..."))

        analytics = services.finance.get_customer_analytics(customer_id, year)
        rows = [
            ["Revenue", format_currency(analytics.total_revenue)],
            ["Open amount", format_currency(analytics.open_amount)],
            ["Invoices", analytics.invoice_count],
            ["Quotes", analytics.quote_count],
            ["Quote conversion rate", format_percent(analytics.quote_conversion_rate)],
            ["Average invoice value", format_currency(analytics.average_invoice_value)],
        ]
        click.echo()
        click.echo(format_table(["Metric", "Value"], rows))
