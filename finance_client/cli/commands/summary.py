"""Financial summary command."""

from typing import Optional

import click

from finance_client.cli.error_handlers import with_error_handling
from finance_client.cli.utils.context import get_services, is_debug
from finance_client.cli.utils.formatters import (
    format_currency,
    format_info,
    format_percent,
    format_table,
    format_warning,
)


@click.command(name="summary")
@click.option(
    "--year",
    type=int,
    default=None,
    help="Calendar year (default: current year)",
)
@click.pass_context
def summary(ctx: click.Context, year: Optional[int]):
    """Show revenue, expenses, profit and invoice KPIs for a year.

    Example:
        finance-cli summary
        finance-cli summary --year 2024
    """
    with with_error_handling(is_debug(ctx)):
        services = get_services(ctx)
        click.echo(format_info("Fetching financial summary..."))

        result = services.finance.get_financial_summary(year)
        metrics = result.metrics

        rows = [
            ["Revenue", format_currency(metrics.total_revenue)],
            ["Expenses", format_currency(metrics.total_expenses)],
            ["Profit", format_currency(metrics.profit)],
            ["Profit margin", format_percent(metrics.profit_margin)],
            [
                "Open invoices",
                f"{metrics.open_invoices_count} "
                f"({format_currency(metrics.open_invoices_amount)})",
            ],
            [
                "Overdue invoices",
                f"{metrics.overdue_invoices_count} "
                f"({format_currency(metrics.overdue_invoices_amount)})",
            ],
            ["Quote acceptance rate", format_percent(metrics.quote_acceptance_rate)],
            ["Average invoice value", format_currency(metrics.average_invoice_value)],
            ["Average expense value", format_currency(metrics.average_expense_value)],
        ]

        click.echo()
        click.echo(f"Financial summary {result.year}")
        click.echo(format_table(["Metric", "Value"], rows))

        if metrics.overdue_invoices_count:
            click.echo()
            click.echo(
                format_warning(
                    f"{metrics.overdue_invoices_count} invoice(s) are overdue"
                )
            )
