"""Monthly analytics and expense category commands."""

from typing import Optional

import click

from finance_client.cli.error_handlers import InvalidInputError, with_error_handling
from finance_client.cli.utils.context import get_services, is_debug, parse_date_range
from finance_client.cli.utils.formatters import (
    format_currency,
    format_info,
    format_percent,
    format_success,
    format_table,
)
from finance_client.writers.report_writer import (
    category_breakdown_frame,
    monthly_analytics_frame,
    write_csv,
)


@click.command(name="monthly")
@click.option(
    "--months",
    type=int,
    default=12,
    show_default=True,
    help="Number of trailing months, ending with the current month",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write the table to this CSV file",
)
@click.pass_context
def monthly(ctx: click.Context, months: int, output: Optional[str]):
    """Show revenue, expenses and profit per month.

    Example:
        finance-cli monthly --months 6
        finance-cli monthly --output reports/monthly.csv
    """
    with with_error_handling(is_debug(ctx)):
        if months < 1:
            raise InvalidInputError(
                f"--months must be at least 1, got {months}",
                recovery_hint="Use a positive number of months",
            )

        services = get_services(ctx)
        click.echo(format_info(f"Fetching analytics for the last {months} month(s)..."))
        series = services.finance.get_monthly_analytics(months)

        rows = [
            [
                entry.month,
                format_currency(entry.revenue),
                format_currency(entry.expenses),
                format_currency(entry.profit),
                format_percent(entry.profit_margin),
                entry.invoices_created,
            ]
            for entry in series
        ]
        click.echo()
        click.echo(
            format_table(
                ["Month", "Revenue", "Expenses", "Profit", "Margin", "Invoices"], rows
            )
        )

        if output:
            path = write_csv(monthly_analytics_frame(series), output)
            click.echo(format_success(f"Wrote {path}"))


@click.command(name="categories")
@click.option("--start-date", default=None, help="Start date (YYYY-MM-DD or YYYY-MM)")
@click.option("--end-date", default=None, help="End date (YYYY-MM-DD or YYYY-MM)")
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write the table to this CSV file",
)
@click.pass_context
def categories(
    ctx: click.Context,
    start_date: Optional[str],
    end_date: Optional[str],
    output: Optional[str],
):
    """Show expense totals per category, largest first.

    Example:
        finance-cli categories --start-date 2024-01 --end-date 2024-06
    """
    with with_error_handling(is_debug(ctx)):
        start, end = parse_date_range(start_date, end_date)
        services = get_services(ctx)
        click.echo(format_info("Fetching expenses..."))

        breakdown = services.finance.get_category_breakdown(start, end)
        if not breakdown:
            click.echo()
            click.echo(format_info("No expenses found."))
            return

        df = category_breakdown_frame(breakdown)
        rows = [
            [item.name, format_currency(item.value), format_percent(share)]
            for item, share in zip(breakdown, df["Share (%)"])
        ]
        click.echo()
        click.echo(format_table(["Category", "Amount", "Share"], rows))

        if output:
            path = write_csv(df, output)
            click.echo(format_success(f"Wrote {path}"))
