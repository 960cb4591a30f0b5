"""Invoice and quote listing commands."""

import datetime as dt
from typing import Optional

import click

from finance_client.calculators.status_calculator import (
    derive_invoice_status,
    derive_quote_status,
)
from finance_client.cli.error_handlers import with_error_handling
from finance_client.cli.utils.context import get_services, is_debug
from finance_client.cli.utils.formatters import (
    format_currency,
    format_date,
    format_info,
    format_success,
    format_table,
)
from finance_client.models.status import InvoiceStatus, QuoteStatus

INVOICE_STATUS_CHOICES = [status.value for status in InvoiceStatus]


@click.command(name="invoices")
@click.option(
    "--status",
    type=click.Choice(INVOICE_STATUS_CHOICES, case_sensitive=False),
    default=None,
    help="Only invoices with this status (ueberfaellig is derived from due dates)",
)
@click.pass_context
def invoices(ctx: click.Context, status: Optional[str]):
    """List invoices with their current status.

    Example:
        finance-cli invoices
        finance-cli invoices --status ueberfaellig
    """
    with with_error_handling(is_debug(ctx)):
        services = get_services(ctx)
        today = dt.date.today()
        status = status.lower() if status else None
        click.echo(format_info("Fetching invoices..."))

        # Overdue is never stored, so it cannot be filtered by the backend
        if status and status != InvoiceStatus.OVERDUE.value:
            records = services.finance.get_invoices(status=status)
        else:
            records = services.finance.get_invoices()

        rows = []
        for invoice in records:
            effective = derive_invoice_status(invoice.status, invoice.due_date, today)
            if status == InvoiceStatus.OVERDUE.value and effective != status:
                continue
            rows.append(
                [
                    invoice.number or invoice.id or "-",
                    invoice.customer_name or invoice.customer_id or "-",
                    format_date(invoice.issue_date),
                    format_date(invoice.due_date),
                    format_currency(invoice.total_amount),
                    effective,
                ]
            )

        if not rows:
            click.echo()
            click.echo(format_info("No invoices found."))
            return

        click.echo()
        click.echo(
            format_table(["Number", "Customer", "Issued", "Due", "Total", "Status"], rows)
        )
        click.echo()
        click.echo(format_success(f"Found {len(rows)} invoice(s)"))


@click.command(name="quotes")
@click.pass_context
def quotes(ctx: click.Context):
    """List quotes with their current status.

    Example:
        finance-cli quotes
    """
    with with_error_handling(is_debug(ctx)):
        services = get_services(ctx)
        today = dt.date.today()
        click.echo(format_info("Fetching quotes..."))

        records = services.finance.get_quotes()
        if not records:
            click.echo()
            click.echo(format_info("No quotes found."))
            return

        rows = [
            [
                quote.number or quote.id or "-",
                format_date(quote.issue_date),
                format_date(quote.valid_until),
                format_currency(quote.total_amount),
                derive_quote_status(quote.status, quote.valid_until, today),
            ]
            for quote in records
        ]
        accepted = sum(1 for quote in records if quote.status == QuoteStatus.ACCEPTED)

        click.echo()
        click.echo(format_table(["Number", "Issued", "Valid until", "Total", "Status"], rows))
        click.echo()
        click.echo(format_success(f"Found {len(records)} quote(s), {accepted} accepted"))
