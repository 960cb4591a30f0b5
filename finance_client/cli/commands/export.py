"""Export download command."""

import datetime as dt
from typing import Optional

import click

from finance_client.cli.error_handlers import with_error_handling
from finance_client.cli.utils.context import get_services, is_debug, parse_date_range
from finance_client.cli.utils.formatters import format_info, format_success
from finance_client.writers.report_writer import save_export


@click.command(name="export")
@click.argument("export_type")
@click.option(
    "--format",
    "file_format",
    type=click.Choice(["csv", "xlsx", "pdf"]),
    default="csv",
    show_default=True,
    help="File format produced by the backend",
)
@click.option("--start-date", default=None, help="Start date (YYYY-MM-DD or YYYY-MM)")
@click.option("--end-date", default=None, help="End date (YYYY-MM-DD or YYYY-MM)")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the file (default: EXPORT_DIR)",
)
@click.pass_context
def export(
    ctx: click.Context,
    export_type: str,
    file_format: str,
    start_date: Optional[str],
    end_date: Optional[str],
    output_dir: Optional[str],
):
    """Download an export file (e.g. rechnungen, angebote, projektkosten).

    Example:
        finance-cli export rechnungen --format pdf --start-date 2024-01
    """
    with with_error_handling(is_debug(ctx)):
        start, end = parse_date_range(start_date, end_date)
        services = get_services(ctx)
        click.echo(format_info(f"Exporting {export_type} as {file_format}..."))

        content = services.finance.export_data(export_type, file_format, start, end)
        path = save_export(
            content,
            export_type,
            file_format,
            output_dir or services.config.export_dir,
            dt.date.today(),
        )
        click.echo(format_success(f"Saved {path}"))
