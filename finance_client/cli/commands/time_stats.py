"""Time statistics command."""

from typing import Optional

import click

from finance_client.cli.error_handlers import with_error_handling
from finance_client.cli.utils.context import get_services, is_debug, parse_date_range
from finance_client.cli.utils.formatters import format_info, format_table
from finance_client.writers.report_writer import hours_frame


def _hours_table(title: str, buckets) -> None:
    df = hours_frame(buckets)
    if df.empty:
        return
    click.echo()
    click.echo(title)
    click.echo(
        format_table(
            ["Name", "Hours", "Entries"],
            [
                [row["Name"], f"{row['Hours']:.2f}", row["Entries"]]
                for row in df.to_dict("records")
            ],
        )
    )


@click.command(name="time-stats")
@click.option("--start-date", default=None, help="Start date (YYYY-MM-DD or YYYY-MM)")
@click.option("--end-date", default=None, help="End date (YYYY-MM-DD or YYYY-MM)")
@click.option("--project", "project_id", default=None, help="Only this project")
@click.option("--employee", "employee_id", default=None, help="Only this employee")
@click.pass_context
def time_stats(
    ctx: click.Context,
    start_date: Optional[str],
    end_date: Optional[str],
    project_id: Optional[str],
    employee_id: Optional[str],
):
    """Show worked hours per employee and project.

    Example:
        finance-cli time-stats --start-date 2024-03-01 --end-date 2024-03-31
    """
    with with_error_handling(is_debug(ctx)):
        start, end = parse_date_range(start_date, end_date)
        services = get_services(ctx)
        click.echo(format_info("Fetching time entries..."))

        stats = services.time_tracking.get_time_statistics(
            start_date=start,
            end_date=end,
            project_id=project_id,
            employee_id=employee_id,
        )
        if not stats.total_entries:
            click.echo()
            click.echo(format_info("No time entries found."))
            return

        click.echo()
        click.echo(
            format_table(
                ["Metric", "Value"],
                [
                    ["Total hours", f"{stats.total_hours:.2f}"],
                    ["Average hours per day", f"{stats.average_hours_per_day:.2f}"],
                    ["Entries", stats.total_entries],
                    ["Days", stats.days],
                ],
            )
        )
        _hours_table("By employee", stats.by_employee)
        _hours_table("By project", stats.by_project)
