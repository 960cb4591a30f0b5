"""Finance Client CLI.

This module provides a command-line interface for the finance backend.
It includes commands for financial summaries, analytics, invoice and quote
listings, document search, exports and time statistics.
"""

import click

from finance_client import __version__
from finance_client.cli.commands import (
    categories,
    customer,
    export,
    invoices,
    monthly,
    quotes,
    search,
    summary,
    time_stats,
)
from finance_client.config.logging_config import LoggingConfig, configure_logging
from finance_client.utils.logging_utils import LogContext, generate_correlation_id


@click.group(help="Finance Client CLI - Invoices, expenses and analytics")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Verbose logging and full stack traces")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Finance Client CLI main entry point."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    logging_config = LoggingConfig.from_env(default_level="WARNING")
    if debug:
        logging_config.log_level = "DEBUG"
    configure_logging(logging_config)
    ctx.with_resource(LogContext(correlation_id=generate_correlation_id()))


# Register commands
cli.add_command(summary)
cli.add_command(monthly)
cli.add_command(categories)
cli.add_command(invoices)
cli.add_command(quotes)
cli.add_command(customer)
cli.add_command(search)
cli.add_command(export)
cli.add_command(time_stats)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
