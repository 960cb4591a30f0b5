"""CLI commands."""

from finance_client.cli.commands.analytics import categories, monthly
from finance_client.cli.commands.customer import customer
from finance_client.cli.commands.export import export
from finance_client.cli.commands.invoices import invoices, quotes
from finance_client.cli.commands.search import search
from finance_client.cli.commands.summary import summary
from finance_client.cli.commands.time_stats import time_stats

__all__ = [
    "categories",
    "customer",
    "export",
    "invoices",
    "monthly",
    "quotes",
    "search",
    "summary",
    "time_stats",
]
