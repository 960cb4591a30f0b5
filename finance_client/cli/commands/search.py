"""Document search command."""

import click

from finance_client.cli.error_handlers import InvalidInputError, with_error_handling
from finance_client.cli.utils.context import get_services, is_debug
from finance_client.cli.utils.formatters import format_info, format_success, format_table

SEARCH_TYPES = ["all", "invoices", "quotes", "expenses"]


def _label(document: dict) -> str:
    for field in ("rechnungNummer", "angebotsnummer", "beschreibung", "_id"):
        if document.get(field):
            return str(document[field])
    return "-"


@click.command(name="search")
@click.argument("query")
@click.option(
    "--type",
    "doc_type",
    type=click.Choice(SEARCH_TYPES),
    default="all",
    show_default=True,
    help="Document type to search",
)
@click.pass_context
def search(ctx: click.Context, query: str, doc_type: str):
    """Search invoices, quotes and expenses.

    Results are always fetched fresh from the backend.

    Example:
        finance-cli search "Müller"
    """
    with with_error_handling(is_debug(ctx)):
        if not query.strip():
            raise InvalidInputError("Search query must not be empty")

        services = get_services(ctx)
        click.echo(format_info(f"Searching for '{query}'..."))
        results = services.finance.search_financial_documents(query, doc_type)

        if isinstance(results, list):
            results = {doc_type: results}

        rows = []
        for group, documents in (results or {}).items():
            for document in documents or []:
                if isinstance(document, dict):
                    rows.append([group, _label(document), document.get("status", "-")])

        if not rows:
            click.echo()
            click.echo(format_info("No documents found."))
            return

        click.echo()
        click.echo(format_table(["Type", "Document", "Status"], rows))
        click.echo()
        click.echo(format_success(f"Found {len(rows)} document(s)"))
