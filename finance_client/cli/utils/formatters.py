"""Output formatting utilities for CLI."""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional

import click


def format_success(message: str) -> str:
    """Format a success message with green color.

    Args:
        message: The success message to format

    Returns:
        Formatted success message with color
    """
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color.

    Args:
        message: The error message to format

    Returns:
        Formatted error message with color
    """
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def _group_thousands(value: Decimal) -> str:
    """German number format: ``.`` groups thousands, ``,`` separates cents."""
    text = f"{value:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(amount: Any) -> str:
    """Format an amount in Euro the way the backend's users read it.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '1.234,50 €'
    """
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{_group_thousands(value)} €"


def format_percent(value: Any) -> str:
    """Format a percentage with one decimal, e.g. ``50,0 %``."""
    number = Decimal(str(value or 0)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{str(number).replace('.', ',')} %"


def format_date(value: Optional[dt.date]) -> str:
    """Format a date as ``DD.MM.YYYY`` (``-`` when missing)."""
    return value.strftime("%d.%m.%Y") if value else "-"


def format_table(headers: List[str], rows: List[List[Any]], max_width: int = 80) -> str:
    """Format data as a table.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 80)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    col_widths = [min(w, max_width) for w in col_widths]

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    header_row = (
        "|"
        + "|".join(
            f" {h:<{col_widths[i]}} "
            for i, h in enumerate(headers)
            if i < len(col_widths)
        )
        + "|"
    )

    data_rows = []
    for row in rows:
        formatted_cells = []
        for i, cell in enumerate(row):
            if i < len(col_widths):
                cell_str = str(cell)[: col_widths[i]]  # Truncate if needed
                formatted_cells.append(f" {cell_str:<{col_widths[i]}} ")
        data_rows.append("|" + "|".join(formatted_cells) + "|")

    table_lines = [separator, header_row, separator]
    if rows:
        table_lines.extend(data_rows)
        table_lines.append(separator)

    return "\n".join(table_lines)
