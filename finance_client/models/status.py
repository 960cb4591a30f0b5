"""Status and category vocabularies used on the backend wire format.

Values are the German strings the backend stores. ``InvoiceStatus.OVERDUE``
and ``QuoteStatus.EXPIRED`` are derived by the client and never sent.
"""

from enum import Enum


class InvoiceStatus(str, Enum):
    """Invoice (Rechnung) status."""

    DRAFT = "entwurf"
    OPEN = "offen"
    SENT = "versendet"
    PAID = "bezahlt"
    PARTIALLY_PAID = "teilbezahlt"
    OVERDUE = "ueberfaellig"
    CANCELLED = "storniert"


class QuoteStatus(str, Enum):
    """Quote (Angebot) status."""

    DRAFT = "entwurf"
    SENT = "versendet"
    ACCEPTED = "angenommen"
    REJECTED = "abgelehnt"
    EXPIRED = "abgelaufen"


class ExpenseStatus(str, Enum):
    """Expense (Projektkosten) approval status."""

    SUBMITTED = "eingereicht"
    APPROVED = "genehmigt"
    REJECTED = "abgelehnt"
    REIMBURSED = "erstattet"


class ExpenseCategory(str, Enum):
    """Expense categories offered by the expense form."""

    PERSONNEL = "Personal"
    MATERIAL = "Material"
    VEHICLE = "Fahrzeug"
    SUBCONTRACTING = "Fremdleistungen"
    INSURANCE = "Versicherung"
    ADMINISTRATION = "Verwaltung"
    OTHER = "Sonstige"


# Invoices in these states no longer count as open receivables
SETTLED_INVOICE_STATUSES = frozenset(
    {InvoiceStatus.PAID.value, InvoiceStatus.CANCELLED.value}
)
