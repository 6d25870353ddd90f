"""Invoice direction tags and their balance signs.

The sign table is the single source of truth for whether money flows into
or out of a company's account because of a payment against an invoice.
"""

from types import MappingProxyType

from ledger_core.exceptions import UnknownInvoiceTypeError
from ledger_core.models.accounting.enums import Direction, InvoiceType

CREDIT_TYPES = frozenset({
    InvoiceType.INCOMING_INVESTMENT,
    InvoiceType.OUTGOING_SALES,
    InvoiceType.OUTGOING_BANK,
})

DEBIT_TYPES = frozenset({
    InvoiceType.INCOMING_SUPPLIER,
    InvoiceType.INCOMING_OFFICE,
    InvoiceType.OUTGOING_SUPPLIER,
    InvoiceType.OUTGOING_OFFICE,
    InvoiceType.INCOMING_BANK,
    InvoiceType.OUTGOING_RETAIL_DEVELOPMENT,
    InvoiceType.OUTGOING_RETAIL_CONSTRUCTION,
})

SIGN_TABLE = MappingProxyType({
    **{invoice_type: Direction.CREDIT for invoice_type in CREDIT_TYPES},
    **{invoice_type: Direction.DEBIT for invoice_type in DEBIT_TYPES},
})


def parse_invoice_type(value: InvoiceType | str) -> InvoiceType:
    """Coerce a raw tag into the closed :class:`InvoiceType` set.

    Raises
    ------
    UnknownInvoiceTypeError
        If the tag is not one of the known directions.
    """
    try:
        return InvoiceType(value)
    except ValueError:
        raise UnknownInvoiceTypeError(f"Unknown invoice type {value!r}") from None


def direction_of(invoice_type: InvoiceType | str) -> Direction:
    """Return whether payments against this invoice type credit or debit."""
    return SIGN_TABLE[parse_invoice_type(invoice_type)]


def sign_of(invoice_type: InvoiceType | str) -> int:
    """Return +1 for credit-sign invoice types and -1 for debit-sign ones."""
    return 1 if direction_of(invoice_type) == Direction.CREDIT else -1


def is_income(invoice_type: InvoiceType | str) -> bool:
    """True if the invoice type brings money into the company."""
    return direction_of(invoice_type) == Direction.CREDIT
