"""Invoice model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ledger_core.models.accounting.enums import InvoiceStatus, InvoiceType


@dataclass
class Invoice:
    """Billing document owned by one company.

    ``invoice_type`` is normally an :class:`InvoiceType`; rows ingested from
    dirty sources may carry a raw string outside the closed set, which the
    reconciler reports instead of guessing a sign.
    """

    invoice_id: str
    company_id: str
    invoice_number: str
    invoice_type: InvoiceType | str
    issue_date: date | None
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal | None = None
    status: InvoiceStatus = InvoiceStatus.UNPAID
    vat_amount: Decimal = Decimal("0")  # pass-through, never computed here
    bank_account_id: str | None = None
    counterparty_id: str | None = None  # supplier / customer
    counterparty_name: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.remaining_amount is None:
            self.remaining_amount = self.total_amount - self.paid_amount
