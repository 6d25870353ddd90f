"""Payment models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ledger_core.models.accounting.enums import (
    CesijaLinkKind,
    InvoiceType,
    PaymentMethod,
)


@dataclass
class Payment:
    """Atomic money movement against exactly one invoice.

    For a cesija (debt assignment) payment the ``cesija_*`` columns name
    the paying party; any one of company, credit or bank account may be
    the column the payer was recorded against.
    """

    payment_id: str
    invoice_id: str
    amount: Decimal
    payment_date: date | None
    company_bank_account_id: str | None = None
    credit_id: str | None = None
    is_cesija: bool = False
    cesija_company_id: str | None = None
    cesija_bank_account_id: str | None = None
    cesija_credit_id: str | None = None
    payment_method: PaymentMethod = PaymentMethod.WIRE
    reference_number: str | None = None
    description: str = ""
    created_at: datetime | None = None


@dataclass(frozen=True)
class CesijaPayerRef:
    """One resolved payer column of a cesija payment."""

    kind: CesijaLinkKind
    target_id: str


@dataclass(frozen=True)
class ClassifiedPayment:
    """Payment paired with the direction tag of its parent invoice."""

    payment: Payment
    invoice_type: InvoiceType | str


@dataclass(frozen=True)
class CesijaLink:
    """Resolved "invoice X was paid via assignment between A and B"."""

    invoice_id: str
    payment_id: str
    owner_company_id: str
    payer_company_id: str | None


def resolve_payer_refs(payment: Payment) -> tuple[CesijaPayerRef, ...]:
    """Resolve the payer columns of a cesija payment, most specific first.

    Returns an empty tuple for non-cesija payments.
    """
    if not payment.is_cesija:
        return ()

    refs = []
    if payment.cesija_bank_account_id:
        refs.append(CesijaPayerRef(CesijaLinkKind.BANK_ACCOUNT, payment.cesija_bank_account_id))
    if payment.cesija_credit_id:
        refs.append(CesijaPayerRef(CesijaLinkKind.CREDIT, payment.cesija_credit_id))
    if payment.cesija_company_id:
        refs.append(CesijaPayerRef(CesijaLinkKind.COMPANY, payment.cesija_company_id))
    return tuple(refs)
