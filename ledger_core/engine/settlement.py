"""Invoice settlement and credit invariants."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ledger_core.engine.faults import DataIntegrityFault
from ledger_core.exceptions import InvariantViolationError
from ledger_core.models.accounting import Credit, Invoice, InvoiceStatus, Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceSettlement:
    """Paid / remaining amounts of an invoice recomputed from its payments."""

    invoice_id: str
    paid_amount: Decimal
    remaining_amount: Decimal
    status: InvoiceStatus
    faults: tuple[DataIntegrityFault, ...] = ()


def invoice_status(total_amount: Decimal, paid_amount: Decimal) -> InvoiceStatus:
    """Status implied by how much of an invoice has been paid."""
    if paid_amount <= 0:
        return InvoiceStatus.UNPAID
    if paid_amount >= total_amount:
        return InvoiceStatus.PAID
    return InvoiceStatus.PARTIALLY_PAID


def settle_invoice(invoice: Invoice, payments: Iterable[Payment]) -> InvoiceSettlement:
    """Recompute what has been paid on an invoice.

    Cesija payments settle the invoice like any other payment; only their
    effect on bank balances differs. Payments with a zero or negative
    amount are left out and returned as faults on the settlement.

    Raises
    ------
    InvariantViolationError
        If the payments add up to more than the invoice total.
    """
    paid = Decimal("0")
    faults: list[DataIntegrityFault] = []
    for payment in payments:
        if payment.invoice_id != invoice.invoice_id:
            continue
        if payment.amount <= 0:
            fault = DataIntegrityFault(
                "payment",
                payment.payment_id,
                f"non-positive amount {payment.amount} on invoice {invoice.invoice_id}",
            )
            faults.append(fault)
            logger.warning(
                "Excluding payment %s from invoice %s: %s",
                payment.payment_id,
                invoice.invoice_id,
                fault.reason,
                extra={"extra": {"payment_id": payment.payment_id, "invoice_id": invoice.invoice_id}},
            )
            continue
        paid += payment.amount

    if paid > invoice.total_amount:
        raise InvariantViolationError(
            f"Invoice {invoice.invoice_id} overpaid: {paid} > {invoice.total_amount}"
        )

    return InvoiceSettlement(
        invoice_id=invoice.invoice_id,
        paid_amount=paid,
        remaining_amount=invoice.total_amount - paid,
        status=invoice_status(invoice.total_amount, paid),
        faults=tuple(faults),
    )


def apply_settlement(invoice: Invoice, settlement: InvoiceSettlement) -> None:
    """Write a settlement back onto its invoice."""
    invoice.paid_amount = settlement.paid_amount
    invoice.remaining_amount = settlement.remaining_amount
    invoice.status = settlement.status


def check_invoice_totals(invoice: Invoice) -> None:
    """Verify ``paid_amount + remaining_amount == total_amount``."""
    if invoice.paid_amount + invoice.remaining_amount != invoice.total_amount:
        raise InvariantViolationError(
            f"Invoice {invoice.invoice_id}: paid {invoice.paid_amount} + remaining "
            f"{invoice.remaining_amount} != total {invoice.total_amount}"
        )


def check_credit(credit: Credit) -> None:
    """Verify usage and outstanding balance of a credit.

    ``0 <= repaid <= used <= principal`` and, when recorded,
    ``outstanding == principal - repaid`` which must not be negative.
    """
    principal = credit.principal or Decimal("0")

    if not Decimal("0") <= credit.repaid_amount <= credit.used_amount <= principal:
        raise InvariantViolationError(
            f"Credit {credit.credit_id}: expected 0 <= repaid ({credit.repaid_amount}) "
            f"<= used ({credit.used_amount}) <= principal ({principal})"
        )

    if credit.outstanding_balance is None:
        return
    if credit.outstanding_balance < 0:
        raise InvariantViolationError(
            f"Credit {credit.credit_id} has negative outstanding balance {credit.outstanding_balance}"
        )
    expected = principal - credit.repaid_amount
    if credit.outstanding_balance != expected:
        raise InvariantViolationError(
            f"Credit {credit.credit_id}: outstanding {credit.outstanding_balance} != "
            f"principal - repaid ({expected})"
        )


def drawn_from_credit(credit: Credit, payments: Iterable[Payment]) -> Decimal:
    """Total paid out of a credit according to the payment log.

    Counts direct payments sourced from the credit and cesija payments
    whose paying side is the credit.
    """
    total = Decimal("0")
    for payment in payments:
        if payment.is_cesija:
            if payment.cesija_credit_id == credit.credit_id:
                total += payment.amount
        elif payment.credit_id == credit.credit_id:
            total += payment.amount
    return total
