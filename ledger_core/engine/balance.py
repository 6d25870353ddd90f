"""Bank account balance recomputation from the payment log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from ledger_core.engine.classification import sign_of
from ledger_core.engine.faults import DataIntegrityFault
from ledger_core.exceptions import UnknownInvoiceTypeError
from ledger_core.models.accounting import BankAccount, ClassifiedPayment

logger = logging.getLogger(__name__)


@dataclass
class BalanceResult:
    """Breakdown of one balance recomputation."""

    account_id: str
    initial_balance: Decimal
    signed_total: Decimal = Decimal("0")
    cesija_outflow: Decimal = Decimal("0")
    excluded_payment_ids: list[str] = field(default_factory=list)
    faults: list[DataIntegrityFault] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        """Initial balance plus signed payments minus cesija outflows."""
        return self.initial_balance + self.signed_total - self.cesija_outflow

    def to_record(self) -> dict[str, Any]:
        """Flat record for sinks, including the derived balance."""
        return {
            "account_id": self.account_id,
            "initial_balance": self.initial_balance,
            "signed_total": self.signed_total,
            "cesija_outflow": self.cesija_outflow,
            "balance": self.balance,
            "excluded_payment_ids": list(self.excluded_payment_ids),
        }

    def exclude(self, payment_id: str, reason: str) -> None:
        self.excluded_payment_ids.append(payment_id)
        self.faults.append(DataIntegrityFault("payment", payment_id, reason))
        logger.warning(
            "Excluding payment %s from account %s: %s",
            payment_id,
            self.account_id,
            reason,
        )


def reconcile_balance(
    account: BankAccount,
    payments: Iterable[ClassifiedPayment],
) -> BalanceResult:
    """Recompute an account balance from its full payment history.

    Non-cesija payments booked on the account are signed by their invoice
    type. Cesija payments whose paying account is this one are a plain
    outflow and never pass through the sign table, even if they also name
    the account as ``company_bank_account_id``. Payments unrelated to the
    account are ignored.

    Parameters
    ----------
    account : BankAccount
        Account whose ``initial_balance`` is the starting point.
    payments : Iterable[ClassifiedPayment]
        Payments with their parent invoice's direction tag.

    Returns
    -------
    BalanceResult
        Balance and breakdown; rows with an unknown invoice type or a
        non-positive amount are excluded and listed in ``faults``.
    """
    result = BalanceResult(account_id=account.account_id, initial_balance=account.initial_balance)

    for classified in payments:
        payment = classified.payment

        if payment.is_cesija:
            if payment.cesija_bank_account_id != account.account_id:
                continue
            if payment.amount <= 0:
                result.exclude(payment.payment_id, f"non-positive amount {payment.amount}")
                continue
            result.cesija_outflow += payment.amount
            continue

        if payment.company_bank_account_id != account.account_id:
            continue
        if payment.amount <= 0:
            result.exclude(payment.payment_id, f"non-positive amount {payment.amount}")
            continue

        try:
            sign = sign_of(classified.invoice_type)
        except UnknownInvoiceTypeError as exc:
            result.exclude(payment.payment_id, str(exc))
            continue

        result.signed_total += sign * payment.amount

    return result


def recompute_balance(
    account: BankAccount,
    payments: Iterable[ClassifiedPayment],
) -> Decimal:
    """Return the recomputed current balance of ``account``."""
    return reconcile_balance(account, payments).balance
