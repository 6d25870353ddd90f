"""Batch reconciliation pass over a whole ledger."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from ledger_core.config import ReconciliationConfig
from ledger_core.engine.balance import BalanceResult
from ledger_core.engine.faults import DataIntegrityFault, InvariantBreach
from ledger_core.engine.settlement import (
    InvoiceSettlement,
    apply_settlement,
    check_credit,
    check_invoice_totals,
    drawn_from_credit,
    settle_invoice,
)
from ledger_core.exceptions import InvariantViolationError
from ledger_core.models import Event
from ledger_core.models.accounting import Invoice

if TYPE_CHECKING:
    from ledger_core.store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """Stored balance that disagrees with the payment log."""

    account_id: str
    stored: Decimal
    recomputed: Decimal

    @property
    def difference(self) -> Decimal:
        return self.recomputed - self.stored


@dataclass(frozen=True)
class InvoiceDiscrepancy:
    """Stored invoice totals that disagree with the payment log."""

    invoice_id: str
    stored_paid: Decimal
    recomputed_paid: Decimal
    stored_remaining: Decimal
    recomputed_remaining: Decimal

    @property
    def difference(self) -> Decimal:
        return self.recomputed_paid - self.stored_paid


@dataclass
class ReconciliationReport:
    """Outcome of one :class:`LedgerReconciler` pass."""

    balances: dict[str, BalanceResult] = field(default_factory=dict)
    settlements: dict[str, InvoiceSettlement] = field(default_factory=dict)
    discrepancies: list[BalanceDiscrepancy] = field(default_factory=list)
    invoice_discrepancies: list[InvoiceDiscrepancy] = field(default_factory=list)
    faults: list[DataIntegrityFault] = field(default_factory=list)
    breaches: list[InvariantBreach] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """True if nothing was excluded, skipped or out of line."""
        return not (
            self.discrepancies or self.invoice_discrepancies or self.faults or self.breaches
        )

    def balance_events(self, source: str = "ledger-core") -> list[Event]:
        """Wrap every recomputed balance in a ``balance.recomputed`` event."""
        now = datetime.now(timezone.utc)
        return [
            Event(
                event_id=uuid.uuid4().hex,
                event_type="balance.recomputed",
                event_time=now,
                source=source,
                subject=account_id,
                data=result.to_record(),
                metadata={"faults": len(result.faults)},
            )
            for account_id, result in self.balances.items()
        ]

    def summary(self) -> dict[str, Any]:
        """Return summary counts of the pass."""
        return {
            "accounts": len(self.balances),
            "invoices": len(self.settlements),
            "discrepancies": len(self.discrepancies),
            "invoice_discrepancies": len(self.invoice_discrepancies),
            "faults": len(self.faults),
            "breaches": len(self.breaches),
            "is_clean": self.is_clean,
        }


class LedgerReconciler:
    """Recompute and check every invoice, credit and account of a store.

    Entities are processed independently: an invariant violation skips the
    offending entity and is recorded in the report, the rest of the batch
    carries on. Stored invoice totals and account balances that disagree
    with the payment log are reported before they are overwritten.

    Parameters
    ----------
    store : LedgerStore
        Ledger to reconcile.
    config : ReconciliationConfig | None
        Tolerance and write-back settings.
    """

    def __init__(
        self,
        store: LedgerStore,
        config: ReconciliationConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or ReconciliationConfig()

    def run(self) -> ReconciliationReport:
        """Run one reconciliation pass.

        Returns
        -------
        ReconciliationReport
            Recomputed balances and settlements plus everything that was
            excluded or skipped.
        """
        report = ReconciliationReport()
        logger.info(
            "Reconciling %d invoices, %d credits, %d accounts",
            len(self.store.invoices),
            len(self.store.credits),
            len(self.store.bank_accounts),
        )

        for invoice_id in list(self.store.invoices):
            self._reconcile_invoice(invoice_id, report)

        for credit_id in list(self.store.credits):
            self._check_credit(credit_id, report)

        for account_id in list(self.store.bank_accounts):
            self._reconcile_account(account_id, report)

        logger.info("Reconciliation finished: %s", report.summary())
        return report

    def _reconcile_invoice(self, invoice_id: str, report: ReconciliationReport) -> None:
        invoice = self.store.invoices[invoice_id]
        try:
            settlement = settle_invoice(invoice, self.store.get_invoice_payments(invoice_id))
        except InvariantViolationError as exc:
            self._breach(report, "invoice", invoice_id, str(exc))
            return
        report.faults.extend(settlement.faults)
        self._compare_invoice(invoice, settlement, report)

        try:
            if self.config.update_balances:
                apply_settlement(invoice, settlement)
            else:
                check_invoice_totals(invoice)
        except InvariantViolationError as exc:
            self._breach(report, "invoice", invoice_id, str(exc))
            return
        report.settlements[invoice_id] = settlement

    def _compare_invoice(
        self,
        invoice: Invoice,
        settlement: InvoiceSettlement,
        report: ReconciliationReport,
    ) -> None:
        tolerance = self.config.balance_tolerance
        if (
            abs(settlement.paid_amount - invoice.paid_amount) <= tolerance
            and abs(settlement.remaining_amount - invoice.remaining_amount) <= tolerance
        ):
            return

        discrepancy = InvoiceDiscrepancy(
            invoice.invoice_id,
            invoice.paid_amount,
            settlement.paid_amount,
            invoice.remaining_amount,
            settlement.remaining_amount,
        )
        report.invoice_discrepancies.append(discrepancy)
        logger.warning(
            "Invoice %s stored paid %s / remaining %s differs from recomputed %s / %s",
            invoice.invoice_id,
            invoice.paid_amount,
            invoice.remaining_amount,
            settlement.paid_amount,
            settlement.remaining_amount,
            extra={"extra": {"invoice_id": invoice.invoice_id, "difference": discrepancy.difference}},
        )

    def _check_credit(self, credit_id: str, report: ReconciliationReport) -> None:
        credit = self.store.credits[credit_id]
        try:
            check_credit(credit)
            drawn = drawn_from_credit(credit, self.store.get_credit_payments(credit_id))
            if drawn > credit.used_amount:
                raise InvariantViolationError(
                    f"Credit {credit_id}: payments drawn {drawn} exceed used amount {credit.used_amount}"
                )
        except InvariantViolationError as exc:
            self._breach(report, "credit", credit_id, str(exc))

    def _reconcile_account(self, account_id: str, report: ReconciliationReport) -> None:
        account = self.store.bank_accounts[account_id]
        result = self.store.balance_result(account_id)
        report.balances[account_id] = result
        report.faults.extend(result.faults)

        recomputed = result.balance
        stored = account.current_balance
        if stored is not None and abs(recomputed - stored) > self.config.balance_tolerance:
            discrepancy = BalanceDiscrepancy(account_id, stored, recomputed)
            report.discrepancies.append(discrepancy)
            logger.warning(
                "Account %s stored balance %s differs from recomputed %s",
                account_id,
                stored,
                recomputed,
                extra={"extra": {"account_id": account_id, "difference": discrepancy.difference}},
            )

        if self.config.update_balances:
            account.current_balance = recomputed

    def _breach(
        self,
        report: ReconciliationReport,
        entity_type: str,
        entity_id: str,
        reason: str,
    ) -> None:
        report.breaches.append(InvariantBreach(entity_type, entity_id, reason))
        logger.warning("Skipping %s %s: %s", entity_type, entity_id, reason)
