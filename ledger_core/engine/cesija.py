"""Cesija (debt assignment) resolution.

Builds, per company, the de-duplicated list of invoices touched by debt
assignment, each annotated with the company on the other side:

- outbound: this company's account, credit or name is the payer of an
  invoice that belongs to another company;
- inbound: another company paid one of this company's own invoices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping

from ledger_core.engine.faults import DataIntegrityFault
from ledger_core.models.accounting import (
    CesijaLink,
    CesijaLinkKind,
    CesijaPayerRef,
    Invoice,
    Payment,
    resolve_payer_refs,
)

logger = logging.getLogger(__name__)


@dataclass
class AnnotatedInvoice:
    """Invoice as shown in a company's consolidated list."""

    invoice: Invoice
    is_cesija_payment: bool = False
    cesija_company_id: str | None = None  # paying company
    cesija_company_name: str | None = None  # company on the other side
    link: CesijaLink | None = None

    @property
    def invoice_id(self) -> str:
        return self.invoice.invoice_id

    @property
    def issue_date(self) -> date | None:
        return self.invoice.issue_date


@dataclass
class CompanyDirectory:
    """Lookups needed to resolve payers and counterparties across companies."""

    company_names: Mapping[str, str] = field(default_factory=dict)
    invoices: Mapping[str, Invoice] = field(default_factory=dict)
    account_owners: Mapping[str, str] = field(default_factory=dict)  # account -> company
    credit_owners: Mapping[str, str] = field(default_factory=dict)  # credit -> company

    def owner_of(self, ref: CesijaPayerRef) -> str | None:
        """Company behind one payer column, or None if it cannot be resolved."""
        if ref.kind == CesijaLinkKind.COMPANY:
            return ref.target_id
        if ref.kind == CesijaLinkKind.BANK_ACCOUNT:
            return self.account_owners.get(ref.target_id)
        return self.credit_owners.get(ref.target_id)


def _issue_date_desc(annotated: AnnotatedInvoice) -> tuple[bool, int]:
    issue_date = annotated.issue_date
    return (issue_date is None, -issue_date.toordinal() if issue_date else 0)


class CesijaResolver:
    """Resolve the cesija view of a company.

    Payer columns are resolved into :class:`CesijaPayerRef` once per
    payment and reused for every company the resolver is asked about.
    Problems are collected in ``faults`` for the latest :meth:`resolve`.
    """

    def __init__(
        self,
        directory: CompanyDirectory,
        payer_refs: Mapping[str, tuple[CesijaPayerRef, ...]] | None = None,
    ) -> None:
        self.directory = directory
        self.faults: list[DataIntegrityFault] = []
        self._refs: dict[str, tuple[CesijaPayerRef, ...]] = dict(payer_refs or {})

    def payer_refs(self, payment: Payment) -> tuple[CesijaPayerRef, ...]:
        """Payer columns of a payment, most specific first."""
        refs = self._refs.get(payment.payment_id)
        if refs is None:
            refs = resolve_payer_refs(payment)
            self._refs[payment.payment_id] = refs
        return refs

    def payer_company_id(self, payment: Payment) -> str | None:
        """Company that paid a cesija payment."""
        if payment.cesija_company_id:
            return payment.cesija_company_id
        for ref in self.payer_refs(payment):
            owner = self.directory.owner_of(ref)
            if owner:
                return owner
        return None

    def is_outbound(self, company_id: str, payment: Payment) -> bool:
        """True if ``company_id`` paid this cesija payment through any column."""
        if not payment.is_cesija:
            return False
        return any(self.directory.owner_of(ref) == company_id for ref in self.payer_refs(payment))

    def outbound_payments(self, company_id: str, payments: Iterable[Payment]) -> list[Payment]:
        """Cesija payments where this company pays someone else's invoice."""
        return [p for p in payments if self.is_outbound(company_id, p)]

    def inbound_payments(self, own_invoice_ids: Iterable[str], payments: Iterable[Payment]) -> list[Payment]:
        """Cesija payments made against this company's own invoices."""
        own = set(own_invoice_ids)
        return [p for p in payments if p.is_cesija and p.invoice_id in own]

    def resolve(
        self,
        company_id: str,
        own_invoices: Iterable[Invoice],
        candidate_payments: Iterable[Payment],
    ) -> list[AnnotatedInvoice]:
        """Merge own and cesija-touched invoices into one annotated list.

        Parameters
        ----------
        company_id : str
            Company whose view is built.
        own_invoices : Iterable[Invoice]
            Invoices owned by the company.
        candidate_payments : Iterable[Payment]
            Payments that may be cesija payments in either direction, in
            fetch order. Non-cesija rows are ignored.

        Returns
        -------
        list[AnnotatedInvoice]
            One entry per invoice id, own invoices first on collision,
            sorted by issue date descending (undated last).
        """
        self.faults = []
        own_invoices = list(own_invoices)
        own_by_id = {invoice.invoice_id: invoice for invoice in own_invoices}
        payments = list(candidate_payments)

        outbound = self.outbound_payments(company_id, payments)
        inbound = self.inbound_payments(own_by_id, payments)

        # Outbound first so that it wins when a payment matches both ways.
        seen_payments: set[str] = set()
        first_payment: dict[str, Payment] = {}
        for payment in [*outbound, *inbound]:
            if payment.payment_id in seen_payments:
                continue
            seen_payments.add(payment.payment_id)
            first_payment.setdefault(payment.invoice_id, payment)

        merged: dict[str, AnnotatedInvoice] = {}
        for invoice in own_invoices:
            merged[invoice.invoice_id] = self._annotate(
                company_id, invoice, first_payment.get(invoice.invoice_id)
            )

        for invoice_id, payment in first_payment.items():
            if invoice_id in merged:
                continue
            invoice = self.directory.invoices.get(invoice_id)
            if invoice is None:
                self._fault("payment", payment.payment_id, f"references unknown invoice {invoice_id}")
                continue
            merged[invoice_id] = self._annotate(company_id, invoice, payment)

        return sorted(merged.values(), key=_issue_date_desc)

    def _annotate(
        self,
        company_id: str,
        invoice: Invoice,
        payment: Payment | None,
    ) -> AnnotatedInvoice:
        if payment is None:
            return AnnotatedInvoice(invoice=invoice)

        payer_id = self.payer_company_id(payment)
        if payer_id == company_id:
            # We paid on behalf of the invoice's owner
            counterparty_id = invoice.company_id
        else:
            counterparty_id = payer_id

        name = self.directory.company_names.get(counterparty_id) if counterparty_id else None
        if name is None:
            self._fault("payment", payment.payment_id, "cesija counterparty cannot be resolved")

        return AnnotatedInvoice(
            invoice=invoice,
            is_cesija_payment=True,
            cesija_company_id=payer_id,
            cesija_company_name=name,
            link=CesijaLink(
                invoice_id=invoice.invoice_id,
                payment_id=payment.payment_id,
                owner_company_id=invoice.company_id,
                payer_company_id=payer_id,
            ),
        )

    def _fault(self, entity_type: str, entity_id: str, reason: str) -> None:
        self.faults.append(DataIntegrityFault(entity_type, entity_id, reason))
        logger.warning("Cesija %s %s: %s", entity_type, entity_id, reason)


def resolve_cesija_view(
    company_id: str,
    own_invoices: Iterable[Invoice],
    candidate_payments: Iterable[Payment],
    directory: CompanyDirectory,
) -> list[AnnotatedInvoice]:
    """Annotated own + cesija-touched invoices of ``company_id``."""
    return CesijaResolver(directory).resolve(company_id, own_invoices, candidate_payments)
