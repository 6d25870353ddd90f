"""Accounting ledger store with referential integrity."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from ledger_core.engine.balance import BalanceResult, reconcile_balance
from ledger_core.engine.cesija import AnnotatedInvoice, CesijaResolver, CompanyDirectory
from ledger_core.engine.settlement import apply_settlement, settle_invoice
from ledger_core.exceptions import (
    EntityNotFoundError,
    InvariantViolationError,
    ReferentialIntegrityError,
)
from ledger_core.models.accounting import (
    BankAccount,
    CesijaLinkKind,
    CesijaPayerRef,
    ClassifiedPayment,
    Company,
    Credit,
    Invoice,
    Payment,
    resolve_payer_refs,
)

logger = logging.getLogger(__name__)


@dataclass
class LedgerStore:
    """In-memory read projection of companies, credits, invoices and payments.

    Payments are append-only and each one re-settles its invoice from the
    full payment list. Account balances are derived on demand and
    cached per account; adding a payment drops the cached balance of every
    account it touches, so a cached value is always a full recomputation.
    """

    # Primary entities
    companies: dict[str, Company] = field(default_factory=dict)
    bank_accounts: dict[str, BankAccount] = field(default_factory=dict)
    credits: dict[str, Credit] = field(default_factory=dict)
    invoices: dict[str, Invoice] = field(default_factory=dict)

    # Event log
    payments: list[Payment] = field(default_factory=list)

    # Relationship indexes
    _company_accounts: dict[str, list[str]] = field(default_factory=dict)
    _company_credits: dict[str, list[str]] = field(default_factory=dict)
    _company_invoices: dict[str, list[str]] = field(default_factory=dict)
    _invoice_payments: dict[str, list[int]] = field(default_factory=dict)
    _account_payments: dict[str, list[int]] = field(default_factory=dict)
    _credit_payments: dict[str, list[int]] = field(default_factory=dict)
    _payer_payments: dict[str, list[int]] = field(default_factory=dict)

    # Cesija payer columns resolved at ingestion, keyed by payment id
    _payer_refs: dict[str, tuple[CesijaPayerRef, ...]] = field(default_factory=dict)

    _balance_cache: dict[str, BalanceResult] = field(default_factory=dict)

    def add_company(self, company: Company) -> None:
        """Add a company to the store."""
        if company.created_at is None:
            company.created_at = datetime.now()
        self.companies[company.company_id] = company
        self._company_accounts[company.company_id] = []
        self._company_credits[company.company_id] = []
        self._company_invoices[company.company_id] = []

    def add_bank_account(self, account: BankAccount) -> None:
        """Add a bank account to the store."""
        if account.company_id not in self.companies:
            raise ReferentialIntegrityError(f"Company {account.company_id} not found")

        self.bank_accounts[account.account_id] = account
        self._company_accounts[account.company_id].append(account.account_id)
        self._account_payments[account.account_id] = []

    def add_credit(self, credit: Credit) -> None:
        """Add a credit to the store."""
        if credit.company_id not in self.companies:
            raise ReferentialIntegrityError(f"Company {credit.company_id} not found")

        if (
            credit.disbursed_to_bank_account_id
            and credit.disbursed_to_bank_account_id not in self.bank_accounts
        ):
            raise ReferentialIntegrityError(
                f"Bank account {credit.disbursed_to_bank_account_id} not found"
            )

        self.credits[credit.credit_id] = credit
        self._company_credits[credit.company_id].append(credit.credit_id)
        self._credit_payments[credit.credit_id] = []

    def add_invoice(self, invoice: Invoice) -> None:
        """Add an invoice to the store."""
        if invoice.company_id not in self.companies:
            raise ReferentialIntegrityError(f"Company {invoice.company_id} not found")

        if invoice.bank_account_id and invoice.bank_account_id not in self.bank_accounts:
            raise ReferentialIntegrityError(f"Bank account {invoice.bank_account_id} not found")

        if invoice.created_at is None:
            invoice.created_at = datetime.now()
        self.invoices[invoice.invoice_id] = invoice
        self._company_invoices[invoice.company_id].append(invoice.invoice_id)
        self._invoice_payments[invoice.invoice_id] = []

    def add_payment(self, payment: Payment) -> None:
        """Append a payment to the log and index it."""
        if payment.invoice_id not in self.invoices:
            raise ReferentialIntegrityError(f"Invoice {payment.invoice_id} not found")

        if payment.company_bank_account_id and payment.company_bank_account_id not in self.bank_accounts:
            raise ReferentialIntegrityError(f"Bank account {payment.company_bank_account_id} not found")

        if payment.credit_id and payment.credit_id not in self.credits:
            raise ReferentialIntegrityError(f"Credit {payment.credit_id} not found")

        refs = resolve_payer_refs(payment)
        payer_ids = {self._owner_of(ref) for ref in refs}

        if payment.is_cesija and not refs:
            logger.warning("Cesija payment %s names no paying party", payment.payment_id)

        if payment.created_at is None:
            payment.created_at = datetime.now()
        idx = len(self.payments)
        self.payments.append(payment)
        self._invoice_payments[payment.invoice_id].append(idx)
        self._payer_refs[payment.payment_id] = refs

        if payment.is_cesija:
            for company_id in sorted(payer_ids):
                self._payer_payments.setdefault(company_id, []).append(idx)
            if payment.cesija_bank_account_id:
                self._account_payments[payment.cesija_bank_account_id].append(idx)
                self.invalidate_balance(payment.cesija_bank_account_id)
            if payment.cesija_credit_id:
                self._credit_payments[payment.cesija_credit_id].append(idx)
        else:
            if payment.company_bank_account_id:
                self._account_payments[payment.company_bank_account_id].append(idx)
                self.invalidate_balance(payment.company_bank_account_id)
            if payment.credit_id:
                self._credit_payments[payment.credit_id].append(idx)

        self._settle_invoice(payment.invoice_id)

    def _settle_invoice(self, invoice_id: str) -> None:
        """Recompute an invoice's paid and remaining amounts from its payments.

        An overpaid invoice keeps its last consistent totals; the
        reconciliation pass reports it.
        """
        invoice = self.invoices[invoice_id]
        try:
            settlement = settle_invoice(invoice, self.get_invoice_payments(invoice_id))
        except InvariantViolationError as exc:
            logger.warning("Invoice %s left unsettled: %s", invoice_id, exc)
            return
        apply_settlement(invoice, settlement)

    def _owner_of(self, ref: CesijaPayerRef) -> str:
        """Company behind a payer column; dangling references are rejected."""
        if ref.kind == CesijaLinkKind.COMPANY:
            if ref.target_id not in self.companies:
                raise ReferentialIntegrityError(f"Company {ref.target_id} not found")
            return ref.target_id
        if ref.kind == CesijaLinkKind.BANK_ACCOUNT:
            if ref.target_id not in self.bank_accounts:
                raise ReferentialIntegrityError(f"Bank account {ref.target_id} not found")
            return self.bank_accounts[ref.target_id].company_id
        if ref.target_id not in self.credits:
            raise ReferentialIntegrityError(f"Credit {ref.target_id} not found")
        return self.credits[ref.target_id].company_id

    # Query methods
    def get_company_accounts(self, company_id: str) -> list[BankAccount]:
        """Get all bank accounts of a company."""
        account_ids = self._company_accounts.get(company_id, [])
        return [self.bank_accounts[aid] for aid in account_ids]

    def get_company_credits(self, company_id: str) -> list[Credit]:
        """Get all credits of a company."""
        credit_ids = self._company_credits.get(company_id, [])
        return [self.credits[cid] for cid in credit_ids]

    def get_company_invoices(self, company_id: str) -> list[Invoice]:
        """Get all invoices owned by a company."""
        invoice_ids = self._company_invoices.get(company_id, [])
        return [self.invoices[iid] for iid in invoice_ids]

    def get_invoice_payments(self, invoice_id: str) -> list[Payment]:
        """Get all payments made against an invoice."""
        indices = self._invoice_payments.get(invoice_id, [])
        return [self.payments[i] for i in indices]

    def get_account_payments(self, account_id: str) -> list[Payment]:
        """Get payments booked on an account, including cesija outflows."""
        indices = self._account_payments.get(account_id, [])
        return [self.payments[i] for i in indices]

    def get_credit_payments(self, credit_id: str) -> list[Payment]:
        """Get payments drawn from a credit, directly or via cesija."""
        indices = self._credit_payments.get(credit_id, [])
        return [self.payments[i] for i in indices]

    def get_payer_refs(self, payment_id: str) -> tuple[CesijaPayerRef, ...]:
        """Payer columns resolved when the payment was added."""
        return self._payer_refs.get(payment_id, ())

    def classified_payments_for_account(self, account_id: str) -> list[ClassifiedPayment]:
        """Account payments paired with their invoice's direction tag."""
        return [
            ClassifiedPayment(payment, self.invoices[payment.invoice_id].invoice_type)
            for payment in self.get_account_payments(account_id)
        ]

    # Balances
    def balance_result(self, account_id: str) -> BalanceResult:
        """Recompute (or reuse the cached) balance breakdown of an account."""
        if account_id not in self.bank_accounts:
            raise EntityNotFoundError(f"Bank account {account_id} not found")

        cached = self._balance_cache.get(account_id)
        if cached is None:
            cached = reconcile_balance(
                self.bank_accounts[account_id],
                self.classified_payments_for_account(account_id),
            )
            self._balance_cache[account_id] = cached
        return cached

    def current_balance(self, account_id: str) -> Decimal:
        """Current balance of an account derived from its payment history."""
        return self.balance_result(account_id).balance

    def invalidate_balance(self, account_id: str) -> None:
        """Drop the cached balance of one account."""
        self._balance_cache.pop(account_id, None)

    def set_initial_balance(self, account_id: str, initial_balance: Decimal) -> None:
        """Correct an account's opening balance and drop its cached balance."""
        if account_id not in self.bank_accounts:
            raise EntityNotFoundError(f"Bank account {account_id} not found")
        self.bank_accounts[account_id].initial_balance = initial_balance
        self.invalidate_balance(account_id)

    # Cesija
    def directory(self) -> CompanyDirectory:
        """Cross-company lookups for cesija resolution."""
        return CompanyDirectory(
            company_names={cid: c.name for cid, c in self.companies.items()},
            invoices=self.invoices,
            account_owners={aid: a.company_id for aid, a in self.bank_accounts.items()},
            credit_owners={cid: c.company_id for cid, c in self.credits.items()},
        )

    def candidate_cesija_payments(self, company_id: str) -> list[Payment]:
        """Cesija payments a company may be involved in, in fetch order.

        Outbound payments (the company is the payer through any of its
        company, credit or bank-account columns) come first, then inbound
        payments against the company's own invoices.
        """
        outbound = [self.payments[i] for i in self._payer_payments.get(company_id, [])]
        inbound = [
            payment
            for invoice_id in self._company_invoices.get(company_id, [])
            for payment in self.get_invoice_payments(invoice_id)
            if payment.is_cesija
        ]
        return outbound + inbound

    def cesija_view(self, company_id: str) -> list[AnnotatedInvoice]:
        """Consolidated, cesija-annotated invoice list of a company."""
        if company_id not in self.companies:
            raise EntityNotFoundError(f"Company {company_id} not found")

        resolver = CesijaResolver(self.directory(), payer_refs=self._payer_refs)
        return resolver.resolve(
            company_id,
            self.get_company_invoices(company_id),
            self.candidate_cesija_payments(company_id),
        )

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "companies": len(self.companies),
            "bank_accounts": len(self.bank_accounts),
            "credits": len(self.credits),
            "invoices": len(self.invoices),
            "payments": len(self.payments),
            "cesija_payments": sum(1 for p in self.payments if p.is_cesija),
        }
