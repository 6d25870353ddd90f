"""Group ledger scenario: several companies settling each other's invoices."""

from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Any

from ledger_core.config import ReconciliationConfig, ScenarioConfig
from ledger_core.engine.classification import DEBIT_TYPES
from ledger_core.engine.reconciler import LedgerReconciler, ReconciliationReport
from ledger_core.engine.reports import company_statistics
from ledger_core.generators.accounting import (
    BankAccountGenerator,
    CompanyGenerator,
    CreditGenerator,
    InvoiceGenerator,
    PaymentGenerator,
)
from ledger_core.generators.pool import FakerPool
from ledger_core.models.accounting import Invoice
from ledger_core.store import LedgerStore

logger = logging.getLogger(__name__)


class GroupLedgerScenario:
    """Generate the ledger of a group of related companies.

    This scenario creates:
    - Companies with one or more bank accounts at Croatian banks
    - Credits disbursed to the companies' first account
    - Income and expense invoices of every direction tag
    - Payments against those invoices:
        - Direct, booked on the owner's account (full or partial)
        - Drawn from one of the owner's credits
        - Cesija: another group company's account pays the invoice
    """

    def __init__(
        self,
        num_companies: int = 5,
        accounts_per_company: int = 2,
        credits_per_company: int = 1,
        invoices_per_company: int = 20,
        payment_rate: float = 0.7,
        cesija_rate: float = 0.1,
        credit_payment_rate: float = 0.05,
        partial_rate: float = 0.2,
        seed: int | None = None,
        locale: str = "hr_HR",
        *,
        config: ScenarioConfig | None = None,
        reconciliation: ReconciliationConfig | None = None,
    ) -> None:
        """Initialize group ledger scenario.

        Parameters
        ----------
        num_companies : int
            Number of group companies.
        accounts_per_company : int
            Bank accounts per company.
        credits_per_company : int
            Credits per company.
        invoices_per_company : int
            Invoices owned by each company.
        payment_rate : float
            Share of invoices that receive a payment (0.0 to 1.0).
        cesija_rate : float
            Share of paid expense invoices settled by another company.
        credit_payment_rate : float
            Share of paid expense invoices drawn from a credit.
        partial_rate : float
            Share of payments that leave part of the invoice open.
        seed : int | None
            Random seed for reproducibility.
        locale : str
            Faker locale.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            size and rate arguments it carries.
        reconciliation : ReconciliationConfig | None
            Settings for :meth:`reconcile`.
        """
        if config is not None:
            num_companies = config.num_companies
            accounts_per_company = config.accounts_per_company
            credits_per_company = config.credits_per_company
            invoices_per_company = config.invoices_per_company
            payment_rate = config.payment_rate
            cesija_rate = config.cesija_rate

        self.config = config
        self.num_companies = num_companies
        self.accounts_per_company = accounts_per_company
        self.credits_per_company = credits_per_company
        self.invoices_per_company = invoices_per_company
        self.payment_rate = payment_rate
        self.cesija_rate = cesija_rate
        self.credit_payment_rate = credit_payment_rate
        self.partial_rate = partial_rate
        self.seed = seed
        self.reconciliation = reconciliation or ReconciliationConfig()

        if seed is not None:
            random.seed(seed)

        self.store = LedgerStore()
        pool = FakerPool(locale=locale, seed=seed)
        self._company_gen = CompanyGenerator(seed=seed, pool=pool)
        self._account_gen = BankAccountGenerator(seed=seed, pool=pool)
        self._credit_gen = CreditGenerator(seed=seed, pool=pool)
        self._invoice_gen = InvoiceGenerator(seed=seed, pool=pool)
        self._payment_gen = PaymentGenerator(seed=seed, pool=pool)

    def generate(self) -> LedgerStore:
        """Generate all data for the group ledger scenario.

        Returns
        -------
        LedgerStore
            Store containing the generated ledger. Derived balances and
            invoice settlements are not filled in until :meth:`reconcile`.
        """
        logger.info(
            "Starting group ledger scenario: %d companies, %d invoices each",
            self.num_companies,
            self.invoices_per_company,
        )

        for _ in range(self.num_companies):
            company = self._company_gen.generate()
            self.store.add_company(company)

            accounts = list(
                self._account_gen.generate_for_company(company.company_id, self.accounts_per_company)
            )
            for account in accounts:
                self.store.add_bank_account(account)

            for _ in range(self.credits_per_company):
                credit = self._credit_gen.generate(
                    company.company_id,
                    disbursed_to_bank_account_id=accounts[0].account_id if accounts else None,
                    bank_id=accounts[0].bank_name if accounts else None,
                )
                self.store.add_credit(credit)

        logger.info(
            "Generated %d companies, %d accounts, %d credits",
            len(self.store.companies),
            len(self.store.bank_accounts),
            len(self.store.credits),
        )

        for company_id in list(self.store.companies):
            accounts = self.store.get_company_accounts(company_id)
            for _ in range(self.invoices_per_company):
                account_id = random.choice(accounts).account_id if accounts else None
                invoice = self._invoice_gen.generate(company_id, bank_account_id=account_id)
                self.store.add_invoice(invoice)

                if random.random() < self.payment_rate:
                    self._pay(invoice)

        logger.info(
            "Generated %d invoices with %d payments (%d cesija)",
            len(self.store.invoices),
            len(self.store.payments),
            sum(1 for p in self.store.payments if p.is_cesija),
        )

        return self.store

    def _pay(self, invoice: Invoice) -> None:
        """Add one payment against a freshly generated invoice."""
        open_amount = invoice.total_amount
        full = random.random() >= self.partial_rate
        is_expense = invoice.invoice_type in DEBIT_TYPES

        if is_expense and random.random() < self.cesija_rate:
            payer_accounts = [
                account
                for account in self.store.bank_accounts.values()
                if account.company_id != invoice.company_id
            ]
            if payer_accounts:
                payment = self._payment_gen.generate_cesija(
                    invoice, open_amount, random.choice(payer_accounts), full=full
                )
                self.store.add_payment(payment)
                return

        if is_expense and random.random() < self.credit_payment_rate:
            credits = [
                credit
                for credit in self.store.get_company_credits(invoice.company_id)
                if credit.available_amount >= open_amount
            ]
            if credits:
                credit = random.choice(credits)
                payment = self._payment_gen.generate(
                    invoice, open_amount, credit_id=credit.credit_id, full=full
                )
                credit.used_amount += payment.amount
                self.store.add_payment(payment)
                return

        if invoice.bank_account_id:
            payment = self._payment_gen.generate(
                invoice, open_amount, bank_account_id=invoice.bank_account_id, full=full
            )
            self.store.add_payment(payment)

    def reconcile(self) -> ReconciliationReport:
        """Run a reconciliation pass over the generated ledger."""
        return LedgerReconciler(self.store, self.reconciliation).run()

    def export(self, sinks: list[Any], report: ReconciliationReport | None = None) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (ConsoleSink, JsonFileSink, KafkaSink).
        report : ReconciliationReport | None
            When given, recomputed balances are exported as well.
        """
        for sink in sinks:
            sink.write_batch("companies", list(self.store.companies.values()))
            sink.write_batch("bank_accounts", list(self.store.bank_accounts.values()))
            sink.write_batch("credits", list(self.store.credits.values()))
            sink.write_batch("invoices", list(self.store.invoices.values()))
            sink.write_batch("payments", self.store.payments)
            if report is not None:
                sink.write_batch("balances", list(report.balances.values()))

        logger.info("Exported group ledger to %d sinks", len(sinks))

    def get_company_view(self, company_id: str) -> dict[str, Any] | None:
        """Get the consolidated view of a single company.

        Returns
        -------
        dict[str, Any] | None
            Statistics and cesija-annotated invoices, or None if the
            company does not exist.
        """
        if company_id not in self.store.companies:
            return None

        return {
            "company": self.store.companies[company_id],
            "statistics": company_statistics(self.store, company_id),
            "invoices": self.store.cesija_view(company_id),
        }

    def get_summary(self) -> dict[str, Any]:
        """Get summary statistics for the generated data."""
        summary: dict[str, Any] = {
            f"total_{entity}": count for entity, count in self.store.summary().items()
        }
        paid = sum((p.amount for p in self.store.payments), Decimal("0"))
        invoiced = sum((i.total_amount for i in self.store.invoices.values()), Decimal("0"))
        summary["total_invoiced"] = invoiced
        summary["total_paid"] = paid
        summary["payment_coverage"] = float(paid / invoiced) if invoiced else 0.0
        return summary
