"""Company, debt and bank summaries built from a reconciled ledger."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable

from ledger_core.engine.classification import is_income
from ledger_core.exceptions import EntityNotFoundError, UnknownInvoiceTypeError
from ledger_core.models.accounting import Credit, InvoiceStatus

if TYPE_CHECKING:
    from ledger_core.store import LedgerStore

ZERO = Decimal("0")
CENT = Decimal("0.01")


@dataclass
class CompanyStatistics:
    """Income, expense and liquidity figures of one company."""

    company_id: str
    name: str
    oib: str
    total_income_invoices: int = 0
    total_income_amount: Decimal = ZERO
    total_income_paid: Decimal = ZERO
    total_income_unpaid: Decimal = ZERO
    total_expense_invoices: int = 0
    total_expense_amount: Decimal = ZERO
    total_expense_paid: Decimal = ZERO
    total_expense_unpaid: Decimal = ZERO
    total_bank_balance: Decimal = ZERO
    total_credits_available: Decimal = ZERO
    unclassified_invoice_ids: list[str] = field(default_factory=list)

    @property
    def liquidity(self) -> Decimal:
        """Money on the accounts plus undrawn credit."""
        return self.total_bank_balance + self.total_credits_available

    @property
    def profit(self) -> Decimal:
        """Income collected minus expenses paid."""
        return self.total_income_paid - self.total_expense_paid

    @property
    def revenue(self) -> Decimal:
        return self.total_income_amount


def company_statistics(store: LedgerStore, company_id: str) -> CompanyStatistics:
    """Aggregate a company's invoices, accounts and credits.

    Parameters
    ----------
    store : LedgerStore
        Ledger holding the company.
    company_id : str
        Company to summarize.

    Returns
    -------
    CompanyStatistics
        Totals; invoices with an unknown direction tag are listed in
        ``unclassified_invoice_ids`` and left out of every total.
    """
    company = store.companies.get(company_id)
    if company is None:
        raise EntityNotFoundError(f"Company {company_id} not found")

    stats = CompanyStatistics(company_id=company_id, name=company.name, oib=company.oib)

    for invoice in store.get_company_invoices(company_id):
        try:
            income = is_income(invoice.invoice_type)
        except UnknownInvoiceTypeError:
            stats.unclassified_invoice_ids.append(invoice.invoice_id)
            continue

        if income:
            stats.total_income_invoices += 1
            stats.total_income_amount += invoice.total_amount
            stats.total_income_paid += invoice.paid_amount
            stats.total_income_unpaid += invoice.remaining_amount
        else:
            stats.total_expense_invoices += 1
            stats.total_expense_amount += invoice.total_amount
            stats.total_expense_paid += invoice.paid_amount
            stats.total_expense_unpaid += invoice.remaining_amount

    for account in store.get_company_accounts(company_id):
        stats.total_bank_balance += store.current_balance(account.account_id)

    for credit in store.get_company_credits(company_id):
        stats.total_credits_available += credit.available_amount

    return stats


@dataclass
class DebtSummary:
    """What is owed to, and has been paid to, one supplier."""

    counterparty_id: str
    counterparty_name: str | None
    total_unpaid: Decimal = ZERO
    total_paid: Decimal = ZERO
    invoice_count: int = 0


def debt_summary(store: LedgerStore) -> list[DebtSummary]:
    """Group expense invoices of all companies by supplier.

    Only invoices that debit the owner and name a counterparty count.
    Suppliers with nothing paid and nothing owed are dropped. Sorted by
    outstanding debt, largest first.
    """
    debts: dict[str, DebtSummary] = {}

    for invoice in store.invoices.values():
        if not invoice.counterparty_id:
            continue
        try:
            if is_income(invoice.invoice_type):
                continue
        except UnknownInvoiceTypeError:
            continue

        debt = debts.get(invoice.counterparty_id)
        if debt is None:
            debt = DebtSummary(invoice.counterparty_id, invoice.counterparty_name)
            debts[invoice.counterparty_id] = debt

        debt.invoice_count += 1
        debt.total_paid += invoice.paid_amount
        if invoice.status in (InvoiceStatus.UNPAID, InvoiceStatus.PARTIALLY_PAID):
            debt.total_unpaid += invoice.remaining_amount

    result = [d for d in debts.values() if d.total_unpaid > 0 or d.total_paid > 0]
    result.sort(key=lambda d: d.total_unpaid, reverse=True)
    return result


def bank_credit_totals(credits: Iterable[Credit]) -> dict[str, dict[str, Decimal]]:
    """Credit exposure per lending bank.

    Credits without a ``bank_id`` are grouped under ``"unassigned"``.
    """
    totals: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {"credit_limit": ZERO, "used": ZERO, "repaid": ZERO, "outstanding": ZERO}
    )
    for credit in credits:
        principal = credit.principal or ZERO
        bank = totals[credit.bank_id or "unassigned"]
        bank["credit_limit"] += principal
        bank["used"] += credit.used_amount
        bank["repaid"] += credit.repaid_amount
        outstanding = credit.outstanding_balance
        bank["outstanding"] += principal - credit.repaid_amount if outstanding is None else outstanding
    return dict(totals)


def format_european_number(value: Decimal | float | int, quantum: Decimal = CENT) -> str:
    """Format money as ``1.234.567,89``.

    ``quantum`` sets the rounding step, half up; ``Decimal("1")`` drops
    the decimal part.
    """
    amount = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer_part, _, fraction = f"{abs(amount):f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"
