"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_core.models.accounting import (
    BankAccount,
    Company,
    Credit,
    Invoice,
    InvoiceType,
    Payment,
    RepaymentFrequency,
    RepaymentType,
)
from ledger_core.store import LedgerStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def company_a() -> Company:
    return Company(company_id="comp-a", name="Alfa Gradnja d.o.o.", oib="69435151530")


@pytest.fixture
def company_b() -> Company:
    return Company(company_id="comp-b", name="Beta Nekretnine d.o.o.", oib="94577403194")


@pytest.fixture
def account_a() -> BankAccount:
    return BankAccount(
        account_id="acct-a1",
        company_id="comp-a",
        bank_name="Zagrebačka banka",
        account_number="HR1723600001101234565",
        initial_balance=Decimal("1000.00"),
    )


@pytest.fixture
def account_b() -> BankAccount:
    return BankAccount(
        account_id="acct-b1",
        company_id="comp-b",
        bank_name="Privredna banka Zagreb",
        account_number="HR1210010051863000160",
        initial_balance=Decimal("5000.00"),
    )


@pytest.fixture
def supplier_invoice_a() -> Invoice:
    """Invoice X: a supplier invoice owned by company A."""
    return Invoice(
        invoice_id="inv-x",
        company_id="comp-a",
        invoice_number="1-24-01",
        invoice_type=InvoiceType.INCOMING_SUPPLIER,
        issue_date=date(2024, 3, 1),
        total_amount=Decimal("200.00"),
        bank_account_id="acct-a1",
        counterparty_id="sup-1",
        counterparty_name="Dobavljač d.o.o.",
    )


@pytest.fixture
def cesija_payment_by_b() -> Payment:
    """Company B's account pays A's invoice X via cesija."""
    return Payment(
        payment_id="pay-cesija",
        invoice_id="inv-x",
        amount=Decimal("200.00"),
        payment_date=date(2024, 3, 10),
        is_cesija=True,
        cesija_company_id="comp-b",
        cesija_bank_account_id="acct-b1",
    )


@pytest.fixture
def credit() -> Credit:
    """100 000 at 6% over ten years."""
    return Credit(
        credit_id="cred-1",
        company_id="comp-a",
        credit_name="Građevinski kredit",
        principal=Decimal("100000"),
        annual_interest_rate=Decimal("6"),
        start_date=date(2024, 1, 1),
        maturity_date=date(2034, 1, 1),
        repayment_type=RepaymentType.YEARLY,
        principal_repayment_frequency=RepaymentFrequency.YEARLY,
        interest_repayment_frequency=RepaymentFrequency.YEARLY,
    )


@pytest.fixture
def store(company_a: Company, company_b: Company, account_a: BankAccount, account_b: BankAccount) -> LedgerStore:
    """Store with companies A and B and one account each."""
    ledger = LedgerStore()
    ledger.add_company(company_a)
    ledger.add_company(company_b)
    ledger.add_bank_account(account_a)
    ledger.add_bank_account(account_b)
    return ledger


@pytest.fixture
def cesija_store(store: LedgerStore, supplier_invoice_a: Invoice, cesija_payment_by_b: Payment) -> LedgerStore:
    """A's invoice X paid by B's account via cesija."""
    store.add_invoice(supplier_invoice_a)
    store.add_payment(cesija_payment_by_b)
    return store
