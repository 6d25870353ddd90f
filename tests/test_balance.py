"""Tests for bank account balance recomputation."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_core.engine.balance import recompute_balance, reconcile_balance
from ledger_core.models.accounting import (
    BankAccount,
    ClassifiedPayment,
    InvoiceType,
    Payment,
)


def _payment(payment_id: str, amount: str, **kwargs) -> Payment:
    return Payment(
        payment_id=payment_id,
        invoice_id=f"inv-{payment_id}",
        amount=Decimal(amount),
        payment_date=date(2024, 5, 1),
        **kwargs,
    )


@pytest.fixture
def history() -> list[ClassifiedPayment]:
    """Sales receipt, supplier payment and an unrelated account's payment."""
    return [
        ClassifiedPayment(
            _payment("p1", "500.00", company_bank_account_id="acct-a1"),
            InvoiceType.OUTGOING_SALES,
        ),
        ClassifiedPayment(
            _payment("p2", "120.00", company_bank_account_id="acct-a1"),
            InvoiceType.INCOMING_SUPPLIER,
        ),
        ClassifiedPayment(
            _payment("p3", "999.00", company_bank_account_id="acct-other"),
            InvoiceType.OUTGOING_SALES,
        ),
    ]


class TestRecomputeBalance:
    """Tests for recompute_balance."""

    def test_signed_sum(self, account_a: BankAccount, history: list[ClassifiedPayment]) -> None:
        assert recompute_balance(account_a, history) == Decimal("1380.00")

    def test_no_payments_is_initial_balance(self, account_a: BankAccount) -> None:
        assert recompute_balance(account_a, []) == account_a.initial_balance

    def test_idempotent(self, account_a: BankAccount, history: list[ClassifiedPayment]) -> None:
        first = recompute_balance(account_a, history)
        second = recompute_balance(account_a, history)

        assert first == second
        assert account_a.initial_balance == Decimal("1000.00")

    def test_adding_payment_moves_balance_by_signed_amount(
        self, account_a: BankAccount, history: list[ClassifiedPayment]
    ) -> None:
        before = recompute_balance(account_a, history)
        extra = ClassifiedPayment(
            _payment("p4", "75.50", company_bank_account_id="acct-a1"),
            InvoiceType.OUTGOING_OFFICE,
        )

        after = recompute_balance(account_a, [*history, extra])

        assert after - before == Decimal("-75.50")

    def test_cesija_outflow_bypasses_sign_table(self, account_b: BankAccount) -> None:
        # Income-tagged invoice, but a cesija payment is always an outflow
        payment = _payment(
            "c1",
            "200.00",
            is_cesija=True,
            cesija_company_id="comp-b",
            cesija_bank_account_id="acct-b1",
            company_bank_account_id="acct-b1",
        )

        result = reconcile_balance(account_b, [ClassifiedPayment(payment, InvoiceType.OUTGOING_SALES)])

        assert result.cesija_outflow == Decimal("200.00")
        assert result.signed_total == Decimal("0")
        assert result.balance == Decimal("4800.00")

    def test_cesija_paid_by_other_account_is_ignored(self, account_a: BankAccount) -> None:
        payment = _payment(
            "c1",
            "200.00",
            is_cesija=True,
            cesija_bank_account_id="acct-b1",
            company_bank_account_id="acct-a1",
        )

        result = reconcile_balance(account_a, [ClassifiedPayment(payment, InvoiceType.INCOMING_SUPPLIER)])

        assert result.balance == account_a.initial_balance
        assert result.faults == []


class TestReconcileBalanceFaults:
    """Tests for excluded rows."""

    def test_unknown_invoice_type_is_excluded(self, account_a: BankAccount, history: list[ClassifiedPayment]) -> None:
        dirty = ClassifiedPayment(
            _payment("bad", "50.00", company_bank_account_id="acct-a1"),
            "OUTGOING_MYSTERY",
        )

        result = reconcile_balance(account_a, [*history, dirty])

        assert result.balance == Decimal("1380.00")
        assert result.excluded_payment_ids == ["bad"]
        assert result.faults[0].entity_id == "bad"
        assert "OUTGOING_MYSTERY" in result.faults[0].reason

    def test_non_positive_amount_is_excluded(self, account_a: BankAccount) -> None:
        zero = ClassifiedPayment(
            _payment("zero", "0", company_bank_account_id="acct-a1"),
            InvoiceType.OUTGOING_SALES,
        )

        result = reconcile_balance(account_a, [zero])

        assert result.excluded_payment_ids == ["zero"]
        assert result.balance == account_a.initial_balance

    def test_fault_is_logged(
        self, account_a: BankAccount, caplog: pytest.LogCaptureFixture
    ) -> None:
        dirty = ClassifiedPayment(
            _payment("bad", "50.00", company_bank_account_id="acct-a1"),
            "LEGACY",
        )

        with caplog.at_level("WARNING", logger="ledger_core.engine.balance"):
            reconcile_balance(account_a, [dirty])

        assert "Excluding payment bad" in caplog.text


class TestBalanceRecord:
    """Tests for the sink record of a balance."""

    def test_to_record_includes_balance(self, account_a: BankAccount, history: list[ClassifiedPayment]) -> None:
        record = reconcile_balance(account_a, history).to_record()

        assert record["account_id"] == "acct-a1"
        assert record["balance"] == Decimal("1380.00")
        assert record["signed_total"] == Decimal("380.00")
        assert record["excluded_payment_ids"] == []
