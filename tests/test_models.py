"""Tests for accounting models."""

from datetime import date, datetime
from decimal import Decimal

from ledger_core.models import Event
from ledger_core.models.accounting import (
    CesijaLinkKind,
    CesijaPayerRef,
    Credit,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    Payment,
    PaymentMethod,
    RepaymentFrequency,
    RepaymentType,
    resolve_payer_refs,
)


class TestEnums:
    """Tests for str enums."""

    def test_invoice_type_has_ten_tags(self) -> None:
        assert len(InvoiceType) == 10

    def test_enum_values_are_strings(self) -> None:
        assert InvoiceType.OUTGOING_SALES == "OUTGOING_SALES"
        assert RepaymentFrequency("biyearly") is RepaymentFrequency.BIYEARLY
        assert RepaymentType("yearly") is RepaymentType.YEARLY


class TestInvoice:
    """Tests for Invoice."""

    def test_remaining_defaults_to_total_minus_paid(self) -> None:
        invoice = Invoice(
            invoice_id="inv-1",
            company_id="comp-a",
            invoice_number="1",
            invoice_type=InvoiceType.OUTGOING_SALES,
            issue_date=date(2024, 1, 1),
            total_amount=Decimal("100.00"),
            paid_amount=Decimal("40.00"),
        )

        assert invoice.remaining_amount == Decimal("60.00")
        assert invoice.status == InvoiceStatus.UNPAID

    def test_explicit_remaining_is_kept(self) -> None:
        invoice = Invoice(
            invoice_id="inv-1",
            company_id="comp-a",
            invoice_number="1",
            invoice_type="LEGACY_TAG",
            issue_date=None,
            total_amount=Decimal("100.00"),
            remaining_amount=Decimal("100.00"),
        )

        assert invoice.remaining_amount == Decimal("100.00")
        assert invoice.invoice_type == "LEGACY_TAG"


class TestCredit:
    """Tests for Credit."""

    def test_available_amount(self, credit: Credit) -> None:
        credit.used_amount = Decimal("25000")

        assert credit.available_amount == Decimal("75000")

    def test_available_amount_without_principal(self, credit: Credit) -> None:
        credit.principal = None

        assert credit.available_amount == Decimal("0")


class TestPayerRefs:
    """Tests for resolve_payer_refs."""

    def test_non_cesija_has_no_refs(self) -> None:
        payment = Payment(
            payment_id="p1",
            invoice_id="inv-1",
            amount=Decimal("10"),
            payment_date=None,
            company_bank_account_id="acct-a1",
            cesija_company_id="comp-b",
        )

        assert resolve_payer_refs(payment) == ()
        assert payment.payment_method == PaymentMethod.WIRE

    def test_refs_most_specific_first(self, cesija_payment_by_b: Payment) -> None:
        cesija_payment_by_b.cesija_credit_id = "cred-b"

        refs = resolve_payer_refs(cesija_payment_by_b)

        assert refs == (
            CesijaPayerRef(CesijaLinkKind.BANK_ACCOUNT, "acct-b1"),
            CesijaPayerRef(CesijaLinkKind.CREDIT, "cred-b"),
            CesijaPayerRef(CesijaLinkKind.COMPANY, "comp-b"),
        )

    def test_company_only(self) -> None:
        payment = Payment(
            payment_id="p1",
            invoice_id="inv-1",
            amount=Decimal("10"),
            payment_date=None,
            is_cesija=True,
            cesija_company_id="comp-b",
        )

        assert resolve_payer_refs(payment) == (CesijaPayerRef(CesijaLinkKind.COMPANY, "comp-b"),)


class TestEvent:
    """Tests for the Event envelope."""

    def test_metadata_defaults_to_empty(self) -> None:
        event = Event(
            event_id="e1",
            event_type="balance.recomputed",
            event_time=datetime(2024, 1, 1),
            source="ledger-core",
            subject="acct-a1",
            data={"balance": Decimal("1")},
        )

        assert event.metadata == {}
