"""Tests for cesija (debt assignment) resolution."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_core.engine.cesija import CesijaResolver, CompanyDirectory, resolve_cesija_view
from ledger_core.models.accounting import Invoice, InvoiceType, Payment


def _invoice(invoice_id: str, company_id: str, issue_date: date | None) -> Invoice:
    return Invoice(
        invoice_id=invoice_id,
        company_id=company_id,
        invoice_number=invoice_id,
        invoice_type=InvoiceType.INCOMING_SUPPLIER,
        issue_date=issue_date,
        total_amount=Decimal("100.00"),
    )


def _cesija(payment_id: str, invoice_id: str, **payer) -> Payment:
    return Payment(
        payment_id=payment_id,
        invoice_id=invoice_id,
        amount=Decimal("100.00"),
        payment_date=date(2024, 6, 1),
        is_cesija=True,
        **payer,
    )


@pytest.fixture
def invoices() -> dict[str, Invoice]:
    return {
        "inv-x": _invoice("inv-x", "comp-a", date(2024, 3, 1)),
        "inv-y": _invoice("inv-y", "comp-b", date(2024, 5, 1)),
        "inv-z": _invoice("inv-z", "comp-c", None),
        "inv-own": _invoice("inv-own", "comp-a", date(2024, 1, 1)),
    }


@pytest.fixture
def directory(invoices: dict[str, Invoice]) -> CompanyDirectory:
    return CompanyDirectory(
        company_names={"comp-a": "Alfa", "comp-b": "Beta", "comp-c": "Gama"},
        invoices=invoices,
        account_owners={"acct-a1": "comp-a", "acct-b1": "comp-b", "acct-c1": "comp-c"},
        credit_owners={"cred-a": "comp-a"},
    )


class TestCesijaView:
    """Tests for the consolidated per-company view."""

    def test_inbound_shows_payer_name(self, invoices, directory) -> None:
        payment = _cesija("p1", "inv-x", cesija_company_id="comp-b", cesija_bank_account_id="acct-b1")

        view = resolve_cesija_view("comp-a", [invoices["inv-x"]], [payment], directory)

        assert len(view) == 1
        assert view[0].is_cesija_payment is True
        assert view[0].cesija_company_id == "comp-b"
        assert view[0].cesija_company_name == "Beta"

    def test_outbound_shows_owner_name(self, invoices, directory) -> None:
        payment = _cesija("p1", "inv-x", cesija_company_id="comp-b", cesija_bank_account_id="acct-b1")

        view = resolve_cesija_view("comp-b", [invoices["inv-y"]], [payment], directory)

        by_id = {entry.invoice_id: entry for entry in view}
        assert set(by_id) == {"inv-x", "inv-y"}
        assert by_id["inv-x"].cesija_company_name == "Alfa"
        assert by_id["inv-y"].is_cesija_payment is False

    @pytest.mark.parametrize(
        "payer",
        [
            {"cesija_company_id": "comp-a"},
            {"cesija_bank_account_id": "acct-a1"},
            {"cesija_credit_id": "cred-a"},
        ],
    )
    def test_outbound_through_any_payer_column(self, invoices, directory, payer) -> None:
        payment = _cesija("p1", "inv-y", **payer)

        view = resolve_cesija_view("comp-a", [], [payment], directory)

        assert [entry.invoice_id for entry in view] == ["inv-y"]
        assert view[0].cesija_company_id == "comp-a"
        assert view[0].cesija_company_name == "Beta"

    def test_each_invoice_appears_once(self, invoices, directory) -> None:
        # Same payment fetched by both the outbound and the inbound query
        payment = _cesija("p1", "inv-own", cesija_company_id="comp-a")
        second = _cesija("p2", "inv-own", cesija_company_id="comp-b")

        view = resolve_cesija_view(
            "comp-a", [invoices["inv-own"]], [payment, payment, second], directory
        )

        assert [entry.invoice_id for entry in view] == ["inv-own"]

    def test_first_payment_found_wins(self, invoices, directory) -> None:
        first = _cesija("p1", "inv-x", cesija_company_id="comp-b")
        second = _cesija("p2", "inv-x", cesija_company_id="comp-c")

        view = resolve_cesija_view("comp-a", [invoices["inv-x"]], [first, second], directory)

        assert view[0].cesija_company_id == "comp-b"
        assert view[0].link.payment_id == "p1"

    def test_outbound_wins_over_inbound(self, invoices, directory) -> None:
        inbound = _cesija("p-in", "inv-own", cesija_company_id="comp-b")
        outbound = _cesija("p-out", "inv-own", cesija_company_id="comp-a")

        view = resolve_cesija_view("comp-a", [invoices["inv-own"]], [inbound, outbound], directory)

        assert view[0].link.payment_id == "p-out"

    def test_sorted_by_issue_date_desc_undated_last(self, invoices, directory) -> None:
        payments = [
            _cesija("p1", "inv-z", cesija_company_id="comp-a"),
            _cesija("p2", "inv-y", cesija_company_id="comp-a"),
        ]

        view = resolve_cesija_view(
            "comp-a", [invoices["inv-own"], invoices["inv-x"]], payments, directory
        )

        assert [entry.invoice_id for entry in view] == ["inv-y", "inv-x", "inv-own", "inv-z"]

    def test_non_cesija_payments_ignored(self, invoices, directory) -> None:
        direct = Payment(
            payment_id="d1",
            invoice_id="inv-y",
            amount=Decimal("10"),
            payment_date=None,
            cesija_company_id="comp-a",
        )

        view = resolve_cesija_view("comp-a", [], [direct], directory)

        assert view == []

    def test_link_records_both_sides(self, invoices, directory) -> None:
        payment = _cesija("p1", "inv-x", cesija_bank_account_id="acct-b1")

        view = resolve_cesija_view("comp-a", [invoices["inv-x"]], [payment], directory)

        link = view[0].link
        assert link.invoice_id == "inv-x"
        assert link.owner_company_id == "comp-a"
        assert link.payer_company_id == "comp-b"


class TestCesijaFaults:
    """Tests for rows that cannot be attributed."""

    def test_unknown_invoice_is_fault(self, directory) -> None:
        resolver = CesijaResolver(directory)
        payment = _cesija("p1", "inv-missing", cesija_company_id="comp-a")

        view = resolver.resolve("comp-a", [], [payment])

        assert view == []
        assert resolver.faults[0].entity_id == "p1"
        assert "inv-missing" in resolver.faults[0].reason

    def test_unresolvable_payer_is_fault(self, invoices, directory) -> None:
        resolver = CesijaResolver(directory)
        payment = _cesija("p1", "inv-x", cesija_bank_account_id="acct-unknown")

        view = resolver.resolve("comp-a", [invoices["inv-x"]], [payment])

        assert view[0].is_cesija_payment is True
        assert view[0].cesija_company_name is None
        assert len(resolver.faults) == 1

    def test_faults_reset_per_resolve(self, invoices, directory) -> None:
        resolver = CesijaResolver(directory)
        resolver.resolve("comp-a", [], [_cesija("p1", "inv-missing", cesija_company_id="comp-a")])

        resolver.resolve("comp-a", [invoices["inv-x"]], [])

        assert resolver.faults == []

    def test_preresolved_refs_are_reused(self, invoices, directory) -> None:
        payment = _cesija("p1", "inv-y", cesija_company_id="comp-a")
        resolver = CesijaResolver(directory, payer_refs={"p1": ()})

        # No payer refs recorded, so the payment is not outbound for anyone
        assert resolver.is_outbound("comp-a", payment) is False
