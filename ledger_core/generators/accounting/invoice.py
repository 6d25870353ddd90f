"""Invoice generator."""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from ledger_core.generators.base import BaseGenerator
from ledger_core.generators.pool import FakerPool
from ledger_core.models.accounting import Invoice, InvoiceType

# Share of each invoice type in a typical group ledger
INVOICE_TYPE_WEIGHTS = {
    InvoiceType.OUTGOING_SALES: 0.25,
    InvoiceType.INCOMING_SUPPLIER: 0.25,
    InvoiceType.INCOMING_OFFICE: 0.10,
    InvoiceType.OUTGOING_SUPPLIER: 0.08,
    InvoiceType.OUTGOING_OFFICE: 0.05,
    InvoiceType.INCOMING_INVESTMENT: 0.05,
    InvoiceType.INCOMING_BANK: 0.07,
    InvoiceType.OUTGOING_BANK: 0.05,
    InvoiceType.OUTGOING_RETAIL_DEVELOPMENT: 0.05,
    InvoiceType.OUTGOING_RETAIL_CONSTRUCTION: 0.05,
}

# Invoice amount ranges in whole euros by type
AMOUNT_RANGES = {
    InvoiceType.OUTGOING_SALES: (20_000, 400_000),
    InvoiceType.INCOMING_SUPPLIER: (1_000, 150_000),
    InvoiceType.INCOMING_OFFICE: (50, 5_000),
    InvoiceType.OUTGOING_SUPPLIER: (1_000, 80_000),
    InvoiceType.OUTGOING_OFFICE: (50, 3_000),
    InvoiceType.INCOMING_INVESTMENT: (50_000, 1_000_000),
    InvoiceType.INCOMING_BANK: (500, 50_000),
    InvoiceType.OUTGOING_BANK: (500, 50_000),
    InvoiceType.OUTGOING_RETAIL_DEVELOPMENT: (5_000, 200_000),
    InvoiceType.OUTGOING_RETAIL_CONSTRUCTION: (5_000, 200_000),
}

VAT_RATE = Decimal("0.25")


class InvoiceGenerator(BaseGenerator):
    """Generate invoices raised by or against a company."""

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)
        self._counter = 0

    def generate(
        self,
        company_id: str,
        bank_account_id: str | None = None,
        invoice_type: InvoiceType | None = None,
        issue_date: date | None = None,
    ) -> Invoice:
        """Generate a single unpaid invoice.

        Parameters
        ----------
        company_id : str
            Owning company.
        bank_account_id : str | None
            Account the invoice is settled through.
        invoice_type : InvoiceType | None
            Direction tag; drawn from the typical mix if omitted.
        issue_date : date | None
            Issue date; random within the last year if omitted.

        Returns
        -------
        Invoice
            Invoice with ``remaining_amount == total_amount``.
        """
        if invoice_type is None:
            invoice_type = random.choices(
                list(INVOICE_TYPE_WEIGHTS), weights=list(INVOICE_TYPE_WEIGHTS.values()), k=1
            )[0]
        if issue_date is None:
            issue_date = (datetime.now() - timedelta(days=random.randint(0, 365))).date()

        low, high = AMOUNT_RANGES[invoice_type]
        total = Decimal(random.randint(low * 100, high * 100)) / 100
        # Gross total already includes VAT; the VAT part is carried as is
        vat = (total * VAT_RATE / (1 + VAT_RATE)).quantize(Decimal("0.01"))

        self._counter += 1
        return Invoice(
            invoice_id=self.pool.uuid(),
            company_id=company_id,
            invoice_number=f"{self._counter}-{issue_date:%y}-{random.randint(1, 99):02d}",
            invoice_type=invoice_type,
            issue_date=issue_date,
            total_amount=total,
            vat_amount=vat,
            bank_account_id=bank_account_id,
            counterparty_id=self.pool.uuid(),
            counterparty_name=self.pool.company(),
            created_at=datetime.combine(issue_date, datetime.min.time()),
        )
