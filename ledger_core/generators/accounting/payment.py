"""Payment generator, including cesija payments."""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from ledger_core.generators.base import BaseGenerator
from ledger_core.generators.pool import FakerPool
from ledger_core.models.accounting import BankAccount, Invoice, Payment, PaymentMethod


class PaymentGenerator(BaseGenerator):
    """Generate payments against invoices.

    Amounts never exceed what is still open on the invoice, so generated
    ledgers settle without overpayment.
    """

    PAYMENT_METHODS = list(PaymentMethod)
    PAYMENT_METHOD_WEIGHTS = [0.85, 0.05, 0.02, 0.08]

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)

    def _payment_date(self, invoice: Invoice) -> date:
        issued = invoice.issue_date or datetime.now().date()
        paid_on = issued + timedelta(days=random.randint(0, 60))
        return min(paid_on, datetime.now().date())

    def _amount(self, open_amount: Decimal, full: bool) -> Decimal:
        if full:
            return open_amount
        share = Decimal(str(round(random.uniform(0.2, 0.8), 2)))
        return max(Decimal("0.01"), (open_amount * share).quantize(Decimal("0.01")))

    def generate(
        self,
        invoice: Invoice,
        open_amount: Decimal,
        bank_account_id: str | None = None,
        credit_id: str | None = None,
        full: bool = True,
    ) -> Payment:
        """Generate a direct payment booked on the company's own account.

        Parameters
        ----------
        invoice : Invoice
            Invoice being paid.
        open_amount : Decimal
            Amount still unpaid on the invoice.
        bank_account_id : str | None
            Account debited or credited.
        credit_id : str | None
            Credit the payment is drawn from.
        full : bool
            Pay the whole open amount instead of a partial one.
        """
        return Payment(
            payment_id=self.pool.uuid(),
            invoice_id=invoice.invoice_id,
            amount=self._amount(open_amount, full),
            payment_date=self._payment_date(invoice),
            company_bank_account_id=bank_account_id,
            credit_id=credit_id,
            payment_method=random.choices(
                self.PAYMENT_METHODS, weights=self.PAYMENT_METHOD_WEIGHTS, k=1
            )[0],
            reference_number=f"HR00 {invoice.invoice_number}",
            description=f"Plaćanje računa {invoice.invoice_number}",
        )

    def generate_cesija(
        self,
        invoice: Invoice,
        open_amount: Decimal,
        payer_account: BankAccount,
        full: bool = True,
    ) -> Payment:
        """Generate a cesija payment: ``payer_account`` settles someone else's invoice.

        The paying company is recorded both by account and by company id;
        the owner's own account is left empty.
        """
        return Payment(
            payment_id=self.pool.uuid(),
            invoice_id=invoice.invoice_id,
            amount=self._amount(open_amount, full),
            payment_date=self._payment_date(invoice),
            is_cesija=True,
            cesija_company_id=payer_account.company_id,
            cesija_bank_account_id=payer_account.account_id,
            payment_method=PaymentMethod.WIRE,
            reference_number=f"HR00 {invoice.invoice_number}",
            description=f"Cesija za račun {invoice.invoice_number}",
        )
