"""Credit generator."""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from ledger_core.engine.amortization import add_months
from ledger_core.generators.base import BaseGenerator
from ledger_core.generators.pool import FakerPool
from ledger_core.models.accounting import Credit, RepaymentFrequency, RepaymentType


class CreditGenerator(BaseGenerator):
    """Generate construction and working-capital credits."""

    CREDIT_NAMES = [
        "Građevinski kredit",
        "Kredit za obrtna sredstva",
        "Investicijski kredit",
        "Okvirni kredit",
    ]

    TERM_YEARS = [1, 2, 3, 5, 7, 10]
    GRACE_MONTHS = [0, 0, 0, 3, 6, 12]

    # Principal cadence is usually sparser than interest cadence
    FREQUENCY_WEIGHTS = {
        RepaymentFrequency.MONTHLY: 0.45,
        RepaymentFrequency.QUARTERLY: 0.30,
        RepaymentFrequency.BIYEARLY: 0.10,
        RepaymentFrequency.YEARLY: 0.15,
    }

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)

    def generate(
        self,
        company_id: str,
        disbursed_to_bank_account_id: str | None = None,
        bank_id: str | None = None,
        start_date: date | None = None,
    ) -> Credit:
        """Generate a credit with consistent usage figures.

        Parameters
        ----------
        company_id : str
            Borrowing company.
        disbursed_to_bank_account_id : str | None
            Account the credit pays out to.
        bank_id : str | None
            Lending bank.
        start_date : date | None
            Start of the facility; random within the last two years if omitted.

        Returns
        -------
        Credit
            Credit whose ``outstanding_balance`` equals principal - repaid.
        """
        principal = Decimal(str(random.randint(10, 500) * 10000))
        rate = Decimal(str(round(random.uniform(1.5, 7.5), 2)))

        if start_date is None:
            start_date = (datetime.now() - timedelta(days=random.randint(30, 730))).date()
        maturity_date = add_months(start_date, 12 * random.choice(self.TERM_YEARS))

        frequencies = list(self.FREQUENCY_WEIGHTS)
        weights = list(self.FREQUENCY_WEIGHTS.values())

        used = (principal * Decimal(str(round(random.uniform(0.2, 1.0), 2)))).quantize(Decimal("0.01"))
        repaid = (used * Decimal(str(round(random.uniform(0.0, 0.5), 2)))).quantize(Decimal("0.01"))

        return Credit(
            credit_id=self.pool.uuid(),
            company_id=company_id,
            credit_name=random.choice(self.CREDIT_NAMES),
            principal=principal,
            annual_interest_rate=rate,
            start_date=start_date,
            maturity_date=maturity_date,
            grace_period_months=random.choice(self.GRACE_MONTHS),
            repayment_type=random.choice(list(RepaymentType)),
            principal_repayment_frequency=random.choices(frequencies, weights=weights, k=1)[0],
            interest_repayment_frequency=random.choices(frequencies, weights=weights, k=1)[0],
            used_amount=used,
            repaid_amount=repaid,
            outstanding_balance=principal - repaid,
            bank_id=bank_id,
            disbursed_to_bank_account_id=disbursed_to_bank_account_id,
            created_at=datetime.combine(start_date, datetime.min.time()),
        )
