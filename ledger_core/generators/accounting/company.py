"""Company and bank account generators."""

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from ledger_core.generators.base import BaseGenerator
from ledger_core.generators.pool import HR_BANK_CODES, FakerPool
from ledger_core.models.accounting import BankAccount, Company


class CompanyGenerator(BaseGenerator):
    """Generate synthetic companies of a construction / real-estate group."""

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)

    def generate(self) -> Company:
        """Generate a single company.

        Returns
        -------
        Company
            Generated company with a valid OIB.
        """
        return Company(
            company_id=self.pool.uuid(),
            name=self.pool.company(),
            oib=self.pool.oib(),
            created_at=datetime.now() - timedelta(days=random.randint(365, 365 * 10)),
        )


class BankAccountGenerator(BaseGenerator):
    """Generate company bank accounts at Croatian banks."""

    def __init__(self, seed: int | None = None, pool: FakerPool | None = None) -> None:
        super().__init__(seed, pool=pool)

    def generate(self, company_id: str) -> BankAccount:
        """Generate a single account for a company.

        Parameters
        ----------
        company_id : str
            Owning company.

        Returns
        -------
        BankAccount
            Account with an opening balance and no derived balance yet.
        """
        bank_code = self.pool.bank_code()
        initial_balance = Decimal(str(random.randint(0, 500) * 1000))

        return BankAccount(
            account_id=self.pool.uuid(),
            company_id=company_id,
            bank_name=HR_BANK_CODES[bank_code],
            account_number=self.pool.iban(bank_code),
            initial_balance=initial_balance,
            created_at=datetime.now() - timedelta(days=random.randint(30, 365 * 5)),
        )

    def generate_for_company(self, company_id: str, count: int) -> Iterator[BankAccount]:
        """Generate ``count`` accounts, each at a different bank where possible."""
        bank_codes = random.sample(list(HR_BANK_CODES), k=min(count, len(HR_BANK_CODES)))
        for i in range(count):
            account = self.generate(company_id)
            if i < len(bank_codes):
                account.bank_name = HR_BANK_CODES[bank_codes[i]]
                account.account_number = self.pool.iban(bank_codes[i])
            yield account
