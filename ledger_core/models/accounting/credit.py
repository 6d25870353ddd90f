"""Credit (loan facility) model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ledger_core.models.accounting.enums import RepaymentFrequency, RepaymentType


@dataclass
class Credit:
    """Borrowing facility of a company.

    ``principal`` may be ``None`` on an incomplete draft; scheduling then
    reports the credit as unschedulable instead of failing.
    """

    credit_id: str
    company_id: str
    credit_name: str
    principal: Decimal | None
    annual_interest_rate: Decimal  # percentage, e.g. 6 for 6%
    start_date: date | None
    maturity_date: date | None
    grace_period_months: int = 0
    repayment_type: RepaymentType = RepaymentType.MONTHLY
    principal_repayment_frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY
    interest_repayment_frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY
    used_amount: Decimal = Decimal("0")
    repaid_amount: Decimal = Decimal("0")
    outstanding_balance: Decimal | None = None
    bank_id: str | None = None
    disbursed_to_bank_account_id: str | None = None
    created_at: datetime | None = None

    @property
    def available_amount(self) -> Decimal:
        """Undrawn part of the facility."""
        return (self.principal or Decimal("0")) - self.used_amount
