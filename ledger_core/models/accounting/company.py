"""Company and bank account models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Company:
    """Legal entity owning bank accounts, credits and invoices."""

    company_id: str
    name: str
    oib: str  # 11-digit Croatian tax id
    created_at: datetime | None = None


@dataclass
class BankAccount:
    """Company bank account.

    ``current_balance`` is derived: it is recomputed from the payment log
    and must not be edited by hand once payments exist.
    """

    account_id: str
    company_id: str
    bank_name: str
    account_number: str  # IBAN
    initial_balance: Decimal
    current_balance: Decimal | None = None
    created_at: datetime | None = None
