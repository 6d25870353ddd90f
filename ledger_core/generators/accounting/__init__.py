"""Accounting data generators."""

from ledger_core.generators.accounting.company import BankAccountGenerator, CompanyGenerator
from ledger_core.generators.accounting.credit import CreditGenerator
from ledger_core.generators.accounting.invoice import InvoiceGenerator
from ledger_core.generators.accounting.payment import PaymentGenerator

__all__ = [
    "BankAccountGenerator",
    "CompanyGenerator",
    "CreditGenerator",
    "InvoiceGenerator",
    "PaymentGenerator",
]
