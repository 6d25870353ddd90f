"""Accounting domain models."""

from ledger_core.models.accounting.company import BankAccount, Company
from ledger_core.models.accounting.credit import Credit
from ledger_core.models.accounting.enums import (
    CesijaLinkKind,
    Direction,
    InvoiceStatus,
    InvoiceType,
    PaymentMethod,
    RepaymentFrequency,
    RepaymentType,
    ScheduleComponent,
)
from ledger_core.models.accounting.invoice import Invoice
from ledger_core.models.accounting.payment import (
    CesijaLink,
    CesijaPayerRef,
    ClassifiedPayment,
    Payment,
    resolve_payer_refs,
)

__all__ = [
    "BankAccount",
    "CesijaLink",
    "CesijaLinkKind",
    "CesijaPayerRef",
    "ClassifiedPayment",
    "Company",
    "Credit",
    "Direction",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "Payment",
    "PaymentMethod",
    "RepaymentFrequency",
    "RepaymentType",
    "ScheduleComponent",
    "resolve_payer_refs",
]
