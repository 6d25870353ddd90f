"""Enumeration types for accounting entities."""

from enum import Enum


class InvoiceType(str, Enum):
    """Direction/category tag of an invoice."""

    INCOMING_INVESTMENT = "INCOMING_INVESTMENT"
    OUTGOING_SALES = "OUTGOING_SALES"
    OUTGOING_BANK = "OUTGOING_BANK"
    INCOMING_SUPPLIER = "INCOMING_SUPPLIER"
    INCOMING_OFFICE = "INCOMING_OFFICE"
    OUTGOING_SUPPLIER = "OUTGOING_SUPPLIER"
    OUTGOING_OFFICE = "OUTGOING_OFFICE"
    INCOMING_BANK = "INCOMING_BANK"
    OUTGOING_RETAIL_DEVELOPMENT = "OUTGOING_RETAIL_DEVELOPMENT"
    OUTGOING_RETAIL_CONSTRUCTION = "OUTGOING_RETAIL_CONSTRUCTION"


class Direction(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class InvoiceStatus(str, Enum):
    UNPAID = "UNPAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"


class PaymentMethod(str, Enum):
    WIRE = "WIRE"
    CASH = "CASH"
    CHECK = "CHECK"
    CARD = "CARD"


class RepaymentType(str, Enum):
    """Legacy two-way cadence used only for the annuity installment."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class RepaymentFrequency(str, Enum):
    """Independent principal / interest repayment cadence."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIYEARLY = "biyearly"
    YEARLY = "yearly"


class CesijaLinkKind(str, Enum):
    """Column through which a cesija payment names its payer."""

    COMPANY = "COMPANY"
    CREDIT = "CREDIT"
    BANK_ACCOUNT = "BANK_ACCOUNT"


class ScheduleComponent(str, Enum):
    PRINCIPAL = "PRINCIPAL"
    INTEREST = "INTEREST"
