"""Reconciliation engine: amortization, balances, cesija and batch passes."""

from ledger_core.engine.amortization import (
    ScheduledPayment,
    ScheduleSummary,
    add_months,
    compute_installment,
    iter_schedule,
    preview_schedule,
    year_fraction,
)
from ledger_core.engine.balance import BalanceResult, recompute_balance, reconcile_balance
from ledger_core.engine.cesija import (
    AnnotatedInvoice,
    CesijaResolver,
    CompanyDirectory,
    resolve_cesija_view,
)
from ledger_core.engine.classification import direction_of, is_income, sign_of
from ledger_core.engine.faults import DataIntegrityFault, InvariantBreach
from ledger_core.engine.reconciler import (
    BalanceDiscrepancy,
    InvoiceDiscrepancy,
    LedgerReconciler,
    ReconciliationReport,
)
from ledger_core.engine.reports import (
    CompanyStatistics,
    DebtSummary,
    bank_credit_totals,
    company_statistics,
    debt_summary,
    format_european_number,
)
from ledger_core.engine.settlement import (
    InvoiceSettlement,
    check_credit,
    check_invoice_totals,
    settle_invoice,
)

__all__ = [
    "AnnotatedInvoice",
    "BalanceDiscrepancy",
    "BalanceResult",
    "CesijaResolver",
    "CompanyDirectory",
    "CompanyStatistics",
    "DataIntegrityFault",
    "DebtSummary",
    "InvariantBreach",
    "InvoiceDiscrepancy",
    "InvoiceSettlement",
    "LedgerReconciler",
    "ReconciliationReport",
    "ScheduleSummary",
    "ScheduledPayment",
    "add_months",
    "bank_credit_totals",
    "check_credit",
    "check_invoice_totals",
    "company_statistics",
    "compute_installment",
    "debt_summary",
    "direction_of",
    "format_european_number",
    "is_income",
    "iter_schedule",
    "preview_schedule",
    "recompute_balance",
    "reconcile_balance",
    "resolve_cesija_view",
    "settle_invoice",
    "sign_of",
]
