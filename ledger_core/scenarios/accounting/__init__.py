"""Accounting scenarios for multi-company ledgers."""

from ledger_core.scenarios.accounting.group_ledger import GroupLedgerScenario

__all__ = ["GroupLedgerScenario"]
