"""Scenarios for generating realistic ledger data sets."""

from ledger_core.scenarios.accounting import GroupLedgerScenario

__all__ = ["GroupLedgerScenario"]
