"""Domain models for the reconciliation core."""

from ledger_core.models.base import Event

__all__ = ["Event"]
