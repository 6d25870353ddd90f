"""In-memory ledger storage."""

from ledger_core.store.ledger import LedgerStore

__all__ = ["LedgerStore"]
