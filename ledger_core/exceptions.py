"""Custom exception hierarchy for ledger-core."""


class LedgerCoreError(Exception):
    """Base exception for all ledger-core errors."""


class EntityNotFoundError(LedgerCoreError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(LedgerCoreError):
    """Raised when an entity is in an invalid state for the operation."""


class DataIntegrityError(LedgerCoreError):
    """Raised when a ledger row cannot be classified or attributed."""


class UnknownInvoiceTypeError(DataIntegrityError):
    """Raised when an invoice direction tag is outside the closed set."""


class InvariantViolationError(LedgerCoreError):
    """Raised when a recomputed entity breaks one of its invariants."""


class ConfigurationError(LedgerCoreError):
    """Raised when configuration is invalid or missing."""


class SinkError(LedgerCoreError):
    """Raised when a sink operation fails."""
