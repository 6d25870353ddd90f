"""Records for problems found while reconciling, reported instead of raised."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DataIntegrityFault:
    """A ledger row excluded from a computation because it cannot be trusted."""

    entity_type: str  # payment, invoice, ...
    entity_id: str
    reason: str


@dataclass(frozen=True)
class InvariantBreach:
    """An entity skipped by the batch pass because an invariant failed."""

    entity_type: str
    entity_id: str
    reason: str
