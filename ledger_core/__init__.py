"""Financial reconciliation core: amortization, balances and cesija resolution."""

__version__ = "0.1.0"
