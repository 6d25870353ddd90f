"""Synthetic ledger data generators."""
