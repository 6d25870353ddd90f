"""Output sinks for exporting ledger data and reconciliation results."""

from ledger_core.sinks.console import ConsoleSink
from ledger_core.sinks.json_file import JsonFileSink
from ledger_core.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
