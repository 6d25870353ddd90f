"""Console sink for inspecting ledgers and reconciliation results."""

import json
from typing import Any

from ledger_core.sinks.serialization import to_dict

RULE = "=" * 60


class ConsoleSink:
    """Print records to stdout, one JSON document per record.

    Parameters
    ----------
    pretty : bool
        Indent each JSON document.
    max_records : int | None
        Print at most this many records of a batch; the rest is only
        counted.
    """

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def _dump(self, record: Any) -> str:
        return json.dumps(
            to_dict(record),
            indent=2 if self.pretty else None,
            ensure_ascii=False,
            default=str,
        )

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print a batch of one entity type under a header."""
        print(f"\n{RULE}\nEntity: {entity_type} ({len(records)} records)\n{RULE}")

        shown = records if self.max_records is None else records[: self.max_records]
        for record in shown:
            print(self._dump(record))

        hidden = len(records) - len(shown)
        if hidden > 0:
            print(f"... and {hidden} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def close(self) -> None:
        """Print how many records of each entity type went through."""
        print(f"\n{RULE}\nConsole Sink Summary\n{RULE}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
