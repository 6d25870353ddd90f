#!/usr/bin/env python3
"""Generate a sample group ledger for manual validation.

Writes one JSON file per entity type, plus the repayment schedule of every
generated credit, into the ``local/`` folder (or ``--output-dir``).

Usage:
    python scripts/generate_sample_ledger.py
    python scripts/generate_sample_ledger.py --companies 3 --seed 7
"""

import argparse
import logging
from pathlib import Path

from ledger_core.config import LedgerConfig
from ledger_core.engine import compute_installment, iter_schedule, preview_schedule
from ledger_core.logging import setup_logging
from ledger_core.scenarios import GroupLedgerScenario
from ledger_core.sinks import JsonFileSink

logger = logging.getLogger(__name__)


def build_schedules(scenario: GroupLedgerScenario) -> list[dict]:
    """Preview and expanded schedule of every credit in the scenario."""
    schedules = []
    for credit in scenario.store.credits.values():
        summary = preview_schedule(credit)
        schedules.append(
            {
                "credit_id": credit.credit_id,
                "credit_name": credit.credit_name,
                "installment": compute_installment(credit),
                "summary": summary,
                "rows": list(iter_schedule(credit)),
            }
        )
    return schedules


def main() -> None:
    """Generate all sample ledger files."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--companies", type=int, default=3)
    parser.add_argument("--invoices", type=int, default=10, help="Invoices per company")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output-dir", type=Path, default=Path("local"))
    args = parser.parse_args()

    config = LedgerConfig.from_env()
    setup_logging(config.log_level)

    scenario = GroupLedgerScenario(
        num_companies=args.companies,
        invoices_per_company=args.invoices,
        seed=args.seed,
        locale=config.locale,
        reconciliation=config.reconciliation,
    )
    scenario.generate()
    report = scenario.reconcile()

    sink = JsonFileSink(args.output_dir, pretty=True)
    scenario.export([sink], report=report)
    sink.write_batch("credit_schedules", build_schedules(scenario))
    sink.write_batch(
        "cesija_views",
        [
            {"company_id": company_id, "invoices": scenario.store.cesija_view(company_id)}
            for company_id in scenario.store.companies
        ],
    )
    sink.close()

    logger.info("Sample ledger summary: %s", scenario.get_summary())


if __name__ == "__main__":
    main()
