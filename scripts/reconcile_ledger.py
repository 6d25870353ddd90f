#!/usr/bin/env python3
"""Generate a group ledger, reconcile it and publish the results.

Usage:
    python scripts/reconcile_ledger.py --sink console
    python scripts/reconcile_ledger.py --sink json --output-dir output
    python scripts/reconcile_ledger.py --sink kafka --schema-registry http://localhost:8081
"""

import argparse
import logging
import sys
from decimal import Decimal

from ledger_core.config import LedgerConfig, ScenarioConfig
from ledger_core.engine import company_statistics, debt_summary, format_european_number
from ledger_core.exceptions import LedgerCoreError
from ledger_core.logging import setup_logging
from ledger_core.scenarios import GroupLedgerScenario
from ledger_core.sinks import ConsoleSink, JsonFileSink, KafkaSink

logger = logging.getLogger(__name__)


def create_sink(name: str, config: LedgerConfig, schema_registry: str | None):
    """Build the requested output sink from configuration."""
    if name == "kafka":
        return KafkaSink(
            config.kafka,
            topic_prefix=config.output.topic_prefix,
            schema_registry_url=schema_registry,
        )
    if name == "json":
        return JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    return ConsoleSink(max_records=5)


def print_statistics(scenario: GroupLedgerScenario, quantum: Decimal) -> None:
    """Print per-company totals and the largest supplier debts, rounded to ``quantum``."""
    print("\n" + "=" * 60)
    print("Companies")
    print("=" * 60)
    for company_id in scenario.store.companies:
        stats = company_statistics(scenario.store, company_id)
        print(
            f"{stats.name[:30]:30}  balance {format_european_number(stats.total_bank_balance, quantum):>16}"
            f"  profit {format_european_number(stats.profit, quantum):>16}"
        )

    print("\n" + "=" * 60)
    print("Largest supplier debts")
    print("=" * 60)
    for debt in debt_summary(scenario.store)[:10]:
        print(
            f"{(debt.counterparty_name or debt.counterparty_id)[:30]:30}"
            f"  unpaid {format_european_number(debt.total_unpaid, quantum):>16}"
            f"  invoices {debt.invoice_count}"
        )


def main() -> int:
    """Run one generate-reconcile-publish cycle."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--companies", type=int, default=5)
    parser.add_argument("--invoices", type=int, default=20, help="Invoices per company")
    parser.add_argument("--cesija-rate", type=float, default=0.1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--sink", choices=["console", "json", "kafka"], default="console")
    parser.add_argument("--schema-registry", default=None, help="Schema Registry URL (Kafka only)")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    args = parser.parse_args()

    try:
        config = LedgerConfig.from_env()
    except LedgerCoreError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, args.log_format)

    scenario_config = ScenarioConfig(
        name="group-ledger",
        num_companies=args.companies,
        invoices_per_company=args.invoices,
        cesija_rate=args.cesija_rate,
    )
    scenario = GroupLedgerScenario(
        seed=args.seed if args.seed is not None else config.seed,
        locale=config.locale,
        config=scenario_config,
        reconciliation=config.reconciliation,
    )
    scenario.generate()
    report = scenario.reconcile()

    sink = create_sink(args.sink, config, args.schema_registry)
    try:
        scenario.export([sink], report=report)
        sink.write_batch("events", report.balance_events())
    except LedgerCoreError:
        logger.exception("Publishing reconciliation results failed")
        return 1
    finally:
        sink.close()

    print_statistics(scenario, config.reconciliation.quantum)
    logger.info("Reconciliation report: %s", report.summary())
    return 0 if report.is_clean else 1


if __name__ == "__main__":
    sys.exit(main())
