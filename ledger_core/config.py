"""Configuration management for ledger-core."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

from ledger_core.exceptions import ConfigurationError


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False
    topic_prefix: str = "dev.ledger"


@dataclass
class ReconciliationConfig:
    """Settings for the batch reconciliation pass."""

    # Difference between stored and recomputed balance that is still
    # considered equal (absorbs legacy float rounding in stored rows).
    balance_tolerance: Decimal = Decimal("0.01")
    money_places: int = 2
    update_balances: bool = True

    @property
    def quantum(self) -> Decimal:
        """Decimal quantum used when rounding money for display."""
        return Decimal(1).scaleb(-self.money_places)


@dataclass
class ScenarioConfig:
    """Configuration for scenario execution."""

    name: str
    num_companies: int = 5
    accounts_per_company: int = 2
    credits_per_company: int = 1
    invoices_per_company: int = 20
    payment_rate: float = 0.7
    cesija_rate: float = 0.1
    labels: dict[str, Any] = field(default_factory=dict)


@dataclass
class LedgerConfig:
    """Main configuration for ledger-core."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    reconciliation: ReconciliationConfig = field(default_factory=ReconciliationConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    locale: str = "hr_HR"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.ledger"),
        )

        try:
            reconciliation = ReconciliationConfig(
                balance_tolerance=Decimal(os.getenv("BALANCE_TOLERANCE", "0.01")),
                money_places=int(os.getenv("MONEY_PLACES", "2")),
                update_balances=os.getenv("UPDATE_BALANCES", "true").lower() == "true",
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ArithmeticError, ValueError) as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            kafka=kafka,
            output=output,
            reconciliation=reconciliation,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            locale=os.getenv("FAKER_LOCALE", "hr_HR"),
        )
