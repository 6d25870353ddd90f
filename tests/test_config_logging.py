"""Tests for config and logging."""

import json
import logging
import os
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from ledger_core.config import (
    KafkaConfig,
    LedgerConfig,
    OutputConfig,
    ReconciliationConfig,
    ScenarioConfig,
)
from ledger_core.exceptions import ConfigurationError
from ledger_core.logging import JsonFormatter, setup_logging


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.retries == 3

    def test_to_dict(self) -> None:
        config = KafkaConfig(bootstrap_servers="kafka:9092", compression="gzip")

        result = config.to_dict()

        assert result["bootstrap.servers"] == "kafka:9092"
        assert result["compression.type"] == "gzip"
        assert result["acks"] == "all"
        assert result["batch.size"] == 16384
        assert result["linger.ms"] == 5


class TestReconciliationConfig:
    """Tests for ReconciliationConfig."""

    def test_default_values(self) -> None:
        config = ReconciliationConfig()

        assert config.balance_tolerance == Decimal("0.01")
        assert config.money_places == 2
        assert config.update_balances is True

    def test_quantum(self) -> None:
        assert ReconciliationConfig(money_places=2).quantum == Decimal("0.01")
        assert ReconciliationConfig(money_places=0).quantum == Decimal("1")


class TestScenarioConfig:
    """Tests for ScenarioConfig."""

    def test_defaults(self) -> None:
        config = ScenarioConfig(name="group")

        assert config.num_companies == 5
        assert config.cesija_rate == 0.1
        assert config.labels == {}


class TestLedgerConfig:
    """Tests for LedgerConfig."""

    def test_default_values(self) -> None:
        config = LedgerConfig()

        assert isinstance(config.kafka, KafkaConfig)
        assert isinstance(config.output, OutputConfig)
        assert config.output.json_output_dir == Path("output")
        assert config.scenario is None
        assert config.seed is None
        assert config.locale == "hr_HR"

    def test_from_env_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = LedgerConfig.from_env()

        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.output.topic_prefix == "dev.ledger"
        assert config.reconciliation.balance_tolerance == Decimal("0.01")
        assert config.log_level == "INFO"

    def test_from_env_custom(self) -> None:
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "kafka:29092",
            "OUTPUT_DIR": "/tmp/ledger",
            "PRETTY_JSON": "true",
            "TOPIC_PREFIX": "prod.ledger",
            "BALANCE_TOLERANCE": "0.5",
            "UPDATE_BALANCES": "false",
            "MONEY_PLACES": "0",
            "SEED": "7",
            "LOG_LEVEL": "DEBUG",
            "FAKER_LOCALE": "en_US",
        }
        with patch.dict(os.environ, env, clear=True):
            config = LedgerConfig.from_env()

        assert config.kafka.bootstrap_servers == "kafka:29092"
        assert config.output.json_output_dir == Path("/tmp/ledger")
        assert config.output.pretty_json is True
        assert config.output.topic_prefix == "prod.ledger"
        assert config.reconciliation.balance_tolerance == Decimal("0.5")
        assert config.reconciliation.update_balances is False
        assert config.reconciliation.quantum == Decimal("1")
        assert config.seed == 7
        assert config.log_level == "DEBUG"
        assert config.locale == "en_US"

    def test_from_env_invalid_tolerance(self) -> None:
        with patch.dict(os.environ, {"BALANCE_TOLERANCE": "abc"}, clear=True):
            with pytest.raises(ConfigurationError):
                LedgerConfig.from_env()

    def test_from_env_invalid_seed(self) -> None:
        with patch.dict(os.environ, {"SEED": "forty-two"}, clear=True):
            with pytest.raises(ConfigurationError):
                LedgerConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("ledger_core").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        logger = logging.getLogger()
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        return logging.LogRecord(
            name="ledger_core.engine",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Account %s differs",
            args=("acct-1",),
            exc_info=None,
            **kwargs,
        )

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "ledger_core.engine"
        assert data["message"] == "Account acct-1 differs"
        assert "timestamp" in data

    def test_format_merges_extra(self) -> None:
        record = self._record()
        record.extra = {"account_id": "acct-1", "difference": Decimal("5.00")}

        data = json.loads(JsonFormatter().format(record))

        assert data["account_id"] == "acct-1"
        assert data["difference"] == "5.00"

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            import sys

            record = logging.LogRecord(
                name="test",
                level=logging.ERROR,
                pathname=__file__,
                lineno=1,
                msg="failed",
                args=(),
                exc_info=sys.exc_info(),
            )

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

