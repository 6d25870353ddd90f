"""Kafka sink for publishing ledger data and reconciliation results."""

import json
import logging
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from confluent_kafka import KafkaException, Producer
from confluent_kafka.serialization import MessageField, SerializationContext

from ledger_core.config import KafkaConfig
from ledger_core.exceptions import SinkError
from ledger_core.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

SCHEMA_NAMESPACE = "hr.ledger.core"

_MONEY = {"type": "bytes", "logicalType": "decimal", "precision": 15, "scale": 2}

# Avro schemas for entity types published with Schema Registry
AVRO_SCHEMAS = {
    "balances": {
        "type": "record",
        "name": "AccountBalance",
        "namespace": SCHEMA_NAMESPACE,
        "fields": [
            {"name": "account_id", "type": "string"},
            {"name": "initial_balance", "type": _MONEY},
            {"name": "signed_total", "type": _MONEY},
            {"name": "cesija_outflow", "type": _MONEY},
            {"name": "balance", "type": _MONEY},
            {"name": "excluded_payment_ids", "type": {"type": "array", "items": "string"}},
        ],
    },
    "payments": {
        "type": "record",
        "name": "Payment",
        "namespace": SCHEMA_NAMESPACE,
        "fields": [
            {"name": "payment_id", "type": "string"},
            {"name": "invoice_id", "type": "string"},
            {"name": "amount", "type": _MONEY},
            {"name": "payment_date", "type": ["null", {"type": "int", "logicalType": "date"}], "default": None},
            {"name": "company_bank_account_id", "type": ["null", "string"], "default": None},
            {"name": "credit_id", "type": ["null", "string"], "default": None},
            {"name": "is_cesija", "type": "boolean"},
            {"name": "cesija_company_id", "type": ["null", "string"], "default": None},
            {"name": "cesija_bank_account_id", "type": ["null", "string"], "default": None},
            {"name": "cesija_credit_id", "type": ["null", "string"], "default": None},
            {"name": "payment_method", "type": "string"},
            {"name": "reference_number", "type": ["null", "string"], "default": None},
            {"name": "description", "type": "string"},
            {"name": "created_at", "type": ["null", {"type": "long", "logicalType": "timestamp-millis"}], "default": None},
        ],
    },
}


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Output ledger records to Kafka topics.

    Entity types map to ``<topic_prefix>.<entity-type>`` topics, e.g.
    ``dev.ledger.bank-accounts``.
    """

    # Entity type to message key field; keys keep one entity's history
    # on a single partition
    KEY_FIELDS = {
        "companies": "company_id",
        "bank_accounts": "account_id",
        "credits": "company_id",
        "invoices": "company_id",
        "payments": "invoice_id",
        "balances": "account_id",
        "events": "subject",
    }

    def __init__(
        self,
        config: KafkaConfig | str,
        topic_prefix: str = "dev.ledger",
        schema_registry_url: str | None = None,
    ) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        topic_prefix : str
            Prefix of every topic written to.
        schema_registry_url : str | None
            Enables Avro serialization for the entity types in
            ``AVRO_SCHEMAS`` when given.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.topic_prefix = topic_prefix
        self.schema_registry_url = schema_registry_url
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()
        self._avro_serializers: dict[str, Any] = {}

        if schema_registry_url:
            self._init_avro_serializers()

    def _init_avro_serializers(self) -> None:
        """Initialize Avro serializers for each entity type."""
        try:
            from confluent_kafka.schema_registry import SchemaRegistryClient
            from confluent_kafka.schema_registry.avro import AvroSerializer
        except ImportError:
            logger.warning(
                "confluent-kafka[avro] not installed. Using JSON serialization. "
                "Install with: pip install 'confluent-kafka[avro]'"
            )
            return

        schema_registry_client = SchemaRegistryClient({"url": self.schema_registry_url})
        for entity_type, schema in AVRO_SCHEMAS.items():
            self._avro_serializers[entity_type] = AvroSerializer(
                schema_registry_client,
                json.dumps(schema),
                to_dict=self._to_avro_dict,
            )
        logger.info("Avro serializers initialized for: %s", list(AVRO_SCHEMAS))

    def _to_avro_dict(self, obj: Any, ctx: SerializationContext) -> dict:
        """Convert object to Avro-compatible dict."""
        if hasattr(obj, "to_record"):
            data = obj.to_record()
        elif is_dataclass(obj):
            data = asdict(obj)
        elif isinstance(obj, dict):
            data = obj
        else:
            raise SinkError(f"Cannot convert {type(obj)} to Avro dict")

        result = {}
        for key, value in data.items():
            if isinstance(value, Decimal):
                # decimal(15, 2) as big-endian two's complement of value * 100
                scaled = int(value.scaleb(2).to_integral_value())
                byte_length = max(1, (scaled.bit_length() + 8) // 8)
                result[key] = scaled.to_bytes(byte_length, byteorder="big", signed=True)
            elif isinstance(value, Enum):
                result[key] = value.value
            elif isinstance(value, datetime):
                result[key] = int(value.timestamp() * 1000)
            elif isinstance(value, date):
                result[key] = (value - date(1970, 1, 1)).days
            else:
                result[key] = value
        return result

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def topic_for(self, entity_type: str) -> str:
        """Topic an entity type is published to."""
        return f"{self.topic_prefix}.{entity_type.replace('_', '-')}"

    def _get_key(self, entity_type: str, record: Any) -> str | None:
        """Extract message key from record based on entity type."""
        key_field = self.KEY_FIELDS.get(entity_type)
        if not key_field:
            return None

        if isinstance(record, dict):
            return record.get(key_field)
        return getattr(record, key_field, None)

    def send(self, entity_type: str, record: Any, key: str | None = None) -> None:
        """Send a single record of ``entity_type``.

        Raises
        ------
        SinkError
            If the producer rejects the message.
        """
        topic = self.topic_for(entity_type)

        if entity_type in self._avro_serializers:
            ctx = SerializationContext(topic, MessageField.VALUE)
            value = self._avro_serializers[entity_type](record, ctx)
        else:
            value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(entity_type, record)

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as exc:
            raise SinkError(f"Cannot produce to {topic}: {exc}") from exc

        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records of one entity type."""
        logger.info("Writing batch to %s: %d records", self.topic_for(entity_type), len(records))

        for record in records:
            self.send(entity_type, record)

        self.flush()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
