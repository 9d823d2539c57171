"""Kafka publisher for loan events."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from confluent_kafka import KafkaException, Producer

from loan_origination.config import KafkaConfig
from loan_origination.exceptions import PublishError
from loan_origination.sinks.base import EventPublisher

logger = logging.getLogger(__name__)


@dataclass
class PublisherStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def increment(self, counter: str) -> None:
        """Add one to ``sent``, ``delivered`` or ``failed``; safe across threads."""
        with self._lock:
            setattr(self, counter, getattr(self, counter) + 1)

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaPublisher(EventPublisher):
    """Publish events to Kafka and wait for delivery.

    Each :meth:`publish` call produces one message and flushes the producer,
    so a return means the broker acknowledged the message.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka publisher.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = PublisherStats()

    def publish(self, topic: str, payload: bytes, key: str | None = None) -> None:
        """Send a single message and block until it is delivered or fails."""
        errors: list[Any] = []

        def on_delivery(err: Any, msg: Any) -> None:
            if err:
                self.stats.increment("failed")
                errors.append(err)
                logger.error("Delivery to %s failed: %s", topic, err)
            else:
                self.stats.increment("delivered")
                logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=payload,
                callback=on_delivery,
            )
        except (BufferError, KafkaException) as exc:
            self.stats.increment("failed")
            raise PublishError(f"produce to {topic} failed: {exc}") from exc
        self.stats.increment("sent")

        remaining = self.producer.flush(self.config.flush_timeout)
        if errors:
            raise PublishError(f"delivery to {topic} failed: {errors[0]}")
        if remaining:
            raise PublishError(
                f"delivery to {topic} timed out after {self.config.flush_timeout}s"
            )

    def close(self) -> None:
        """Flush and close the producer."""
        self.producer.flush(self.config.flush_timeout)
        logger.info(
            "Kafka publisher closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
