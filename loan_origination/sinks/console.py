"""Publisher that writes events to the log instead of a broker."""

import logging

from loan_origination.sinks.base import EventPublisher

logger = logging.getLogger(__name__)


class LoggingPublisher(EventPublisher):
    """Log each message at INFO; used when no broker is configured."""

    def __init__(self) -> None:
        self.count = 0

    def publish(self, topic: str, payload: bytes, key: str | None = None) -> None:
        logger.info(
            "publish to topic %s (key=%s): %s",
            topic,
            key,
            payload.decode("utf-8", errors="replace"),
        )
        self.count += 1
