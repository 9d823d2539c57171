"""Wire configuration into a ready-to-use loan service."""

import logging

from loan_origination.config import LoanOriginationConfig
from loan_origination.ids import SnowflakeGenerator
from loan_origination.service import LoanService
from loan_origination.sinks.base import EventPublisher
from loan_origination.sinks.console import LoggingPublisher
from loan_origination.sinks.memory import InMemoryPublisher
from loan_origination.store.memory import InMemoryLoanStore

logger = logging.getLogger(__name__)


def build_publisher(config: LoanOriginationConfig) -> EventPublisher:
    """Create the publisher selected by ``config.publisher.backend``."""
    backend = config.publisher.backend
    if backend == "kafka":
        from loan_origination.sinks.kafka import KafkaPublisher

        return KafkaPublisher(config.kafka)
    if backend == "memory":
        return InMemoryPublisher()
    return LoggingPublisher()


def build_service(
    config: LoanOriginationConfig | None = None,
    publisher: EventPublisher | None = None,
) -> LoanService:
    """Build the id generator, store, publisher and service.

    Raises ``ConfigurationError`` if the id generator cannot be constructed;
    callers are expected to treat that as fatal at startup.
    """
    config = config or LoanOriginationConfig()
    id_generator = SnowflakeGenerator(node_id=config.id_generator.node_id)
    store = InMemoryLoanStore(id_generator)
    publisher = publisher or build_publisher(config)

    logger.info(
        "Loan service ready: node_id=%d, publisher=%s, topic=%s",
        config.id_generator.node_id,
        type(publisher).__name__,
        config.publisher.loan_invested_topic,
    )
    return LoanService(store, publisher, loan_invested_topic=config.publisher.loan_invested_topic)
