"""Event publishers and payload serialization."""

from loan_origination.sinks.base import EventPublisher
from loan_origination.sinks.console import LoggingPublisher
from loan_origination.sinks.memory import InMemoryPublisher, PublishedMessage

__all__ = ["EventPublisher", "InMemoryPublisher", "LoggingPublisher", "PublishedMessage"]
