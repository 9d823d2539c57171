"""In-memory publisher for tests and local runs."""

import threading
from dataclasses import dataclass

from loan_origination.exceptions import PublishError
from loan_origination.sinks.base import EventPublisher


@dataclass(frozen=True)
class PublishedMessage:
    topic: str
    payload: bytes
    key: str | None = None


class InMemoryPublisher(EventPublisher):
    """Record every published message.

    Parameters
    ----------
    fail_with : str | None
        When set, every publish raises ``PublishError`` with this message
        and nothing is recorded.
    """

    def __init__(self, fail_with: str | None = None) -> None:
        self.fail_with = fail_with
        self._messages: list[PublishedMessage] = []
        self._lock = threading.Lock()

    def publish(self, topic: str, payload: bytes, key: str | None = None) -> None:
        if self.fail_with is not None:
            raise PublishError(self.fail_with)
        with self._lock:
            self._messages.append(PublishedMessage(topic=topic, payload=payload, key=key))

    @property
    def messages(self) -> list[PublishedMessage]:
        with self._lock:
            return list(self._messages)

    def messages_for(self, topic: str) -> list[PublishedMessage]:
        """Messages published to a single topic, in publish order."""
        return [m for m in self.messages if m.topic == topic]
