"""Event publisher interface."""

from abc import ABC, abstractmethod


class EventPublisher(ABC):
    """Fire-and-forget notification sink."""

    @abstractmethod
    def publish(self, topic: str, payload: bytes, key: str | None = None) -> None:
        """Publish ``payload`` to ``topic``; raise ``PublishError`` on failure.

        ``key`` groups related messages; brokers that partition by key keep
        messages with the same key in order.
        """

    def close(self) -> None:
        """Release any resources held by the publisher."""
