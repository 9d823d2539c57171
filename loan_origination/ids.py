"""Unique 64-bit identifiers for new loans.

Ids follow the snowflake layout::

    | 1 bit unused | 41 bits ms since epoch | 10 bits node | 12 bits sequence |

so they are positive, unique per node, and roughly time-ordered.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

from loan_origination.exceptions import ConfigurationError

# 2010-11-04T01:42:54.657Z
DEFAULT_EPOCH_MS = 1288834974657

NODE_BITS = 10
SEQUENCE_BITS = 12
MAX_NODE_ID = (1 << NODE_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
NODE_SHIFT = SEQUENCE_BITS
TIME_SHIFT = NODE_BITS + SEQUENCE_BITS


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator(ABC):
    """Source of unique loan ids."""

    @abstractmethod
    def next_id(self) -> int:
        """Return a new id, never returned before by this generator."""


class SnowflakeGenerator(IdGenerator):
    """Thread-safe snowflake id generator.

    Parameters
    ----------
    node_id : int
        Node number in ``[0, 1023]``; distinct processes sharing a key
        space must use distinct nodes.
    epoch_ms : int
        Custom epoch in Unix milliseconds. Must not lie in the future.

    Raises
    ------
    ConfigurationError
        If ``node_id`` or ``epoch_ms`` is out of range.
    """

    def __init__(
        self,
        node_id: int = 1,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if not isinstance(node_id, int) or not 0 <= node_id <= MAX_NODE_ID:
            raise ConfigurationError(f"Node id must be between 0 and {MAX_NODE_ID}, got {node_id}")
        if epoch_ms > clock():
            raise ConfigurationError("Epoch must not be in the future")

        self.node_id = node_id
        self.epoch_ms = epoch_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def next_id(self) -> int:
        """Generate the next id."""
        with self._lock:
            now = self._clock()
            if now < self._last_ms:
                # Clock went backwards: stay on the last timestamp
                now = self._last_ms

            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    # Sequence exhausted for this millisecond
                    while now <= self._last_ms:
                        time.sleep(0.0001)
                        now = self._clock()
            else:
                self._sequence = 0

            self._last_ms = now
            return (
                ((now - self.epoch_ms) << TIME_SHIFT)
                | (self.node_id << NODE_SHIFT)
                | self._sequence
            )

    def decompose(self, value: int) -> tuple[int, int, int]:
        """Split an id into (unix timestamp ms, node id, sequence)."""
        timestamp = (value >> TIME_SHIFT) + self.epoch_ms
        node = (value >> NODE_SHIFT) & MAX_NODE_ID
        sequence = value & MAX_SEQUENCE
        return timestamp, node, sequence


class SequentialIdGenerator(IdGenerator):
    """Thread-safe counter starting at ``start``, for deterministic runs."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ConfigurationError(f"Sequential ids must start at 1 or above, got {start}")
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value
