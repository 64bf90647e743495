"""
fairdice.beacon.history
=======================

A small in-memory ring buffer of recent rolls, most recent first.

- O(1) prepend and eviction (``deque(maxlen=...)``).
- Thread-safe for light concurrent readers/writers.
- Memory-resident only; nothing survives a restart.

Round numbers are not required to be unique: the beacon may serve the same
latest round twice, and demo rounds created within one second share a number.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterator, List, Optional

from fairdice.constants import HISTORY_CAPACITY
from fairdice.types.core import RollRecord, RoundId


class RollHistory:
    """
    Bounded history of :class:`RollRecord` items, newest first.

    When full, pushing a new record evicts the oldest one.
    """

    __slots__ = ("_cap", "_buf", "_lock")

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._cap: int = int(capacity)
        self._buf: Deque[RollRecord] = deque(maxlen=self._cap)
        self._lock = threading.RLock()

    # ------------------------ properties ------------------------

    @property
    def capacity(self) -> int:
        return self._cap

    def __len__(self) -> int:  # pragma: no cover - trivial
        with self._lock:
            return len(self._buf)

    def __iter__(self) -> Iterator[RollRecord]:
        return iter(self.snapshot())

    # ------------------------ mutation ------------------------

    def push(self, record: RollRecord) -> Optional[RollRecord]:
        """
        Prepend *record*. Returns the evicted record, if any.
        """
        with self._lock:
            evicted = self._buf[-1] if len(self._buf) == self._cap else None
            self._buf.appendleft(record)
            return evicted

    def clear(self) -> None:
        with self._lock:
            self._buf.clear()

    # ------------------------ lookup ------------------------

    def latest(self) -> Optional[RollRecord]:
        """Newest record, or None if empty."""
        with self._lock:
            return self._buf[0] if self._buf else None

    def get(self, round_id: RoundId) -> Optional[RollRecord]:
        """Newest record for *round_id* still retained, or None."""
        rid = int(round_id)
        with self._lock:
            for rec in self._buf:
                if int(rec.round) == rid:
                    return rec
        return None

    def snapshot(self) -> List[RollRecord]:
        """Copy of the buffer, newest first."""
        with self._lock:
            return list(self._buf)


__all__ = ["RollHistory"]
