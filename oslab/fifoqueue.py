"""A thread-safe unbounded FIFO queue that serves blocked readers in arrival order."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any


class QueueEmpty(Exception):
    """Raised by a non-blocking dequeue when no item is available."""


class _Waiter:
    __slots__ = ("condition", "item", "ready")

    def __init__(self, lock: threading.Lock) -> None:
        self.condition = threading.Condition(lock)
        self.item: Any = None
        self.ready = False


class ConcurrentQueue:
    """FIFO queue; items enqueued while readers wait go to the oldest reader."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[Any] = deque()
        self._waiters: deque[_Waiter] = deque()
        self._visited = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def enqueue(self, item: Any) -> None:
        """Add ``item``, handing it straight to the longest-waiting reader if any."""
        with self._lock:
            if self._waiters:
                waiter = self._waiters.popleft()
                waiter.item = item
                waiter.ready = True
                waiter.condition.notify()
            else:
                self._items.append(item)

    def dequeue(self) -> Any:
        """Remove and return the oldest item, blocking until one is available."""
        with self._lock:
            if self._items and not self._waiters:
                self._visited += 1
                return self._items.popleft()
            waiter = _Waiter(self._lock)
            self._waiters.append(waiter)
            while not waiter.ready:
                waiter.condition.wait()
            self._visited += 1
            return waiter.item

    def try_dequeue(self) -> Any:
        """Remove and return the oldest item without blocking.

        Raises QueueEmpty when nothing is left over for non-waiting callers.
        """
        with self._lock:
            if not self._items:
                raise QueueEmpty("queue is empty")
            self._visited += 1
            return self._items.popleft()

    def visited(self) -> int:
        """Return how many items have been dequeued so far."""
        with self._lock:
            return self._visited