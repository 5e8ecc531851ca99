"""
Thread-safe FIFO of log events awaiting upload
"""

import threading
from collections import deque
from typing import List

from .models.event import LogEvent


class EventBuffer:
    """
    Unbounded, ordered queue of pending log events

    append() is called from any thread that logs; take_batch() is called from
    the flush thread. Both hold the same lock, so a batch is taken atomically
    and an event appended afterwards can never join it.
    """

    def __init__(self):
        self._events = deque()
        self._lock = threading.Lock()

    def append(self, event: LogEvent) -> None:
        with self._lock:
            self._events.append(event)

    def take_batch(self, max_size: int) -> List[LogEvent]:
        """
        Remove and return up to max_size of the oldest events

        Args:
            max_size: Maximum number of events to return

        Returns:
            Events in append order, empty when the buffer is empty
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")

        with self._lock:
            count = min(max_size, len(self._events))
            return [self._events.popleft() for _ in range(count)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
