"""
Exchange Adapters - Simulated Order Ids.

Per-adapter counter handing out fake order ids while the adapter
runs in simulate mode. Ids are "1", "2", ... for the lifetime of
the adapter instance and are never persisted.
"""

import itertools
import threading


class SimulatedOrderIds:
    """Thread-safe, strictly increasing order id source."""

    def __init__(self, start: int = 1):
        self._start = start
        self._counter = itertools.count(start)
        self._last = start - 1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            self._last = next(self._counter)
            return str(self._last)

    def issued(self, order_id: str) -> bool:
        """Whether order_id was handed out by this counter."""
        try:
            value = int(order_id)
        except (TypeError, ValueError):
            return False
        with self._lock:
            return self._start <= value <= self._last
