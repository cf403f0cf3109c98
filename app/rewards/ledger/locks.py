"""
Per-visitor write serialization.

Withdrawal creation reads the derived balance and then inserts; holding the
visitor's lock across both steps keeps two concurrent requests from spending
the same points. Locks are reference counted and dropped once idle.
This only serializes within one process.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager


class VisitorLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}  # visitor_id -> [lock, holders]

    @contextmanager
    def hold(self, visitor_id: str):
        with self._guard:
            entry = self._locks.setdefault(visitor_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[visitor_id]

    def __len__(self):
        with self._guard:
            return len(self._locks)


visitor_locks = VisitorLocks()
