# src/taskboard/core/locks.py

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator


class KeyedLocks:
    """
    One lock per storage key.

    Holding a key's lock across read -> mutate -> write makes overlapping
    mutations of the same collection apply in acquisition order instead of
    racing (last write wins). With enabled=False, hold() is a no-op.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextlib.contextmanager
    def hold(self, key: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        lock = self._lock_for(key)
        with lock:
            yield
