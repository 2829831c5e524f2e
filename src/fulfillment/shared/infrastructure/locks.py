"""Per-key locking for in-process stores.

``KeyedLock`` hands out one re-entrant lock per key (e.g. a product id).
Acquiring several keys at once always happens in sorted order, which
rules out lock-order deadlocks between concurrent multi-key operations.
"""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager
from typing import Dict, Iterator


class KeyedLock:
    """Registry of re-entrant locks indexed by string key."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Hold the locks of every key in *keys* for the ``with`` block."""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                lock = self._lock_for(key)
                lock.acquire()
                stack.callback(lock.release)
            yield

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
