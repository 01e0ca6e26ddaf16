from __future__ import annotations

import threading
from typing import Callable, Dict, Optional


class InMemoryStore:
    """Thread-safe in-memory store with coarse-grained lock.

    For single-process use; buckets are never evicted.
    """

    def __init__(self) -> None:
        self._data: Dict[str, dict] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[dict]:
        with self._lock:
            return self._data.get(key)

    def update(self, key: str, fn: Callable[[Optional[dict]], dict]) -> dict:
        """Atomically read-modify-write the value for key and return the new value."""
        with self._lock:
            new_value = fn(self._data.get(key))
            self._data[key] = new_value
            return new_value
