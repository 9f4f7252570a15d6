"""In-process KeyValueStore with per-key expiry.

Everything is lost on restart and nothing is shared between processes.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from shopledger.domain.repository.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[dict, float]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: dict, ttl: float) -> None:
        now = self._clock()
        with self._lock:
            self._purge(now)
            self._data[key] = (dict(value), now + ttl)

    def get(self, key: str) -> dict | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires = entry
            if expires <= self._clock():
                del self._data[key]
                return None
            return dict(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _purge(self, now: float) -> None:
        for key in [k for k, (_, expires) in self._data.items() if expires <= now]:
            del self._data[key]
