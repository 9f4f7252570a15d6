"""Key-value store port for short-lived secrets (2FA codes, admin sessions).

Whether values survive a restart, or are shared across processes, is up
to the implementation. Callers must treat a missing key as expired.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):

    @abstractmethod
    def put(self, key: str, value: dict, ttl: float) -> None:
        """Store *value* under *key* for *ttl* seconds, replacing any previous value."""

    @abstractmethod
    def get(self, key: str) -> dict | None:
        """Return the live value for *key*, or None if absent or expired."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""
