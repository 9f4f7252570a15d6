"""A JSON file holding one collection of documents.

Every read-modify-write runs inside ``transaction()``, which holds a lock
for the file for the whole cycle. That lock is what makes the
repositories' conditional writes (stock, coupon usage, review
uniqueness) atomic. It is process-local: run one writer process per data
directory.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from shopledger.domain.exceptions import DependencyError

DEFAULT_TIMEOUT = 5.0

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


class JsonCollection:

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._file_path = file_path.resolve()
        self._timeout = timeout
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def read(self) -> list[dict]:
        with self._locked():
            return self._load_raw()

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the records; persist them if the block exits cleanly."""
        with self._locked():
            records = self._load_raw()
            yield records
            self._persist_raw(records)

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._timeout):
            raise DependencyError(
                f"Timed out after {self._timeout}s waiting for {self._file_path.name}"
            )
        try:
            yield
        finally:
            self._lock.release()

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise DependencyError(f"Cannot read {self._file_path.name}: {exc}") from exc

    def _persist_raw(self, records: list[dict]) -> None:
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)
        except OSError as exc:
            raise DependencyError(f"Cannot write {self._file_path.name}: {exc}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def next_numeric_id(records: list[dict]) -> int:
    """Auto-assign IDs based on the existing documents."""
    return max((int(r["id"]) for r in records), default=0) + 1
