from __future__ import annotations

import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Protocol
from urllib.parse import quote


class KeyValueStore(Protocol):
    """
    String-keyed document store used to persist a match across restarts.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """
    Minimal in-memory store; contents are lost with the process.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._items)


class JsonFileKeyValueStore:
    """
    One file per key under base_dir. Each write goes to a temp file in the same
    directory and is moved into place, so a reader never sees a partial document.
    """

    SUFFIX = ".json"

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()

    def _path(self, key: str) -> Path:
        if not key:
            raise ValueError("key must be non-empty")
        return self._base_dir / f"{quote(key, safe='-_.')}{self.SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        with self._lock:
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None

    def set(self, key: str, value: str) -> None:
        target = self._path(key)
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=".tmp-", suffix=self.SUFFIX)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def remove(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)
