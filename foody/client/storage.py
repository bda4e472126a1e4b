# foody/client/storage.py
"""Durable key/value storage for client state.

Mirrors the browser's localStorage: string values under string keys. Every
operation returns a ``StorageResult`` instead of raising, so callers decide
whether a failure matters.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

DEFAULT_STORAGE_PATH = Path(os.getenv("FOODY_STORAGE", str(Path.home() / ".foody" / "storage.json")))


@dataclass(frozen=True)
class StorageResult:
    ok: bool
    value: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Optional[str] = None) -> "StorageResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "StorageResult":
        return cls(ok=False, error=error)


class MemoryStorage:
    """Process-local storage, for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> StorageResult:
        return StorageResult.success(self._data.get(key))

    def set_item(self, key: str, value: str) -> StorageResult:
        self._data[key] = value
        return StorageResult.success(value)

    def remove_item(self, key: str) -> StorageResult:
        self._data.pop(key, None)
        return StorageResult.success()


class LocalStorage:
    """JSON file holding every key; rewritten atomically on each change."""

    def __init__(self, path: Path | str = DEFAULT_STORAGE_PATH):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"Storage file is not a JSON object: {self.path}")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> StorageResult:
        try:
            value = self._read().get(key)
        except (OSError, ValueError) as e:
            return StorageResult.failure(e)
        return StorageResult.success(value if value is None else str(value))

    def set_item(self, key: str, value: str) -> StorageResult:
        try:
            data = self._read()
        except (OSError, ValueError):
            # unreadable file: start over rather than lose the new value
            data = {}
        data[key] = value
        try:
            self._write(data)
        except OSError as e:
            return StorageResult.failure(e)
        return StorageResult.success(value)

    def remove_item(self, key: str) -> StorageResult:
        try:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
        except (OSError, ValueError) as e:
            return StorageResult.failure(e)
        return StorageResult.success()
