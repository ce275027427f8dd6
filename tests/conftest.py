from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

import pytest

from payroll_ledger.core.exceptions import StorageError


class InMemoryKeyValueStore:
    """KeyValueStore fake. Values go through JSON like the MySQL store does.

    Keys listed in `fail_get` / `fail_set` raise StorageError, to simulate an
    unavailable backend for a single collection.
    """

    def __init__(self, data: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {k: json.dumps(v) for k, v in (data or {}).items()}
        self.fail_get: set[str] = set()
        self.fail_set: set[str] = set()
        self.writes: list[str] = []
        self.reads: list[str] = []

    def get(self, key: str) -> Optional[Any]:
        if key in self.fail_get:
            raise StorageError(f"read of {key!r} failed")
        self.reads.append(key)
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        if key in self.fail_set:
            raise StorageError(f"write of {key!r} failed")
        self._data[key] = json.dumps(value, ensure_ascii=False)
        self.writes.append(key)

    def raw(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def fixed_now() -> datetime:
    # Friday
    return datetime(2026, 3, 13, 9, 0)
