from __future__ import annotations

import json
from typing import Any, Optional

from ..core.exceptions import StorageError
from .connection import DatabaseConnection
from .kv_store import KeyValueStore
from .mysql_base import db_cursor, fetchone


class MySQLKeyValueStore(KeyValueStore):
    """One row per key in `kv_store`, value kept as JSON text."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT store_value FROM kv_store WHERE store_key=%s", (key,))
            r = fetchone(cur)
        if not r or r["store_value"] is None:
            return None
        try:
            return json.loads(r["store_value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Value for {key!r} is not valid JSON") from e

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(store_key, store_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE store_value=VALUES(store_value)
                """,
                (key, payload),
            )
