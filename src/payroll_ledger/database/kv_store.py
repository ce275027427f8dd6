from __future__ import annotations

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """Durable key-value storage for JSON-serializable values.

    No transactions: every `set` replaces the whole value of one key.
    Implementations raise StorageError when the backend fails.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError
