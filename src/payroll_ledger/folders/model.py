from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.exceptions import CorruptRecordError


@dataclass(frozen=True)
class WorkFolder:
    """Domain entity: a named group of workers with its own attendance and rates."""

    id: str
    name: str
    created_at: datetime
    is_default: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
            "isDefault": self.is_default,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "WorkFolder":
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Folder must be an object, got {type(raw).__name__}")
        try:
            return cls(
                id=str(raw["id"]),
                name=str(raw["name"]),
                created_at=datetime.fromisoformat(str(raw["createdAt"]).replace("Z", "+00:00")),
                is_default=bool(raw.get("isDefault", False)),
            )
        except (KeyError, ValueError) as e:
            raise CorruptRecordError(f"Invalid folder {raw!r}: {e}") from e
