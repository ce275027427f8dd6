from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.exceptions import CorruptRecordError


@dataclass(frozen=True)
class Worker:
    """Domain entity: a worker and the folders they belong to."""

    id: str
    name: str
    folders: tuple[str, ...] = ()

    def in_folder(self, folder_name: str) -> bool:
        return folder_name in self.folders

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "folders": list(self.folders)}

    @classmethod
    def from_dict(cls, raw: Any) -> "Worker":
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Worker must be an object, got {type(raw).__name__}")
        worker_id, name, folders = raw.get("id"), raw.get("name"), raw.get("folders", [])
        if not isinstance(worker_id, str) or not isinstance(name, str) or not isinstance(folders, list):
            raise CorruptRecordError(f"Invalid worker {raw!r}")
        return cls(id=worker_id, name=name, folders=tuple(str(f) for f in folders))
