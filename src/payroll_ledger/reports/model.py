from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import CorruptRecordError


@dataclass(frozen=True)
class ReportArtifactMeta:
    """Bookkeeping for one generated report file."""

    id: str
    filename: str
    folder_name: str
    start_date: date
    end_date: date
    storage_path: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.filename,
            "folder": self.folder_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "path": self.storage_path,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "ReportArtifactMeta":
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Report entry must be an object, got {type(raw).__name__}")
        try:
            return cls(
                id=str(raw["id"]),
                filename=str(raw["name"]),
                folder_name=str(raw["folder"]),
                start_date=parse_iso_date(str(raw["startDate"])[:10]),
                end_date=parse_iso_date(str(raw["endDate"])[:10]),
                storage_path=str(raw["path"]),
                created_at=datetime.fromisoformat(str(raw["createdAt"]).replace("Z", "+00:00")),
            )
        except (KeyError, ValueError) as e:
            raise CorruptRecordError(f"Invalid report entry {raw!r}: {e}") from e
