from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import CorruptRecordError


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one worker's status for one day in one folder."""

    worker_id: str
    date: date
    status: AttendanceStatus
    folder_name: str

    @property
    def pair(self) -> tuple[str, date]:
        """Storage identity of the batch this record belongs to."""
        return self.folder_name, self.date

    def to_dict(self) -> dict:
        return {
            "workerId": self.worker_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "folderName": self.folder_name,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "AttendanceRecord":
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Attendance record must be an object, got {type(raw).__name__}")
        try:
            worker_id = raw["workerId"]
            folder_name = raw["folderName"]
            record_date = parse_iso_date(str(raw["date"])[:10])
            status = AttendanceStatus(raw["status"])
        except (KeyError, ValueError) as e:
            raise CorruptRecordError(f"Invalid attendance record {raw!r}: {e}") from e
        if not isinstance(worker_id, str) or not isinstance(folder_name, str):
            raise CorruptRecordError(f"Invalid attendance record {raw!r}")
        return cls(worker_id=worker_id, date=record_date, status=status, folder_name=folder_name)


@dataclass(frozen=True)
class WorkerDayStatus:
    """Read-model for the mark-attendance screen: a folder worker and their status that day."""

    worker_id: str
    name: str
    status: AttendanceStatus
    recorded: bool
