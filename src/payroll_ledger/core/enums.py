from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance state as stored in the `attendance` collection."""

    PRESENT = "present"
    HALF_DAY = "half-day"
    ABSENT = "absent"

    @property
    def code(self) -> str:
        """Single-letter code used in report tables."""
        return {
            AttendanceStatus.PRESENT: "P",
            AttendanceStatus.HALF_DAY: "H",
            AttendanceStatus.ABSENT: "A",
        }[self]


class WriteMode(str, Enum):
    """How `AttendanceLedger.save_batch` treats rows already stored for a (folder, date) pair.

    REPLACE discards every stored row of the pair, including workers missing from the new batch.
    MERGE only overwrites the workers present in the new batch.
    """

    REPLACE = "replace"
    MERGE = "merge"


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    PDF = "pdf"


class QuickRange(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
