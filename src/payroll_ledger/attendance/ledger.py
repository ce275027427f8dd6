from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..core.constants import ATTENDANCE_KEY, CURRENT_ATTENDANCE_KEY
from ..core.enums import WriteMode
from ..core.exceptions import CorruptRecordError, StorageError, ValidationError
from ..database.kv_store import KeyValueStore
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Durable attendance store keyed by (folder, date) batches.

    Two collections are kept: `attendance` holds every persisted record, and
    `currentAttendance` holds the rows of the pairs touched by the most recent save.
    Reads prefer the current set for a pair so a fresh save is never returned twice.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store
        self._records: list[AttendanceRecord] = []
        self._current: list[AttendanceRecord] = []

    @property
    def records(self) -> tuple[AttendanceRecord, ...]:
        return tuple(self._records)

    def reload(self) -> None:
        """Resynchronize the cached view from the store. Errors propagate."""
        self._records = self._load(ATTENDANCE_KEY)
        self._current = self._load(CURRENT_ATTENDANCE_KEY)


    def save_batch(self, records: Sequence[AttendanceRecord], *, mode: WriteMode = WriteMode.REPLACE) -> None:
        """Write a batch.

        REPLACE drops every stored row of each (folder, date) pair in the batch before
        inserting, so workers left out of the batch lose their record for that day.
        MERGE only replaces rows of the same worker.
        """
        records = list(records)
        if not records:
            return

        seen: set[tuple[str, date, str]] = set()
        for r in records:
            key = (r.folder_name, r.date, r.worker_id)
            if key in seen:
                raise ValidationError(f"Duplicate attendance for worker {r.worker_id} in {r.folder_name} on {r.date}")
            seen.add(key)

        pairs = {r.pair for r in records}
        stored, unreadable = self._load_with_unreadable(ATTENDANCE_KEY)
        if mode == WriteMode.MERGE:
            kept = [r for r in stored if (r.folder_name, r.date, r.worker_id) not in seen]
        else:
            kept = [r for r in stored if r.pair not in pairs]

        final = kept + records
        current = [r for r in final if r.pair in pairs]

        self._write(ATTENDANCE_KEY, final, unreadable)
        self._write(CURRENT_ATTENDANCE_KEY, current)
        self._records = final
        self._current = current
        logger.info("Saved %d attendance record(s) for %d folder/date pair(s) (%s)", len(records), len(pairs), mode.value)

    def query_by_folder(self, folder_name: str, work_date: Optional[date] = None) -> list[AttendanceRecord]:
        """Records of a folder, for one date or (work_date=None) every date."""
        try:
            self.reload()
        except StorageError:
            logger.exception("Failed to load attendance for folder %r", folder_name)
            return []
        return self.select_loaded(folder_name, work_date)

    def select_loaded(self, folder_name: str, work_date: Optional[date] = None) -> list[AttendanceRecord]:
        """Like `query_by_folder` but over the view of the last reload or save; never reads the store."""

        def matches(r: AttendanceRecord) -> bool:
            return r.folder_name == folder_name and (work_date is None or r.date == work_date)

        current = [r for r in self._current if matches(r)]
        current_pairs = {r.pair for r in current}
        persisted = [r for r in self._records if matches(r) and r.pair not in current_pairs]
        return current + persisted

    def delete_by_folder_and_date(self, folder_name: str, work_date: date) -> None:
        self._remove_where(lambda r: r.folder_name == folder_name and r.date == work_date)

    def delete_by_folder(self, folder_name: str) -> None:
        self._remove_where(lambda r: r.folder_name == folder_name)

    def _remove_where(self, predicate) -> None:
        stored, unreadable = self._load_with_unreadable(ATTENDANCE_KEY)
        remaining = [r for r in stored if not predicate(r)]
        self._write(ATTENDANCE_KEY, remaining, unreadable)
        self._records = remaining

        stored_current, unreadable_current = self._load_with_unreadable(CURRENT_ATTENDANCE_KEY)
        current = [r for r in stored_current if not predicate(r)]
        if len(current) != len(stored_current):
            self._write(CURRENT_ATTENDANCE_KEY, current, unreadable_current)
        self._current = current
        logger.info("Deleted %d attendance record(s)", len(stored) - len(remaining))

    def _load(self, key: str) -> list[AttendanceRecord]:
        return self._load_with_unreadable(key)[0]

    def _load_with_unreadable(self, key: str) -> tuple[list[AttendanceRecord], list[Any]]:
        """Parsed records plus the raw items that failed validation, in stored order."""
        raw = self._store.get(key)
        if raw is None:
            return [], []
        if not isinstance(raw, list):
            raise CorruptRecordError(f"{key!r} must hold a list, got {type(raw).__name__}")

        records, unreadable = [], []
        for item in raw:
            try:
                records.append(AttendanceRecord.from_dict(item))
            except CorruptRecordError as e:
                logger.warning("Skipping malformed row in %r: %s", key, e)
                unreadable.append(item)
        return records, unreadable

    def _write(self, key: str, records: Sequence[AttendanceRecord], unreadable: Sequence[Any] = ()) -> None:
        # Unreadable rows are written back untouched.
        if unreadable:
            logger.warning("Keeping %d unreadable row(s) in %r as stored", len(unreadable), key)
        self._store.set(key, list(unreadable) + [r.to_dict() for r in records])
