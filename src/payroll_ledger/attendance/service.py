from __future__ import annotations

from datetime import date
from typing import Mapping, Sequence

from ..core.enums import AttendanceStatus, WriteMode
from ..core.exceptions import ValidationError
from ..workers.repository import WorkerDirectory
from .ledger import AttendanceLedger
from .model import AttendanceRecord, WorkerDayStatus


class AttendanceService:
    def __init__(self, ledger: AttendanceLedger, workers: WorkerDirectory):
        self._ledger = ledger
        self._workers = workers

    def mark_attendance(
        self,
        *,
        work_date: date,
        statuses: Mapping[str, AttendanceStatus],
        target_folders: Sequence[str],
        mode: WriteMode = WriteMode.REPLACE,
    ) -> list[AttendanceRecord]:
        """Save one record per worker per target folder, all for `work_date`."""
        folders = list(dict.fromkeys(f for f in target_folders if f))
        if not folders:
            raise ValidationError("Select at least one folder to submit attendance to")
        if not statuses:
            raise ValidationError("No attendance to save")

        for worker_id in statuses:
            if not self._workers.get(worker_id):
                raise ValidationError(f"Unknown worker {worker_id}")

        records = [
            AttendanceRecord(worker_id=worker_id, date=work_date, status=AttendanceStatus(status), folder_name=folder)
            for worker_id, status in statuses.items()
            for folder in folders
        ]
        self._ledger.save_batch(records, mode=mode)
        return records

    def get_day(self, folder_name: str, work_date: date) -> list[WorkerDayStatus]:
        """Every folder worker with their status that day; unrecorded workers show as absent."""
        by_worker = {r.worker_id: r.status for r in self._ledger.query_by_folder(folder_name, work_date)}
        return [
            WorkerDayStatus(
                worker_id=w.id,
                name=w.name,
                status=by_worker.get(w.id, AttendanceStatus.ABSENT),
                recorded=w.id in by_worker,
            )
            for w in self._workers.get_workers_by_folder(folder_name)
        ]

    def delete_day(self, folder_name: str, work_date: date) -> None:
        self._ledger.delete_by_folder_and_date(folder_name, work_date)

    def delete_folder_history(self, folder_name: str) -> None:
        self._ledger.delete_by_folder(folder_name)

    def available_dates(self, folder_name: str) -> list[date]:
        """Distinct dates with attendance in the folder, newest first."""
        return sorted({r.date for r in self._ledger.query_by_folder(folder_name)}, reverse=True)
