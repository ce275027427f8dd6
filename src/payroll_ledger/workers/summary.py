from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..advances.ledger import AdvanceLedger
from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..payroll.calculator.base import WageCalculator
from ..payroll.calculator.standard_calculator import StandardWageCalculator
from ..payroll.rates import RateBook
from .model import Worker
from .repository import WorkerDirectory

RECENT_ATTENDANCE_LIMIT = 7


@dataclass(frozen=True)
class WorkerSummary:
    """Read-model for the worker details screen."""

    worker: Worker
    present_days: int
    half_days: int
    absent_days: int
    total_earned: Decimal
    total_advance: Decimal
    pending_advance: Decimal
    recent: tuple[AttendanceRecord, ...]

    def to_dict(self) -> dict:
        return {
            "worker": self.worker.to_dict(),
            "presentDays": self.present_days,
            "halfDays": self.half_days,
            "absentDays": self.absent_days,
            "totalEarned": str(self.total_earned),
            "totalAdvance": str(self.total_advance),
            "pendingAdvance": str(self.pending_advance),
            "recent": [r.to_dict() for r in self.recent],
        }


class WorkerSummaryService:
    def __init__(
        self,
        workers: WorkerDirectory,
        attendance: AttendanceLedger,
        advances: AdvanceLedger,
        rates: RateBook,
        *,
        calculator: Optional[WageCalculator] = None,
    ):
        self._workers = workers
        self._attendance = attendance
        self._advances = advances
        self._rates = rates
        self._calculator = calculator or StandardWageCalculator()

    def summarize(self, worker_id: str, *, recent_limit: int = RECENT_ATTENDANCE_LIMIT) -> WorkerSummary:
        """Attendance counts and earnings over every folder the worker belongs to.

        Earnings are priced per folder: each folder's days at that folder's rates.
        """
        worker = self._workers.get(worker_id)
        if not worker:
            raise NotFoundError("Worker not found")

        history: list[AttendanceRecord] = []
        earned = Decimal("0")
        for folder in worker.folders:
            records = [r for r in self._attendance.query_by_folder(folder) if r.worker_id == worker.id]
            history.extend(records)
            earned += self._calculator.total_payment(
                present_days=_count(records, AttendanceStatus.PRESENT),
                half_days=_count(records, AttendanceStatus.HALF_DAY),
                rates=self._rates.rates_for(folder),
            )

        advances = [a for a in self._advances.list_all() if a.worker_id == worker.id]
        history.sort(key=lambda r: r.date, reverse=True)
        return WorkerSummary(
            worker=worker,
            present_days=_count(history, AttendanceStatus.PRESENT),
            half_days=_count(history, AttendanceStatus.HALF_DAY),
            absent_days=_count(history, AttendanceStatus.ABSENT),
            total_earned=earned,
            total_advance=sum((a.amount for a in advances), Decimal("0")),
            pending_advance=sum((a.amount for a in advances if not a.deducted), Decimal("0")),
            recent=tuple(history[:recent_limit]),
        )


def _count(records: list[AttendanceRecord], status: AttendanceStatus) -> int:
    return sum(1 for r in records if r.status == status)
