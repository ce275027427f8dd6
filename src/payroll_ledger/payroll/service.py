from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from ..advances.ledger import AdvanceLedger
from ..advances.model import Advance
from ..attendance.ledger import AttendanceLedger
from ..common.datetime_utils import iter_dates, now_local, quick_range
from ..core.constants import CURRENCY_SYMBOL
from ..core.enums import AttendanceStatus, QuickRange
from ..core.exceptions import SettlementConsistencyError, StorageError, ValidationError
from ..reports.archive import ReportArchive
from ..reports.exporters.factory import ExporterFactory
from ..reports.model import ReportArtifactMeta
from ..workers.model import Worker
from ..workers.repository import WorkerDirectory
from .calculator.base import WageCalculator
from .calculator.standard_calculator import StandardWageCalculator
from .denomination import optimize_notes
from .model import GeneratedReport, ReportDraft, ReportPayload, ReportRequest, ReportRow, ReportTotals
from .rates import PaymentRates, RateBook

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PayrollSettlementService:
    """Use case: build a payroll report for a folder and settle the advances it deducts.

    Order of side effects in `generate_report`: export the file, mark consumed advances
    deducted, then record the file in the archive. A failed export leaves advances
    untouched; a failed settlement removes the exported file and records nothing.
    """

    def __init__(
        self,
        attendance: AttendanceLedger,
        advances: AdvanceLedger,
        workers: WorkerDirectory,
        rates: RateBook,
        exporters: ExporterFactory,
        archive: ReportArchive,
        *,
        reports_dir: Path,
        calculator: Optional[WageCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._advances = advances
        self._workers = workers
        self._rates = rates
        self._exporters = exporters
        self._archive = archive
        self._reports_dir = Path(reports_dir)
        self._calculator = calculator or StandardWageCalculator()
        self._clock = clock

    def pending_advances(self, folder_name: str, as_of: date) -> list[Advance]:
        return self._advances.list_unsettled_for_folder(folder_name, as_of)

    def quick_range(self, kind: QuickRange, today: Optional[date] = None) -> tuple[date, date]:
        return quick_range(QuickRange(kind), today or self._clock().date())

    def preview_report(self, request: ReportRequest) -> ReportDraft:
        if request.start_date > request.end_date:
            raise ValidationError("Start date cannot be after end date")

        self._attendance.reload()

        workers = list(self._workers.get_workers_by_folder(request.folder_name))
        if not workers:
            raise ValidationError("No workers found in this folder")

        dates = tuple(iter_dates(request.start_date, request.end_date))
        statuses = {
            (r.worker_id, r.date): r.status
            for r in self._attendance.select_loaded(request.folder_name)
        }
        rates = self._rates.rates_for(request.folder_name)

        deductible: dict[str, list[Advance]] = {}
        if request.settle_advances and request.selected_advance_worker_ids:
            for a in self._advances.list_unsettled_for_folder(request.folder_name, request.end_date):
                if a.worker_id in request.selected_advance_worker_ids:
                    deductible.setdefault(a.worker_id, []).append(a)

        rows = tuple(self._build_row(w, dates, statuses, rates, deductible.get(w.id, [])) for w in workers)
        totals = ReportTotals(
            total_payment=sum((r.total_payment for r in rows), ZERO),
            advance_deducted=sum((r.advance_deducted for r in rows), ZERO),
            net_payment=sum((r.net_payment for r in rows), ZERO),
        )
        payload = ReportPayload(
            folder_name=request.folder_name,
            start_date=request.start_date,
            end_date=request.end_date,
            dates=dates,
            rows=rows,
            totals=totals,
            denomination=optimize_notes(totals.net_payment),
        )
        consumed = tuple(a for w in workers for a in deductible.get(w.id, []))
        return ReportDraft(payload=payload, consumed_advances=consumed)

    def generate_report(self, request: ReportRequest) -> GeneratedReport:
        draft = self.preview_report(request)
        exporter = self._exporters.for_format(request.export_format)
        report_id = uuid.uuid4().hex

        try:
            path = exporter.export(draft.payload, directory=self._reports_dir, report_id=report_id)
        except Exception as e:
            logger.exception("Export failed for folder %r", request.folder_name)
            raise SettlementConsistencyError("Report could not be exported; no advances were deducted") from e

        now = self._clock()
        settled: list[Advance] = []
        if draft.consumed_advances:
            try:
                settled = self._advances.settle(
                    [a.id for a in draft.consumed_advances], request.end_date, now=now
                )
            except StorageError:
                logger.exception("Settlement write-back failed; discarding %s", path)
                Path(path).unlink(missing_ok=True)
                raise

        meta = ReportArtifactMeta(
            id=report_id,
            filename=Path(path).name,
            folder_name=request.folder_name,
            start_date=request.start_date,
            end_date=request.end_date,
            storage_path=str(path),
            created_at=now,
        )
        self._archive.record(meta)
        logger.info(
            "Generated %s for %r (%d worker(s), %d advance(s) settled)",
            meta.filename, request.folder_name, len(draft.payload.rows), len(settled),
        )
        return GeneratedReport(meta=meta, payload=draft.payload, settled_advance_ids=tuple(a.id for a in settled))

    def _build_row(
        self,
        worker: Worker,
        dates: Sequence[date],
        statuses: Mapping[tuple[str, date], AttendanceStatus],
        rates: PaymentRates,
        advances: Sequence[Advance],
    ) -> ReportRow:
        day_statuses = tuple(statuses.get((worker.id, d), AttendanceStatus.ABSENT) for d in dates)
        present = day_statuses.count(AttendanceStatus.PRESENT)
        half = day_statuses.count(AttendanceStatus.HALF_DAY)
        total = self._calculator.total_payment(present_days=present, half_days=half, rates=rates)
        deducted = sum((a.amount for a in advances), ZERO)

        return ReportRow(
            worker_id=worker.id,
            name=worker.name,
            statuses=day_statuses,
            present_count=present,
            half_day_count=half,
            full_day_rate=rates.full_day,
            half_day_rate=rates.half_day,
            total_payment=total,
            advance_deducted=deducted,
            advance_remarks=", ".join(f"{a.date.isoformat()}: {CURRENCY_SYMBOL}{a.amount}" for a in advances),
            net_payment=max(ZERO, total - deducted),
        )
