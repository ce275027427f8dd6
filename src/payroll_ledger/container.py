from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from .advances.ledger import AdvanceLedger
from .attendance.ledger import AttendanceLedger
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.enums import ExportFormat
from .database.kv_store import KeyValueStore
from .folders.service import FolderService
from .payroll.rates import RateBook
from .payroll.service import PayrollSettlementService
from .reports.archive import ReportArchive
from .reports.exporters.factory import ExporterFactory
from .workers.service import WorkerService
from .workers.summary import WorkerSummaryService


@dataclass(frozen=True)
class Container:
    store: KeyValueStore
    default_export_format: ExportFormat

    attendance_ledger: AttendanceLedger
    advance_ledger: AdvanceLedger
    rate_book: RateBook
    report_archive: ReportArchive
    exporters: ExporterFactory

    worker_service: WorkerService
    worker_summary_service: WorkerSummaryService
    folder_service: FolderService
    attendance_service: AttendanceService
    settlement_service: PayrollSettlementService


def build_container(
    *,
    store: KeyValueStore,
    reports_dir: str | Path,
    default_export_format: str = "xlsx",
    exporters: ExporterFactory | None = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    worker_service = WorkerService(store)

    attendance_ledger = AttendanceLedger(store)
    advance_ledger = AdvanceLedger(store, worker_service, clock=clock)
    rate_book = RateBook(store)
    report_archive = ReportArchive(store)
    exporters = exporters or ExporterFactory()

    folder_service = FolderService(store, attendance_ledger, worker_service, clock=clock)
    attendance_service = AttendanceService(attendance_ledger, worker_service)
    worker_summary_service = WorkerSummaryService(worker_service, attendance_ledger, advance_ledger, rate_book)
    settlement_service = PayrollSettlementService(
        attendance_ledger,
        advance_ledger,
        worker_service,
        rate_book,
        exporters,
        report_archive,
        reports_dir=Path(reports_dir),
        clock=clock,
    )

    return Container(
        store=store,
        default_export_format=ExportFormat(default_export_format),
        attendance_ledger=attendance_ledger,
        advance_ledger=advance_ledger,
        rate_book=rate_book,
        report_archive=report_archive,
        exporters=exporters,
        worker_service=worker_service,
        worker_summary_service=worker_summary_service,
        folder_service=folder_service,
        attendance_service=attendance_service,
        settlement_service=settlement_service,
    )
