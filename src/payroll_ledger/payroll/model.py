from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ..advances.model import Advance
from ..core.enums import AttendanceStatus, ExportFormat
from ..reports.model import ReportArtifactMeta
from .denomination import NoteBreakdown


@dataclass(frozen=True)
class ReportRequest:
    folder_name: str
    start_date: date
    end_date: date
    export_format: ExportFormat = ExportFormat.XLSX
    settle_advances: bool = True
    selected_advance_worker_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ReportRow:
    """Read-model: one worker's line in a payroll report."""

    worker_id: str
    name: str
    statuses: tuple[AttendanceStatus, ...]
    present_count: int
    half_day_count: int
    full_day_rate: Decimal
    half_day_rate: Decimal
    total_payment: Decimal
    advance_deducted: Decimal
    advance_remarks: str
    net_payment: Decimal

    @property
    def codes(self) -> list[str]:
        return [s.code for s in self.statuses]


@dataclass(frozen=True)
class ReportTotals:
    total_payment: Decimal
    advance_deducted: Decimal
    net_payment: Decimal


@dataclass(frozen=True)
class ReportPayload:
    """Everything an exporter needs to render one report."""

    folder_name: str
    start_date: date
    end_date: date
    dates: tuple[date, ...]
    rows: tuple[ReportRow, ...]
    totals: ReportTotals
    denomination: NoteBreakdown


@dataclass(frozen=True)
class ReportDraft:
    """Computed report plus the advances it would settle."""

    payload: ReportPayload
    consumed_advances: tuple[Advance, ...] = ()


@dataclass(frozen=True)
class GeneratedReport:
    meta: ReportArtifactMeta
    payload: ReportPayload
    settled_advance_ids: tuple[str, ...] = ()
