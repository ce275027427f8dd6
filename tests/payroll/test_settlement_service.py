from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from payroll_ledger.container import build_container
from payroll_ledger.core.enums import AttendanceStatus, ExportFormat, QuickRange
from payroll_ledger.core.exceptions import SettlementConsistencyError, StorageError, ValidationError
from payroll_ledger.payroll.denomination import NoteBreakdown
from payroll_ledger.payroll.model import ReportPayload, ReportRequest
from payroll_ledger.payroll.rates import PaymentRates
from payroll_ledger.reports.exporters.base import ReportExporter
from payroll_ledger.reports.exporters.factory import ExporterFactory

MON, TUE, WED = date(2026, 3, 9), date(2026, 3, 10), date(2026, 3, 11)


class RecordingExporter(ReportExporter):
    extension = "txt"
    mimetype = "text/plain"

    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.payloads: list[ReportPayload] = []

    def export(self, payload: ReportPayload, *, directory: Path, report_id: str) -> Path:
        if self.fail:
            raise OSError("disk full")
        path = self.target_path(payload, directory, report_id)
        path.write_text(f"{payload.folder_name} {payload.totals.net_payment}")
        self.payloads.append(payload)
        return path


@pytest.fixture
def exporter():
    return RecordingExporter()


@pytest.fixture
def c(store, tmp_path, fixed_now, exporter):
    return build_container(
        store=store,
        reports_dir=tmp_path / "reports",
        exporters=ExporterFactory(exporters={ExportFormat.XLSX: exporter}),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def site(c):
    """Ravi in Site A at 600/250: present Monday, half day Tuesday, nothing Wednesday."""
    ravi = c.worker_service.add_worker("Ravi", ["Site A"])
    c.rate_book.update_rates(["Site A"], PaymentRates(Decimal("600"), Decimal("250")))
    c.attendance_service.mark_attendance(
        work_date=MON, statuses={ravi.id: AttendanceStatus.PRESENT}, target_folders=["Site A"]
    )
    c.attendance_service.mark_attendance(
        work_date=TUE, statuses={ravi.id: AttendanceStatus.HALF_DAY}, target_folders=["Site A"]
    )
    return ravi


def request_for(*worker_ids: str, **kw) -> ReportRequest:
    return ReportRequest(
        folder_name="Site A",
        start_date=MON,
        end_date=WED,
        selected_advance_worker_ids=frozenset(worker_ids),
        **kw,
    )


def test_totals_without_advances(c, site):
    payload = c.settlement_service.preview_report(request_for()).payload

    row = payload.rows[0]
    assert row.codes == ["P", "H", "A"]
    assert (row.present_count, row.half_day_count) == (1, 1)
    assert row.total_payment == Decimal("850")
    assert row.net_payment == Decimal("850")
    assert payload.denomination == NoteBreakdown(1, 4)


def test_selected_advance_is_deducted_and_settled(c, site, exporter):
    adv = c.advance_ledger.create(site.id, site.name, 300, TUE)

    report = c.settlement_service.generate_report(request_for(site.id))

    row = report.payload.rows[0]
    assert row.advance_deducted == Decimal("300")
    assert row.net_payment == Decimal("550")
    assert row.advance_remarks == "2026-03-10: ₹300"
    assert report.settled_advance_ids == (adv.id,)
    assert c.advance_ledger.list_unsettled_for_folder("Site A", WED) == []
    assert Path(report.meta.storage_path).is_file()
    assert [m.id for m in c.report_archive.list_reports()] == [report.meta.id]


def test_unselected_workers_keep_their_advances(c, site):
    c.advance_ledger.create(site.id, site.name, 300, TUE)

    report = c.settlement_service.generate_report(request_for())

    assert report.payload.rows[0].advance_deducted == Decimal("0")
    assert report.settled_advance_ids == ()
    assert len(c.advance_ledger.list_unsettled_for_folder("Site A", WED)) == 1


def test_settle_flag_off_skips_deduction(c, site):
    c.advance_ledger.create(site.id, site.name, 300, TUE)

    report = c.settlement_service.generate_report(request_for(site.id, settle_advances=False))

    assert report.payload.rows[0].net_payment == Decimal("850")
    assert c.advance_ledger.total_pending() == Decimal("300")


def test_advances_after_end_date_are_not_deducted(c, site):
    c.advance_ledger.create(site.id, site.name, 300, date(2026, 3, 12))

    payload = c.settlement_service.preview_report(request_for(site.id)).payload

    assert payload.rows[0].advance_deducted == Decimal("0")


def test_net_payment_is_never_negative(c, site):
    c.advance_ledger.create(site.id, site.name, 5000, MON)

    payload = c.settlement_service.preview_report(request_for(site.id)).payload

    assert payload.rows[0].net_payment == Decimal("0")
    assert payload.totals.advance_deducted == Decimal("5000")
    assert payload.denomination == NoteBreakdown(0, 0)


def test_preview_does_not_settle_or_archive(c, site, exporter):
    c.advance_ledger.create(site.id, site.name, 300, TUE)

    draft = c.settlement_service.preview_report(request_for(site.id))

    assert len(draft.consumed_advances) == 1
    assert c.advance_ledger.total_pending() == Decimal("300")
    assert c.report_archive.list_reports() == []
    assert exporter.payloads == []


def test_start_after_end_is_rejected(c, site):
    with pytest.raises(ValidationError):
        c.settlement_service.preview_report(ReportRequest("Site A", WED, MON))


def test_empty_folder_is_rejected(c):
    with pytest.raises(ValidationError, match="No workers found"):
        c.settlement_service.preview_report(request_for())


def test_export_failure_leaves_advances_and_archive_untouched(c, site, exporter):
    c.advance_ledger.create(site.id, site.name, 300, TUE)
    exporter.fail = True

    with pytest.raises(SettlementConsistencyError):
        c.settlement_service.generate_report(request_for(site.id))

    assert c.advance_ledger.total_pending() == Decimal("300")
    assert c.report_archive.list_reports() == []


def test_settlement_write_failure_discards_file_and_archive(c, site, store, tmp_path):
    c.advance_ledger.create(site.id, site.name, 300, TUE)
    store.fail_set.add("advances")

    with pytest.raises(StorageError):
        c.settlement_service.generate_report(request_for(site.id))

    assert c.report_archive.list_reports() == []
    assert list((tmp_path / "reports").iterdir()) == []


def test_attendance_read_failure_aborts_report(c, site, store):
    store.fail_get.add("attendance")
    with pytest.raises(StorageError):
        c.settlement_service.generate_report(request_for())


def test_unsupported_format_is_rejected(c, site):
    with pytest.raises(ValidationError):
        c.settlement_service.generate_report(request_for(export_format=ExportFormat.PDF))


def test_default_rates_apply_to_folders_without_rates(c):
    w = c.worker_service.add_worker("Asha", ["Site B"])
    c.attendance_service.mark_attendance(
        work_date=MON, statuses={w.id: AttendanceStatus.PRESENT}, target_folders=["Site B"]
    )

    payload = c.settlement_service.preview_report(ReportRequest("Site B", MON, MON)).payload

    assert payload.rows[0].total_payment == Decimal("500")


def test_quick_range_uses_clock(c):
    assert c.settlement_service.quick_range(QuickRange.TODAY) == (date(2026, 3, 13), date(2026, 3, 13))
    assert c.settlement_service.quick_range(QuickRange.THIS_WEEK) == (MON, date(2026, 3, 15))
    assert c.settlement_service.quick_range(QuickRange.LAST_WEEK) == (date(2026, 3, 2), date(2026, 3, 8))


def test_regenerating_a_range_keeps_each_report_file(c, site):
    first = c.settlement_service.generate_report(request_for())
    second = c.settlement_service.generate_report(request_for())

    assert first.meta.storage_path != second.meta.storage_path

    c.report_archive.delete(first.meta.id)

    assert not Path(first.meta.storage_path).exists()
    assert Path(second.meta.storage_path).is_file()
    assert [m.id for m in c.report_archive.list_reports()] == [second.meta.id]


def test_failed_settlement_leaves_earlier_report_intact(c, site, store):
    earlier = c.settlement_service.generate_report(request_for())
    c.advance_ledger.create(site.id, site.name, 300, TUE)
    store.fail_set.add("advances")

    with pytest.raises(StorageError):
        c.settlement_service.generate_report(request_for(site.id))

    assert [m.id for m in c.report_archive.list_reports()] == [earlier.meta.id]
    assert Path(earlier.meta.storage_path).is_file()


def test_overlapping_range_does_not_deduct_settled_advance_again(c, site):
    adv = c.advance_ledger.create(site.id, site.name, 300, TUE)
    c.settlement_service.generate_report(request_for(site.id))
    settled_on = c.advance_ledger.get(adv.id).deducted_on

    again = c.settlement_service.generate_report(
        ReportRequest("Site A", TUE, WED, selected_advance_worker_ids=frozenset({site.id}))
    )

    assert again.payload.rows[0].advance_deducted == Decimal("0")
    assert again.settled_advance_ids == ()
    assert c.advance_ledger.get(adv.id).deducted_on == settled_on


def test_preview_reads_attendance_once(c, site, store):
    store.reads.clear()

    c.settlement_service.preview_report(request_for())

    assert store.reads.count("attendance") == 1
    assert store.reads.count("currentAttendance") == 1
