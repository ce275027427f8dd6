from __future__ import annotations

from datetime import date

import pytest

from payroll_ledger.attendance.ledger import AttendanceLedger
from payroll_ledger.attendance.service import AttendanceService
from payroll_ledger.core.enums import AttendanceStatus, WriteMode
from payroll_ledger.core.exceptions import ValidationError
from payroll_ledger.workers.service import WorkerService

DAY = date(2026, 3, 9)


@pytest.fixture
def setup(store):
    workers = WorkerService(store)
    ravi = workers.add_worker("Ravi", ["Site A", "Site B"])
    sunil = workers.add_worker("Sunil", ["Site A"])
    ledger = AttendanceLedger(store)
    return AttendanceService(ledger, workers), ledger, ravi, sunil


def test_mark_attendance_writes_one_record_per_worker_per_folder(setup):
    svc, ledger, ravi, sunil = setup

    records = svc.mark_attendance(
        work_date=DAY,
        statuses={ravi.id: AttendanceStatus.PRESENT, sunil.id: AttendanceStatus.HALF_DAY},
        target_folders=["Site A", "Site B"],
    )

    assert len(records) == 4
    assert {(r.worker_id, r.folder_name) for r in ledger.query_by_folder("Site B", DAY)} == {
        (ravi.id, "Site B"),
        (sunil.id, "Site B"),
    }


def test_mark_attendance_requires_a_folder(setup):
    svc, _, ravi, _ = setup
    with pytest.raises(ValidationError):
        svc.mark_attendance(work_date=DAY, statuses={ravi.id: AttendanceStatus.PRESENT}, target_folders=[])


def test_mark_attendance_rejects_unknown_worker(setup):
    svc, ledger, _, _ = setup
    with pytest.raises(ValidationError):
        svc.mark_attendance(work_date=DAY, statuses={"ghost": AttendanceStatus.PRESENT}, target_folders=["Site A"])
    assert ledger.query_by_folder("Site A", DAY) == []


def test_get_day_defaults_unrecorded_workers_to_absent(setup):
    svc, _, ravi, sunil = setup
    svc.mark_attendance(work_date=DAY, statuses={ravi.id: AttendanceStatus.HALF_DAY}, target_folders=["Site A"])

    rows = {r.name: r for r in svc.get_day("Site A", DAY)}

    assert rows["Ravi"].status == AttendanceStatus.HALF_DAY and rows["Ravi"].recorded
    assert rows["Sunil"].status == AttendanceStatus.ABSENT and not rows["Sunil"].recorded


def test_merge_mode_is_passed_through(setup):
    svc, ledger, ravi, sunil = setup
    svc.mark_attendance(
        work_date=DAY,
        statuses={ravi.id: AttendanceStatus.PRESENT, sunil.id: AttendanceStatus.PRESENT},
        target_folders=["Site A"],
    )

    svc.mark_attendance(
        work_date=DAY,
        statuses={ravi.id: AttendanceStatus.ABSENT},
        target_folders=["Site A"],
        mode=WriteMode.MERGE,
    )

    assert len(ledger.query_by_folder("Site A", DAY)) == 2


def test_delete_day(setup):
    svc, ledger, ravi, _ = setup
    svc.mark_attendance(work_date=DAY, statuses={ravi.id: AttendanceStatus.PRESENT}, target_folders=["Site A"])

    svc.delete_day("Site A", DAY)

    assert ledger.query_by_folder("Site A") == []


def test_available_dates_are_distinct_and_newest_first(setup):
    svc, _, ravi, sunil = setup
    for day in (date(2026, 3, 10), DAY, date(2026, 3, 12)):
        svc.mark_attendance(
            work_date=day,
            statuses={ravi.id: AttendanceStatus.PRESENT, sunil.id: AttendanceStatus.ABSENT},
            target_folders=["Site A"],
        )
    svc.mark_attendance(work_date=date(2026, 3, 20), statuses={ravi.id: AttendanceStatus.PRESENT}, target_folders=["Site B"])

    assert svc.available_dates("Site A") == [date(2026, 3, 12), date(2026, 3, 10), DAY]
    assert svc.available_dates("Nowhere") == []
