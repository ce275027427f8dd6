from __future__ import annotations

from datetime import date

import pytest

from payroll_ledger.attendance.ledger import AttendanceLedger
from payroll_ledger.attendance.model import AttendanceRecord
from payroll_ledger.core.enums import AttendanceStatus
from payroll_ledger.core.exceptions import NotFoundError, ValidationError
from payroll_ledger.folders.service import FolderService
from payroll_ledger.workers.service import WorkerService


@pytest.fixture
def parts(store, fixed_now):
    ledger = AttendanceLedger(store)
    workers = WorkerService(store)
    return FolderService(store, ledger, workers, clock=lambda: fixed_now), ledger, workers


def test_default_folder_always_listed(parts):
    svc, _, _ = parts
    folders = svc.list_folders()
    assert [(f.name, f.is_default) for f in folders] == [("Default", True)]


def test_create_folder_rejects_duplicates(parts):
    svc, _, _ = parts
    svc.create_folder("Site A")

    with pytest.raises(ValidationError, match="already exists"):
        svc.create_folder("site a")
    assert [f.name for f in svc.list_folders()] == ["Default", "Site A"]


def test_default_folder_cannot_be_deleted(parts):
    svc, _, _ = parts
    default = svc.list_folders()[0]

    with pytest.raises(ValidationError):
        svc.delete_folder(default.id)


def test_delete_folder_removes_its_attendance(parts):
    svc, ledger, _ = parts
    site = svc.create_folder("Site A")
    day = date(2026, 3, 9)
    ledger.save_batch([AttendanceRecord("w1", day, AttendanceStatus.PRESENT, "Site A")])
    ledger.save_batch([AttendanceRecord("w1", day, AttendanceStatus.PRESENT, "Site B")])

    svc.delete_folder(site.id)

    assert ledger.query_by_folder("Site A") == []
    assert len(ledger.query_by_folder("Site B")) == 1
    assert [f.name for f in svc.list_folders()] == ["Default"]


def test_rename_folder_moves_worker_memberships(parts):
    svc, _, workers = parts
    site = svc.create_folder("Site A")
    ravi = workers.add_worker("Ravi", ["Site A"])

    svc.rename_folder(site.id, "North Site")

    assert workers.get(ravi.id).folders == ("North Site",)


def test_unknown_folder(parts):
    svc, _, _ = parts
    with pytest.raises(NotFoundError):
        svc.rename_folder("missing", "X")
