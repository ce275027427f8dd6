from __future__ import annotations

import pytest

from payroll_ledger.main import create_app


@pytest.fixture
def app(store, tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(store, REPORTS_DIR=str(tmp_path / "reports"))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ravi(client):
    client.post("/api/folders", json={"name": "North"})
    client.put("/api/rates", json={"folders": ["North"], "fullDay": 600, "halfDay": 250})
    worker = client.post("/api/workers", json={"name": "Ravi", "folders": ["North"]}).get_json()
    for day, status in (("2026-03-09", "present"), ("2026-03-10", "half-day")):
        resp = client.post(
            "/api/attendance",
            json={"date": day, "statuses": {worker["id"]: status}, "folders": ["North"]},
        )
        assert resp.status_code == 201
    return worker


def test_folder_crud(client):
    created = client.post("/api/folders", json={"name": "North"})
    assert created.status_code == 201

    dup = client.post("/api/folders", json={"name": "NORTH"})
    assert dup.status_code == 400 and "already exists" in dup.get_json()["error"]

    names = [f["name"] for f in client.get("/api/folders").get_json()]
    assert names == ["Default", "North"]

    default_id = client.get("/api/folders").get_json()[0]["id"]
    assert client.delete(f"/api/folders/{default_id}").status_code == 400
    assert client.delete("/api/folders/missing").status_code == 404


def test_attendance_day_view(client, ravi):
    body = client.get("/api/attendance/North?date=2026-03-10").get_json()
    assert body["workers"] == [{"workerId": ravi["id"], "name": "Ravi", "status": "half-day", "recorded": True}]

    assert client.get("/api/attendance/North").status_code == 400


def test_invalid_status_is_rejected(client, ravi):
    resp = client.post(
        "/api/attendance",
        json={"date": "2026-03-11", "statuses": {ravi["id"]: "sick"}, "folders": ["North"]},
    )
    assert resp.status_code == 400


def test_report_settles_selected_advance(client, ravi, tmp_path):
    adv = client.post(
        "/api/advances", json={"workerIds": [ravi["id"]], "amount": 300, "date": "2026-03-10"}
    )
    assert adv.status_code == 201

    resp = client.post(
        "/api/reports",
        json={
            "folder": "North",
            "startDate": "2026-03-09",
            "endDate": "2026-03-11",
            "advanceWorkerIds": [ravi["id"]],
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()
    row = body["payload"]["rows"][0]
    assert row["statuses"] == ["P", "H", "A"]
    assert row["totalPayment"] == "850"
    assert row["netPayment"] == "550"
    assert body["payload"]["notes"]["text"] == "₹500 x 1 + ₹100 x 1"

    pending = client.get("/api/advances").get_json()
    assert pending["totalPending"] == "0"

    reports = client.get("/api/reports").get_json()
    assert [r["id"] for r in reports] == [body["report"]["id"]]

    download = client.get(f"/api/reports/{body['report']['id']}/download")
    assert download.status_code == 200
    assert download.data[:2] == b"PK"
    download.close()

    assert client.delete(f"/api/reports/{body['report']['id']}").status_code == 200
    assert client.get("/api/reports").get_json() == []
    assert list((tmp_path / "reports").iterdir()) == []


def test_preview_reports_without_side_effects(client, ravi):
    client.post("/api/advances", json={"workerId": ravi["id"], "amount": 300, "date": "2026-03-10"})

    body = client.post(
        "/api/reports/preview",
        json={"folder": "North", "startDate": "2026-03-09", "endDate": "2026-03-11", "advanceWorkerIds": [ravi["id"]]},
    ).get_json()

    assert body["totals"]["netPayment"] == "550"
    assert len(body["consumedAdvances"]) == 1
    assert client.get("/api/advances").get_json()["totalPending"] == "300"


def test_report_validation_errors(client, ravi):
    bad_range = client.post(
        "/api/reports", json={"folder": "North", "startDate": "2026-03-11", "endDate": "2026-03-09"}
    )
    assert bad_range.status_code == 400

    empty = client.post("/api/reports", json={"folder": "Nowhere", "startDate": "2026-03-09", "endDate": "2026-03-09"})
    assert empty.status_code == 400

    bad_format = client.post(
        "/api/reports",
        json={"folder": "North", "startDate": "2026-03-09", "endDate": "2026-03-09", "format": "csv"},
    )
    assert bad_format.status_code == 400


def test_storage_failure_maps_to_500(client, store):
    store.fail_set.add("folders")
    resp = client.post("/api/folders", json={"name": "North"})
    assert resp.status_code == 500
    assert "error" in resp.get_json()


def test_advance_deletion(client, ravi):
    created = client.post(
        "/api/advances", json={"workerIds": [ravi["id"]], "amount": "150", "date": "2026-03-10"}
    ).get_json()

    assert client.delete(f"/api/advances/{created[0]['id']}").status_code == 200
    assert client.delete(f"/api/advances/{created[0]['id']}").status_code == 404
    assert client.delete("/api/advances", json={}).status_code == 400


def test_worker_summary_and_folder_dates(client, ravi):
    client.post("/api/advances", json={"workerId": ravi["id"], "amount": 300, "date": "2026-03-10"})

    summary = client.get(f"/api/workers/{ravi['id']}/summary").get_json()
    assert (summary["presentDays"], summary["halfDays"]) == (1, 1)
    assert summary["totalEarned"] == "850"
    assert summary["pendingAdvance"] == "300"
    assert [r["date"] for r in summary["recent"]] == ["2026-03-10", "2026-03-09"]

    dates = client.get("/api/attendance/North/dates").get_json()
    assert dates["dates"] == ["2026-03-10", "2026-03-09"]

    assert client.get("/api/workers/missing/summary").status_code == 404
