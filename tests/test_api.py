from __future__ import annotations

import pytest


def login(client, password="1616"):
    return client.post("/api/session", json={"password": password})


@pytest.fixture
def person_id(client):
    login(client)
    res = client.post("/api/people", json={"name": "Ana"})
    assert res.status_code == 201
    return res.get_json()["person"]["id"]


def test_anonymous_session_is_kiosk(client):
    res = client.get("/api/session")
    assert res.status_code == 200
    assert res.get_json()["role"] == "kiosk"


def test_wrong_password_is_401(client):
    res = login(client, "0000")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_admin_routes_reject_kiosk(client):
    res = client.post("/api/people", json={"name": "Ana"})
    assert res.status_code == 403


def test_edit_and_report_flow(client, person_id):
    base = f"/api/people/{person_id}"
    for kind, ts in (
        ("arrival", "2025-01-06T08:00:00"),
        ("break", "2025-01-06T12:00:00"),
        ("break", "2025-01-06T12:30:00"),
        ("departure", "2025-01-06T16:00:00"),
    ):
        assert client.post(f"{base}/events", json={"type": kind, "timestamp": ts}).status_code == 201

    dup = client.post(f"{base}/events", json={"type": "arrival", "timestamp": "2025-01-06T08:00:00"})
    assert dup.status_code == 409

    report = client.get(f"{base}/report?month=2025-01").get_json()["report"]
    assert report["rows"][0]["worked_minutes"] == 450
    assert report["rows"][0]["break_minutes"] == 30
    assert report["totals"]["earnings"] == 1500.0

    missing = client.delete(f"{base}/events", json={"type": "departure", "timestamp": "2025-01-06T08:00:00"})
    assert missing.status_code == 404

    edited = client.put(
        f"{base}/events",
        json={
            "old": {"type": "departure", "timestamp": "2025-01-06T16:00:00"},
            "type": "departure",
            "timestamp": "2025-01-06T17:00:00",
        },
    )
    assert edited.status_code == 200

    rows = client.get(f"{base}/report").get_json()["report"]["rows"]
    assert rows[0]["worked_minutes"] == 510
    assert rows[0]["annotation"].startswith('Manually added "Arrival" entry (6.1.2025 08:00)')
    assert rows[0]["annotation"].endswith('Time changed from "16:00" to "17:00"')

    assert client.delete(f"{base}/days/2025-01-06").status_code == 200
    assert client.get(f"{base}/events").get_json()["events"] == []


def test_unknown_kind_is_400(client, person_id):
    res = client.post(f"/api/people/{person_id}/taps/lunch")
    assert res.status_code == 400


def test_unknown_person_is_404(client):
    assert client.get("/api/people/nobody/report").status_code == 404
    assert client.post("/api/people/nobody/taps/arrival").status_code == 404


def test_tap_and_status(client, person_id):
    assert client.post(f"/api/people/{person_id}/taps/arrival").status_code == 201

    people = client.get("/api/people/status").get_json()["people"]
    assert people[0]["presence"] == "PRESENT"
    assert people[0]["since"] is not None
    assert {k: people[0][k] for k in ("id", "name")} == {"id": person_id, "name": "Ana"}


def test_absence_range(client, person_id):
    res = client.post(
        f"/api/people/{person_id}/absences",
        json={"type": "sick", "start": "2025-01-06", "end": "2025-01-08"},
    )
    assert res.status_code == 201
    assert res.get_json()["added"] == 3


def test_csv_download(client, person_id):
    res = client.get(f"/api/people/{person_id}/report.csv")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "attendance-ana.csv" in res.headers["Content-Disposition"]


def test_rates_and_health(client):
    assert client.get("/api/rates").get_json()["rates"] == {"weekday": 200.0, "weekend": 250.0}
    assert client.put("/api/rates", json={"weekday": 150, "weekend": 300}).status_code == 403

    login(client)
    assert client.put("/api/rates", json={"weekday": 150, "weekend": 300}).get_json()["rates"]["weekend"] == 300.0
    assert client.put("/api/rates", json={"weekday": -5, "weekend": 300}).status_code == 400
    assert client.get("/api/health").get_json()["store"]["available"] is True


def test_csv_download_for_non_ascii_name(client):
    login(client)
    person = client.post("/api/people", json={"name": "Tomáš Dvořák"}).get_json()["person"]

    res = client.get(f"/api/people/{person['id']}/report.csv")

    assert res.status_code == 200
    for name, value in res.headers.to_wsgi_list():
        name.encode("latin-1")
        value.encode("latin-1")
    disposition = res.headers["Content-Disposition"]
    assert "filename*=UTF-8''" in disposition
    assert "filename=attendance-tomas-dvorak.csv" in disposition


def test_edit_onto_existing_entry_is_409(client, person_id):
    base = f"/api/people/{person_id}"
    client.post(f"{base}/events", json={"type": "arrival", "timestamp": "2025-01-06T08:00:00"})
    client.post(f"{base}/events", json={"type": "arrival", "timestamp": "2025-01-06T09:00:00"})

    res = client.put(
        f"{base}/events",
        json={
            "old": {"type": "arrival", "timestamp": "2025-01-06T09:00:00"},
            "type": "arrival",
            "timestamp": "2025-01-06T08:00:00",
        },
    )

    assert res.status_code == 409
    assert len(client.get(f"{base}/events").get_json()["events"]) == 2


def test_health_reports_sessions(client):
    client.get("/api/session")
    body = client.get("/api/health").get_json()
    assert body["sessions"] >= 1
