from datetime import datetime

import pytest

from controllers.lunch_controller import taken_minutes
from models.attendance import Attendance, Ping
from models.lunch import LunchLog, LunchTime


def h(employee_id):
    return {"x-user-id": employee_id}


@pytest.fixture()
def staff(make_role, make_employee):
    return {
        "clerk": make_employee("Clerk", role=make_role("Clerk", canCheckIn=True)),
        "visitor": make_employee("Visitor"),
        "auditor": make_employee("Auditor", role=make_role("Auditor", canViewReports=True)),
    }


# -----------------------------
# ATTENDANCE
# -----------------------------
def test_check_in_records_name_and_image(client, staff):
    resp = client.post("/api/attendance", headers=h(staff["clerk"]),
                       json={"type": "checkin", "imageData": "data:image/png;base64,AAAA"})
    assert resp.status_code == 201

    record = Attendance.collection().find_one()
    assert record["employeeId"] == staff["clerk"]
    assert record["employeeName"] == "Clerk"
    assert record["imageData"] == "data:image/png;base64,AAAA"


def test_check_in_rules(client, admin_client, staff):
    assert client.post("/api/attendance", json={"type": "checkin"}).status_code == 401
    assert client.post("/api/attendance", headers=h(staff["visitor"]), json={"type": "checkin"}).status_code == 403
    assert admin_client.post("/api/attendance", json={"type": "checkin"}).status_code == 403
    assert client.post("/api/attendance", headers=h(staff["clerk"]), json={"type": "lunch"}).status_code == 400
    assert client.post("/api/attendance", headers=h(staff["clerk"]),
                       json={"type": "checkout", "imageData": 12}).status_code == 400
    assert Attendance.collection().count_documents({}) == 0


def test_recent_attendance_scoping(client, staff):
    client.post("/api/attendance", headers=h(staff["clerk"]), json={"type": "checkin"})
    Attendance(staff["visitor"], "Visitor", "checkin").save()

    own = client.get("/api/attendance", headers=h(staff["clerk"])).get_json()["records"]
    assert {r["employeeId"] for r in own} == {staff["clerk"]}

    peek = client.get(f"/api/attendance?employeeId={staff['visitor']}", headers=h(staff["clerk"]))
    assert peek.status_code == 403

    everyone = client.get("/api/attendance", headers=h(staff["auditor"])).get_json()["records"]
    assert len(everyone) == 2
    one = client.get(f"/api/attendance?employeeId={staff['visitor']}", headers=h(staff["auditor"]))
    assert [r["employeeId"] for r in one.get_json()["records"]] == [staff["visitor"]]


def test_admin_attendance_is_paginated_and_enriched(client, admin_client, staff):
    for hour in range(1, 6):
        Attendance(staff["clerk"], "stale name", "checkin", timestamp=datetime(2026, 10, 19, hour)).save()

    assert client.get("/api/admin/attendance", headers=h(staff["auditor"])).status_code == 403

    data = admin_client.get("/api/admin/attendance?page=2&limit=2").get_json()
    assert data["total"] == 5
    assert data["totalPages"] == 3
    assert data["currentPage"] == 2
    assert [r["timestamp"] for r in data["attendance"]] == ["2026-10-19T03:00:00", "2026-10-19T02:00:00"]
    assert data["attendance"][0]["employeeName"] == "Clerk"

    assert admin_client.get("/api/admin/attendance?page=x").status_code == 400


def test_admin_attendance_keeps_stored_names_for_legacy_ids(admin_client):
    Attendance("kiosk-7", "Front desk", "checkout").save()
    rows = admin_client.get("/api/admin/attendance").get_json()["attendance"]
    assert rows[0]["employeeName"] == "Front desk"


# -----------------------------
# PINGS
# -----------------------------
def test_pings(client, admin_client, staff):
    assert client.post("/api/pings", headers=h(staff["visitor"]), json={}).status_code == 201
    assert client.post("/api/pings", headers=h(staff["clerk"]),
                       json={"timestamp": "2026-10-19T08:00:00Z"}).status_code == 201
    assert client.post("/api/pings", headers=h(staff["clerk"]), json={"timestamp": "soon"}).status_code == 400
    assert Ping.collection().count_documents({}) == 2

    assert client.get("/api/admin/pings", headers=h(staff["clerk"])).status_code == 403
    pings = admin_client.get(f"/api/admin/pings?employeeId={staff['clerk']}").get_json()["pings"]
    assert [p["timestamp"] for p in pings] == ["2026-10-19T08:00:00"]


# -----------------------------
# LUNCH
# -----------------------------
def test_taken_minutes_pairs_start_and_end():
    logs = [
        {"type": "lunch-start", "timestamp": datetime(2026, 10, 19, 12, 0)},
        {"type": "lunch-end", "timestamp": datetime(2026, 10, 19, 12, 30)},
        {"type": "lunch-end", "timestamp": datetime(2026, 10, 19, 12, 40)},
        {"type": "lunch-start", "timestamp": datetime(2026, 10, 19, 15, 0)},
        {"type": "lunch-end", "timestamp": datetime(2026, 10, 19, 15, 15)},
        {"type": "lunch-start", "timestamp": datetime(2026, 10, 19, 17, 0)},
    ]
    assert taken_minutes(logs) == 45


def test_lunch_logging(client, admin_client, staff):
    assert client.post("/api/lunch/log", headers=h(staff["visitor"]), json={"type": "lunch-start"}).status_code == 201
    assert client.post("/api/lunch/end", headers=h(staff["visitor"])).status_code == 201
    assert client.post("/api/lunch/log", headers=h(staff["visitor"]), json={"type": "nap"}).status_code == 400
    assert admin_client.post("/api/lunch/end").status_code == 403

    logs = client.get("/api/lunch/log", headers=h(staff["visitor"])).get_json()["logs"]
    assert sorted(log["type"] for log in logs) == ["lunch-end", "lunch-start"]
    assert client.get(f"/api/lunch/log?employeeId={staff['clerk']}", headers=h(staff["visitor"])).status_code == 403
    assert admin_client.get("/api/lunch/log").status_code == 400


def test_lunch_summary(client, staff):
    me = staff["clerk"]
    LunchTime.collection().insert_one({"employeeId": me, "startTime": "12:00", "endTime": "12:45"})
    LunchLog(me, "lunch-start", timestamp=datetime(2026, 10, 19, 12, 0)).save()
    LunchLog(me, "lunch-end", timestamp=datetime(2026, 10, 19, 13, 0)).save()

    data = client.get("/api/lunch/summary", headers=h(me)).get_json()
    assert data["allowedMinutes"] == 45
    assert data["totalMinutes"] == 60
    assert data["difference"] == 15

    audited = client.get(f"/api/lunch/summary?employeeId={me}", headers=h(staff["auditor"])).get_json()
    assert audited["employeeId"] == me


def test_lunch_summary_without_schedule(client, staff):
    data = client.get("/api/lunch/summary", headers=h(staff["visitor"])).get_json()
    assert data["allowedMinutes"] == 0
    assert data["totalMinutes"] == 0
