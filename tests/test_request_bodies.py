import pytest

from models.employees import Employee
from models.roles import Role
from models.tasks import Task


def h(employee_id):
    return {"x-user-id": employee_id}


@pytest.mark.parametrize("path", [
    "/api/tasks",
    "/api/roles",
    "/api/departments",
    "/api/employees",
    "/api/holidays",
    "/api/messages/broadcast",
    "/api/notifications",
])
@pytest.mark.parametrize("body", [["title"], "title", 7])
def test_admin_writes_reject_non_object_bodies(admin_client, path, body):
    resp = admin_client.post(path, json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "Request body must be a JSON object"}


def test_employee_writes_reject_non_object_bodies(client, make_role, make_employee, make_task):
    me = make_employee("Ann", role=make_role("Clerk", canCheckIn=True))
    task_id = make_task("T1", me)

    for method, path in (
        ("post", "/api/attendance"),
        ("post", "/api/pings"),
        ("post", "/api/lunch/log"),
        ("post", "/api/holiday-requests"),
        ("put", f"/api/tasks/{task_id}"),
        ("post", f"/api/tasks/{task_id}/progress"),
    ):
        resp = getattr(client, method)(path, headers=h(me), json=["status", "completed"])
        assert resp.status_code == 400, path

    task = Task.find_by_id(task_id)
    assert task["status"] == "pending"
    assert task["progressUpdates"] == []


def test_update_routes_reject_non_object_bodies(admin_client, make_role, make_employee):
    role_id = make_role("Clerk")
    ann = make_employee("Ann")

    assert admin_client.put(f"/api/roles/{role_id}", json=["name"]).status_code == 400
    assert admin_client.put(f"/api/employees/{ann}", json=["email"]).status_code == 400
    assert Role.find_by_id(role_id)["name"] == "Clerk"


def test_login_rejects_non_object_bodies(client):
    assert client.post("/api/auth/login", json=["ann@example.com", "pw"]).status_code == 400
    assert client.post("/api/admin/login", json=["admin", "admin-pass"]).status_code == 400


def test_missing_body_still_reads_as_empty(admin_client):
    resp = admin_client.post("/api/tasks")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Title, assignedTo, and valid dueDate are required"


# -----------------------------
# EMAIL MUST BE A PLAIN STRING
# -----------------------------
def test_login_rejects_operator_email(client, make_employee):
    make_employee("Ann", password="pw")
    resp = client.post("/api/auth/login", json={"email": {"$ne": None}, "password": "pw"})
    assert resp.status_code == 400


def test_employee_writes_reject_operator_email(admin_client, make_employee):
    ann = make_employee("Ann")
    make_employee("Bo")

    resp = admin_client.post("/api/employees", json={"name": "Cy", "email": {"$ne": None}, "password": "pw"})
    assert resp.status_code == 400

    resp = admin_client.put(f"/api/employees/{ann}", json={"email": {"$ne": None}})
    assert resp.status_code == 400
    assert Employee.find_by_id(ann)["email"] == "ann@example.com"
