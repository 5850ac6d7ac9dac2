from datetime import datetime, timedelta

import mongomock
import pytest

from app import create_app
from config import TestingConfig
from models.employees import Employee
from models.roles import Role
from models.tasks import Task
from utils.db import mongo


@pytest.fixture()
def app(monkeypatch):
    app = create_app(TestingConfig)
    monkeypatch.setattr(mongo, "db", mongomock.MongoClient()["HRDeskTest"])
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(app):
    test_client = app.test_client()
    resp = test_client.post("/api/admin/login", json={"username": "admin", "password": "admin-pass"})
    assert resp.status_code == 200, resp.get_data(as_text=True)
    return test_client


@pytest.fixture()
def make_role(app):
    def _make(name, department=None, **permissions):
        return Role(name, department=department, permissions=permissions).save().inserted_id
    return _make


@pytest.fixture()
def make_employee(app):
    def _make(name, role=None, password="secret", **extra):
        employee = Employee(name=name, email=extra.pop("email", f"{name.lower()}@example.com"),
                            password=password, role=role, **extra)
        return str(employee.save().inserted_id)
    return _make


@pytest.fixture()
def make_task(app):
    def _make(title, assigned_to, role=None, assigned_by="seed", due_in_days=1, priority="medium",
              status="pending"):
        task = Task(
            title=title,
            assigned_by=assigned_by,
            assigned_to=assigned_to,
            role=str(role) if role is not None else None,
            due_date=datetime(2026, 11, 1) + timedelta(days=due_in_days),
            priority=priority,
            status=status,
        )
        return str(task.save().inserted_id)
    return _make
