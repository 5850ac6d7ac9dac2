"""
utils/permissions.py
-----------------
Resolves an employee's effective Role and Permission Set.

Employee documents carry their role in one of two shapes, both present
in stored data:
    {"role": ObjectId("...")}   reference to a roles document
    {"role": "Supervisor"}       the role's name
Everything after `resolve_role` works with the canonical Role ObjectId.
"""

from collections import namedtuple

from bson import ObjectId

from models.employees import Employee
from models.roles import PermissionSet, Role

ResolvedRole = namedtuple("ResolvedRole", ["role_id", "name", "permissions"])

NO_ROLE = ResolvedRole(None, None, PermissionSet.default())


def _role_document(role_value):
    if isinstance(role_value, ObjectId):
        return Role.collection().find_one({"_id": role_value})

    if isinstance(role_value, dict):
        if role_value.get("_id") is not None:
            return Role.find_by_id(role_value["_id"])
        role_value = role_value.get("name")

    if isinstance(role_value, str) and role_value.strip():
        return Role.find_by_name(role_value.strip())

    return None


def resolve_role(employee_id):
    """
    Look up the employee and return ResolvedRole(role_id, name, permissions).

    Unknown employees, missing roles and dangling references all resolve to
    NO_ROLE. Nothing is cached; roles can change between requests.
    """
    employee = Employee.find_by_id(employee_id)
    if not employee:
        return NO_ROLE

    role = _role_document(employee.get("role"))
    if not role:
        return NO_ROLE

    return ResolvedRole(role["_id"], role.get("name"), PermissionSet.from_document(role.get("permissions")))


def resolve_permissions(employee_id):
    return resolve_role(employee_id).permissions


def resolve_role_id(employee_id):
    """Role id as stored on task snapshots, or None."""
    role_id = resolve_role(employee_id).role_id
    return str(role_id) if role_id is not None else None


def role_name_for(employee):
    """Human readable role name for an employee document, whatever its stored shape."""
    role = _role_document(employee.get("role"))
    if role:
        return role.get("name")
    if isinstance(employee.get("role"), str):
        return employee["role"]
    return None
