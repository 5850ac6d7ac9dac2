from flask import Blueprint, current_app, jsonify
from datetime import datetime
from werkzeug.security import generate_password_hash

from models.employees import Employee
from models.roles import Role
from utils.auth import caller_permissions, caller_required, current_caller, permission_required
from utils.db import json_body, serialize
from utils.errors import Conflict, Forbidden, NotFound, ValidationError
from utils.permissions import role_name_for

employees_bp = Blueprint("employees", __name__, url_prefix="/api/employees")

PROFILE_FIELDS = ("name", "email", "position", "department")


def _employee_json(employee):
    data = serialize(employee)
    data["role"] = role_name_for(employee)
    return data


def _role_value(body):
    """
    `roleId` stores a reference to the Role document, `role` stores the
    Role's name. Both forms are read back by the role resolver.
    """
    if body.get("roleId"):
        role = Role.find_by_id(body["roleId"])
        if not role:
            raise NotFound("Role not found")
        return role["_id"]
    role_name = body.get("role")
    if isinstance(role_name, str) and role_name.strip():
        return role_name.strip()
    return None


# -------------------------------------------------------------
# VIEW EMPLOYEES
# -------------------------------------------------------------
@employees_bp.route("", methods=["GET"])
@permission_required("canManageEmployees")
def view_employees():
    employees = list(Employee.collection().find().sort("name", 1))
    return jsonify({"success": True, "employees": [_employee_json(e) for e in employees]})


# -------------------------------------------------------------
# VIEW ONE EMPLOYEE (self, or employee managers)
# -------------------------------------------------------------
@employees_bp.route("/<employee_id>", methods=["GET"])
@caller_required
def view_employee(employee_id):
    employee = Employee.find_by_id(employee_id)
    if not employee:
        raise NotFound("Employee not found")

    caller = current_caller()
    is_self = not caller.is_admin and caller.employee_id == str(employee["_id"])
    if not is_self and not caller_permissions(caller).allows("canManageEmployees"):
        raise Forbidden()

    return jsonify({"success": True, "employee": _employee_json(employee)})


# -------------------------------------------------------------
# ADD EMPLOYEE
# -------------------------------------------------------------
@employees_bp.route("", methods=["POST"])
@permission_required("canManageEmployees")
def add_employee():
    body = json_body()
    name = body.get("name")
    email = body.get("email")
    password = body.get("password")

    if not all(isinstance(v, str) and v for v in (name, email, password)):
        raise ValidationError("Name, email, and password are required.")

    role = _role_value(body)

    if Employee.find_by_email(email):
        raise Conflict("Email already registered!")

    employee = Employee(
        name=name,
        email=email,
        password=password,
        role=role,
        department=body.get("department"),
        position=body.get("position"),
    )
    result = employee.save()

    current_app.logger.info("Employee %s added", result.inserted_id)
    created = Employee.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "employee": _employee_json(created)}), 201


# -------------------------------------------------------------
# UPDATE EMPLOYEE
# -------------------------------------------------------------
@employees_bp.route("/<employee_id>", methods=["PUT"])
@permission_required("canManageEmployees")
def edit_employee(employee_id):
    employee = Employee.find_by_id(employee_id)
    if not employee:
        raise NotFound("Employee not found")

    body = json_body()
    update_data = {k: body[k] for k in PROFILE_FIELDS if k in body}

    if "email" in update_data:
        if not isinstance(update_data["email"], str) or not update_data["email"]:
            raise ValidationError("Email cannot be empty.")
        other = Employee.find_by_email(update_data["email"])
        if other and other["_id"] != employee["_id"]:
            raise Conflict("Email already registered!")

    if "roleId" in body or "role" in body:
        update_data["role"] = _role_value(body)

    # Update password only if provided
    if body.get("password"):
        update_data["password"] = generate_password_hash(body["password"])

    update_data["updated_at"] = datetime.utcnow()
    Employee.collection().update_one({"_id": employee["_id"]}, {"$set": update_data})

    employee = Employee.collection().find_one({"_id": employee["_id"]})
    return jsonify({"success": True, "employee": _employee_json(employee)})


# -------------------------------------------------------------
# DELETE EMPLOYEE
# -------------------------------------------------------------
@employees_bp.route("/<employee_id>", methods=["DELETE"])
@permission_required("canManageEmployees")
def delete_employee(employee_id):
    employee = Employee.find_by_id(employee_id)
    if not employee:
        raise NotFound("Employee not found")

    Employee.collection().delete_one({"_id": employee["_id"]})
    current_app.logger.info("Employee %s deleted", employee_id)
    return jsonify({"success": True, "message": "Employee deleted"})
