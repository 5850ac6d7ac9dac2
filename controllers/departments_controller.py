from flask import Blueprint, jsonify
from datetime import datetime

from models.departments import Department
from utils.auth import caller_required, permission_required
from utils.db import json_body, serialize
from utils.errors import Conflict, NotFound, ValidationError

departments_bp = Blueprint("departments", __name__, url_prefix="/api/departments")


def _name_from(body):
    name = body.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ValidationError("Department name is required.")
    return name


# -----------------------------
# VIEW DEPARTMENTS
# -----------------------------
@departments_bp.route("", methods=["GET"])
@caller_required
def view_departments():
    departments = list(Department.collection().find().sort("name", 1))
    return jsonify({"success": True, "departments": serialize(departments)})


# -----------------------------
# ADD DEPARTMENT
# -----------------------------
@departments_bp.route("", methods=["POST"])
@permission_required("canManageDepartments")
def add_department():
    body = json_body()
    name = _name_from(body)

    if Department.collection().find_one({"name": name}):
        raise Conflict("Department already exists.")

    result = Department(name, description=body.get("description")).save()
    department = Department.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "department": serialize(department)}), 201


# -----------------------------
# EDIT DEPARTMENT
# -----------------------------
@departments_bp.route("/<department_id>", methods=["PUT"])
@permission_required("canManageDepartments")
def edit_department(department_id):
    department = Department.find_by_id(department_id)
    if not department:
        raise NotFound("Department not found")

    body = json_body()
    updates = {"updated_at": datetime.utcnow()}

    if "name" in body:
        name = _name_from(body)
        if Department.collection().find_one({"name": name, "_id": {"$ne": department["_id"]}}):
            raise Conflict("Department already exists.")
        updates["name"] = name
    if "description" in body:
        updates["description"] = body["description"]

    Department.collection().update_one({"_id": department["_id"]}, {"$set": updates})
    department = Department.collection().find_one({"_id": department["_id"]})
    return jsonify({"success": True, "department": serialize(department)})


# -----------------------------
# DELETE DEPARTMENT
# -----------------------------
@departments_bp.route("/<department_id>", methods=["DELETE"])
@permission_required("canManageDepartments")
def delete_department(department_id):
    department = Department.find_by_id(department_id)
    if not department:
        raise NotFound("Department not found")

    Department.collection().delete_one({"_id": department["_id"]})
    return jsonify({"success": True, "message": "Department deleted"})
