from flask import Blueprint, current_app, jsonify
from datetime import datetime

from models.departments import Department
from models.roles import PERMISSION_KEYS, PermissionSet, Role
from utils.auth import caller_required, permission_required
from utils.db import json_body, serialize, to_object_id
from utils.errors import Conflict, NotFound, ValidationError

roles_bp = Blueprint("roles", __name__, url_prefix="/api/roles")


def _clean_permissions(raw, base=None):
    if not isinstance(raw, dict):
        raise ValidationError("permissions must be an object")
    unknown = [k for k in raw if k not in PERMISSION_KEYS]
    if unknown:
        raise ValidationError("Unknown permissions: %s" % ", ".join(sorted(unknown)))
    if any(not isinstance(v, bool) for v in raw.values()):
        raise ValidationError("Permission values must be true or false")
    merged = dict(base or {})
    merged.update(raw)
    return PermissionSet.from_document(merged).to_dict()


def _department_ref(value):
    if value in (None, ""):
        return None
    department = Department.find_by_id(value)
    if not department:
        raise NotFound("Department not found")
    return department["_id"]


def _ensure_unique(name, department, exclude_id=None):
    query = {"name": name, "department": department}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    if Role.collection().find_one(query):
        raise Conflict("A role with this name already exists in the department")


def _role_json(role):
    data = serialize(role)
    data["permissions"] = PermissionSet.from_document(role.get("permissions")).to_dict()
    return data


# View Roles (with permissions) - used by clients for UI gating only
@roles_bp.route("", methods=["GET"])
@caller_required
def view_roles():
    roles = list(Role.collection().find().sort("name", 1))
    return jsonify({"success": True, "roles": [_role_json(r) for r in roles]})


# Add Role
@roles_bp.route("", methods=["POST"])
@permission_required("canManageRoles")
def add_role():
    body = json_body()
    name = (body.get("name") or "").strip() if isinstance(body.get("name"), str) else ""

    if not name:
        raise ValidationError("Role name is required.")

    permissions = _clean_permissions(body.get("permissions") or {})
    department = _department_ref(body.get("department"))
    _ensure_unique(name, department)

    role = Role(name, department=department, permissions=permissions,
                description=body.get("description"))
    result = role.save()

    current_app.logger.info("Role %s created", name)
    created = Role.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "role": _role_json(created)}), 201


# Edit / Update Existing Role
@roles_bp.route("/<role_id>", methods=["PUT"])
@permission_required("canManageRoles")
def edit_role(role_id):
    role = Role.find_by_id(role_id)
    if not role:
        raise NotFound("Role not found")

    body = json_body()
    updates = {}

    if "name" in body:
        name = body["name"].strip() if isinstance(body["name"], str) else ""
        if not name:
            raise ValidationError("Role name is required.")
        updates["name"] = name
    if "description" in body:
        updates["description"] = body["description"]
    if "department" in body:
        updates["department"] = _department_ref(body["department"])
    if "permissions" in body:
        updates["permissions"] = _clean_permissions(body["permissions"], role.get("permissions"))

    if "name" in updates or "department" in updates:
        _ensure_unique(updates.get("name", role["name"]),
                       updates.get("department", role.get("department")),
                       exclude_id=role["_id"])

    if updates:
        updates["updated_at"] = datetime.utcnow()
        Role.collection().update_one({"_id": role["_id"]}, {"$set": updates})

    role = Role.collection().find_one({"_id": role["_id"]})
    return jsonify({"success": True, "role": _role_json(role)})


# Delete Roles
@roles_bp.route("/<role_id>", methods=["DELETE"])
@permission_required("canManageRoles")
def delete_role(role_id):
    oid = to_object_id(role_id)
    role = Role.find_by_id(oid)
    if not role:
        raise NotFound("Role not found")

    Role.collection().delete_one({"_id": oid})
    current_app.logger.info("Role %s deleted", role.get("name"))
    return jsonify({"success": True, "message": "Role deleted"})
