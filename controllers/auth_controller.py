import hmac

from flask import Blueprint, current_app, jsonify, request

from models.employees import Employee
from utils.auth import (
    ADMIN_COOKIE,
    EMPLOYEE_COOKIE,
    admin_claims,
    caller_required,
    caller_role,
    current_caller,
    issue_admin_token,
    issue_employee_token,
    set_token_cookie,
)
from utils.db import json_body, serialize
from utils.errors import NotFound, Unauthenticated, ValidationError
from utils.permissions import resolve_role

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _same(given, expected):
    if not given or not expected:
        return False
    return hmac.compare_digest(str(given).encode(), str(expected).encode())


# Employee Login
@auth_bp.route("/auth/login", methods=["POST"])
def login():
    body = json_body()
    email = body.get("email")
    password = body.get("password")

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ValidationError("Email and password required")

    employee = Employee.verify_password(email, password)
    if not employee:
        current_app.logger.warning("Failed employee login for %s", email)
        raise Unauthenticated("Invalid credentials")

    resolved = resolve_role(employee["_id"])
    role_name = resolved.name or (employee.get("role") if isinstance(employee.get("role"), str) else None)
    token = issue_employee_token(employee, role_name, resolved.permissions)

    response = jsonify({
        "success": True,
        "employee": {
            "id": str(employee["_id"]),
            "name": employee.get("name"),
            "email": employee.get("email"),
            "position": employee.get("position"),
            "role": role_name,
            "permissions": resolved.permissions.to_dict(),
        },
    })
    current_app.logger.info("Employee %s logged in", employee["_id"])
    return set_token_cookie(response, EMPLOYEE_COOKIE, token)


# Admin Login
@auth_bp.route("/admin/login", methods=["POST"])
def admin_login():
    body = json_body()
    username = body.get("username")
    password = body.get("password")

    if not (_same(username, current_app.config.get("ADMIN_USERNAME"))
            and _same(password, current_app.config.get("ADMIN_PASSWORD"))):
        current_app.logger.warning("Failed admin login for %s", username)
        raise Unauthenticated("Invalid credentials")

    response = jsonify({"success": True})
    current_app.logger.info("Admin %s logged in", username)
    return set_token_cookie(response, ADMIN_COOKIE, issue_admin_token(username))


# Admin Session check
@auth_bp.route("/admin/session", methods=["GET"])
def admin_session():
    claims = admin_claims(request.cookies.get(ADMIN_COOKIE))
    if not claims:
        return jsonify({"authenticated": False, "username": None})
    return jsonify({"authenticated": True, "username": claims.get("username")})


# Logout
@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    response = jsonify({"success": True})
    response.delete_cookie(ADMIN_COOKIE, path="/")
    response.delete_cookie(EMPLOYEE_COOKIE, path="/")
    return response


# View Profile + effective permissions
@auth_bp.route("/me", methods=["GET"])
@caller_required
def me():
    caller = current_caller()
    resolved = caller_role(caller)

    if caller.is_admin:
        return jsonify({
            "success": True,
            "user": {"username": caller.username, "admin": True},
            "role": {"_id": None, "name": resolved.name},
            "permissions": resolved.permissions.to_dict(),
        })

    employee = Employee.find_by_id(caller.employee_id)
    if not employee:
        raise NotFound("User not found")

    return jsonify({
        "success": True,
        "user": serialize(employee),
        "role": {"_id": serialize(resolved.role_id), "name": resolved.name},
        "permissions": resolved.permissions.to_dict(),
    })
