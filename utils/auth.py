"""
utils/auth.py
-----------------
Works out who is calling and guards routes accordingly.

A caller is either the admin principal (hard-coded credentials, proven by a
signed `admin_token` cookie) or an employee id (declared by the `x-user-id`
header or proven by an employee `token`). The `x-user-id` header is trusted
as-is; browser code on the same origin relies on it.
"""

import time
from dataclasses import dataclass
from functools import wraps

import jwt
from flask import current_app, g, request

from models.roles import PermissionSet
from utils.errors import Forbidden, Unauthenticated
from utils.permissions import NO_ROLE, ResolvedRole, resolve_role

ADMIN_COOKIE = "admin_token"
EMPLOYEE_COOKIE = "token"
ADMIN_ROLE_CLAIM = "Admin"
# Only issue_admin_token writes this token type; employee tokens never carry it
ADMIN_TOKEN_TYPE = "admin"


@dataclass(frozen=True)
class AdminCaller:
    username: str
    is_admin = True


@dataclass(frozen=True)
class EmployeeCaller:
    employee_id: str
    is_admin = False


# -----------------------------
# SIGNED ASSERTIONS
# -----------------------------
def _sign(claims):
    payload = dict(claims)
    payload["exp"] = int(time.time()) + int(current_app.config["TOKEN_MAX_AGE"])
    return jwt.encode(payload, current_app.config["JWT_SECRET"],
                      algorithm=current_app.config["JWT_ALGORITHM"])


def decode_token(token):
    """Return the claims of a valid token, None for anything else."""
    if not token:
        return None
    try:
        return jwt.decode(token, current_app.config["JWT_SECRET"],
                          algorithms=[current_app.config["JWT_ALGORITHM"]])
    except jwt.PyJWTError:
        return None


def issue_admin_token(username):
    return _sign({"typ": ADMIN_TOKEN_TYPE, "role": ADMIN_ROLE_CLAIM, "username": username})


def issue_employee_token(employee, role_name, permissions):
    return _sign({
        "id": str(employee["_id"]),
        "email": employee.get("email"),
        "role": role_name,
        "permissions": permissions.to_dict(),
    })


def set_token_cookie(response, name, token):
    response.set_cookie(
        name,
        token,
        max_age=current_app.config["TOKEN_MAX_AGE"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Lax",
        path="/",
    )
    return response


# -----------------------------
# CALLER IDENTIFIER
# -----------------------------
def admin_claims(token):
    """Claims of a genuine admin token, None for anything else (employee tokens included)."""
    claims = decode_token(token)
    if not claims or "id" in claims:
        return None
    if claims.get("typ") != ADMIN_TOKEN_TYPE or claims.get("role") != ADMIN_ROLE_CLAIM:
        return None
    return claims


def _admin_from_cookie(req):
    claims = admin_claims(req.cookies.get(ADMIN_COOKIE))
    if not claims:
        return None
    return AdminCaller(claims.get("username") or "admin")


def _bearer_token(req):
    auth = req.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return None


def identify_caller(req):
    """Return AdminCaller, EmployeeCaller or None. Never raises."""
    admin = _admin_from_cookie(req)
    if admin:
        return admin

    declared = (req.headers.get("x-user-id") or "").strip()
    if declared:
        return EmployeeCaller(declared)

    for token in (req.cookies.get(EMPLOYEE_COOKIE), _bearer_token(req)):
        claims = decode_token(token)
        if claims and claims.get("id"):
            return EmployeeCaller(str(claims["id"]))

    return None


def current_caller():
    if "caller" not in g:
        g.caller = identify_caller(request)
    return g.caller


def caller_role(caller=None):
    """ResolvedRole for the caller, resolved once per request."""
    caller = caller or current_caller()
    if caller is None:
        return NO_ROLE
    if caller.is_admin:
        return ResolvedRole(None, ADMIN_ROLE_CLAIM, PermissionSet.everything())
    if "caller_role" not in g:
        g.caller_role = resolve_role(caller.employee_id)
    return g.caller_role


def caller_permissions(caller=None):
    return caller_role(caller).permissions


def require_caller():
    caller = current_caller()
    if caller is None:
        raise Unauthenticated()
    return caller


def reportable_employee_id(requested=None, permission="canViewReports"):
    """
    Whose records the caller may read. Admins and holders of `permission`
    get `requested` (None meaning everyone); anyone else only themselves.
    """
    caller = require_caller()
    if caller_permissions(caller).allows(permission):
        return requested or None
    if requested and requested != caller.employee_id:
        raise Forbidden()
    return caller.employee_id


# -----------------------------
# ROUTE GUARDS
# -----------------------------
def caller_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        require_caller()
        return view_function(*args, **kwargs)
    return decorated_function


def admin_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        caller = require_caller()
        if not caller.is_admin:
            current_app.logger.info("Admin-only %s refused for employee %s",
                                    request.path, caller.employee_id)
            raise Forbidden()
        return view_function(*args, **kwargs)
    return decorated_function


def employee_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        caller = require_caller()
        if caller.is_admin:
            raise Forbidden("Only employees can do this")
        return view_function(*args, **kwargs)
    return decorated_function


def permission_required(permission):
    def decorator(view_function):
        @wraps(view_function)
        def decorated_function(*args, **kwargs):
            caller = require_caller()
            if not caller_permissions(caller).allows(permission):
                current_app.logger.info("%s refused for %s: missing %s",
                                        request.path, caller, permission)
                raise Forbidden()
            return view_function(*args, **kwargs)
        return decorated_function
    return decorator
