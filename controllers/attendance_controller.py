from flask import Blueprint, current_app, jsonify, request
from bson.errors import InvalidId

from models.attendance import ATTENDANCE_TYPES, Attendance, Ping
from models.employees import Employee
from utils.auth import admin_required, caller_required, current_caller, employee_required, \
    permission_required, reportable_employee_id
from utils.db import json_body, parse_date, serialize
from utils.errors import ValidationError

attendance_bp = Blueprint("attendance", __name__, url_prefix="/api")

RECENT_LIMIT = 100


def _int_arg(name, default, low, high):
    try:
        value = int(request.args.get(name, default))
    except ValueError:
        raise ValidationError("%s must be a number" % name)
    return max(low, min(value, high))


# ==========================================================
# CHECK IN / CHECK OUT
# ==========================================================
@attendance_bp.route("/attendance", methods=["POST"])
@employee_required
@permission_required("canCheckIn")
def mark_attendance():
    caller = current_caller()
    body = json_body()

    if body.get("type") not in ATTENDANCE_TYPES:
        raise ValidationError('Invalid type. Must be "checkin" or "checkout"')

    image_data = body.get("imageData")
    if image_data is not None and not isinstance(image_data, str):
        raise ValidationError("imageData must be a string")

    employee = Employee.find_by_id(caller.employee_id) or {}
    record = Attendance(
        employee_id=caller.employee_id,
        employee_name=employee.get("name") or employee.get("email") or "Unknown Employee",
        type=body["type"],
        image_data=image_data,
    )
    result = record.save()

    saved = Attendance.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "message": "Attendance recorded successfully",
                    "data": serialize(saved)}), 201


# ==========================================================
# RECENT ATTENDANCE (own, or everyone's for report viewers)
# ==========================================================
@attendance_bp.route("/attendance", methods=["GET"])
@caller_required
def recent_attendance():
    employee_id = reportable_employee_id(request.args.get("employeeId"))

    query = {"employeeId": employee_id} if employee_id else {}
    records = list(Attendance.collection().find(query).sort("timestamp", -1).limit(RECENT_LIMIT))
    return jsonify({"success": True, "records": serialize(records)})


# ==========================================================
# ADMIN ATTENDANCE (paginated)
# ==========================================================
@attendance_bp.route("/admin/attendance", methods=["GET"])
@admin_required
def admin_attendance():
    page = _int_arg("page", 1, 1, 10 ** 6)
    limit = _int_arg("limit", 10, 1, 100)
    employee_id = request.args.get("employeeId") or None

    query = {"employeeId": employee_id} if employee_id else {}
    total = Attendance.collection().count_documents(query)
    records = list(
        Attendance.collection().find(query)
        .sort("timestamp", -1)
        .skip((page - 1) * limit)
        .limit(limit)
    )

    try:
        names = Employee.names_for(r.get("employeeId") for r in records)
    except InvalidId as e:
        current_app.logger.warning("Attendance served with stored names only: %s", e)
        names = {}

    rows = []
    for r in records:
        rows.append({
            "_id": r["_id"],
            "employeeId": r.get("employeeId"),
            "employeeName": names.get(str(r.get("employeeId"))) or r.get("employeeName"),
            "type": r.get("type"),
            "timestamp": r.get("timestamp"),
            "imageData": r.get("imageData"),
        })

    return jsonify({
        "success": True,
        "attendance": serialize(rows),
        "totalPages": (total + limit - 1) // limit,
        "currentPage": page,
        "total": total,
    })


# ==========================================================
# WORKING PINGS
# ==========================================================
@attendance_bp.route("/pings", methods=["POST"])
@employee_required
def add_ping():
    body = json_body()
    timestamp = None
    if body.get("timestamp") is not None:
        timestamp = parse_date(body["timestamp"])
        if timestamp is None:
            raise ValidationError("timestamp must be a valid date")

    Ping(current_caller().employee_id, timestamp=timestamp).save()
    return jsonify({"success": True}), 201


@attendance_bp.route("/admin/pings", methods=["GET"])
@admin_required
def view_pings():
    employee_id = request.args.get("employeeId")
    query = {"employeeId": employee_id} if employee_id else {}
    pings = list(Ping.collection().find(query).sort("timestamp", -1))
    return jsonify({"success": True, "pings": serialize(pings)})
