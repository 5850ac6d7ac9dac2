from flask import Blueprint, current_app, jsonify, request
from datetime import datetime

from models.employees import Employee
from models.holiday import REQUEST_STATUSES, Holiday, HolidayRequest
from utils.auth import admin_required, caller_required, current_caller, employee_required
from utils.db import json_body, serialize, to_object_id
from utils.errors import Conflict, NotFound, ValidationError

holidays_bp = Blueprint("holidays", __name__, url_prefix="/api")


def _day(value):
    """Validate a date string and return it in zero-padded YYYY-MM-DD form."""
    if not isinstance(value, str):
        raise ValidationError("date must be YYYY-MM-DD")
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        raise ValidationError("date must be YYYY-MM-DD")
    return parsed.strftime("%Y-%m-%d")


# -----------------------------
# HOLIDAY CALENDAR
# -----------------------------
@holidays_bp.route("/holidays", methods=["GET"])
@caller_required
def view_holidays():
    holidays = list(Holiday.collection().find().sort("date", 1))
    return jsonify({"success": True, "holidays": serialize(holidays)})


@holidays_bp.route("/holidays", methods=["POST"])
@admin_required
def add_holiday():
    body = json_body()
    date = _day(body.get("date"))

    if Holiday.collection().find_one({"date": date}):
        raise Conflict("A holiday already exists on this date")

    result = Holiday(date, description=body.get("description")).save()
    holiday = Holiday.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "holiday": serialize(holiday)}), 201


@holidays_bp.route("/holidays/<holiday_id>", methods=["DELETE"])
@admin_required
def delete_holiday(holiday_id):
    oid = to_object_id(holiday_id)
    if oid is None or Holiday.collection().delete_one({"_id": oid}).deleted_count == 0:
        raise NotFound("Holiday not found")
    return jsonify({"success": True})


# -----------------------------
# HOLIDAY REQUESTS
# -----------------------------
@holidays_bp.route("/holiday-requests", methods=["POST"])
@employee_required
def request_holiday():
    caller = current_caller()
    body = json_body()

    date = _day(body.get("date"))
    message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Missing fields")

    employee = Employee.find_by_id(caller.employee_id)
    if not employee:
        raise NotFound("Employee not found")

    result = HolidayRequest(caller.employee_id, employee.get("name"), date, message.strip()).save()
    saved = HolidayRequest.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "request": serialize(saved)}), 201


@holidays_bp.route("/holiday-requests", methods=["GET"])
@caller_required
def view_holiday_requests():
    caller = current_caller()
    if caller.is_admin:
        employee_id = request.args.get("employeeId")
        query = {"employeeId": employee_id} if employee_id else {}
    else:
        query = {"employeeId": caller.employee_id}

    requests = list(HolidayRequest.collection().find(query).sort("createdAt", -1))
    return jsonify({"success": True, "requests": serialize(requests)})


@holidays_bp.route("/holiday-requests/<request_id>", methods=["PUT"])
@admin_required
def review_holiday_request(request_id):
    oid = to_object_id(request_id)
    holiday_request = HolidayRequest.collection().find_one({"_id": oid}) if oid else None
    if not holiday_request:
        raise NotFound("Request not found")

    status = json_body().get("status")
    if status not in REQUEST_STATUSES:
        raise ValidationError("status must be one of: %s" % ", ".join(REQUEST_STATUSES))

    HolidayRequest.collection().update_one({"_id": oid}, {"$set": {"status": status}})
    current_app.logger.info("Holiday request %s marked %s", request_id, status)

    updated = HolidayRequest.collection().find_one({"_id": oid})
    return jsonify({"success": True, "request": serialize(updated)})
