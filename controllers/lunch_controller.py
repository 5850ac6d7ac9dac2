from flask import Blueprint, jsonify, request

from models.lunch import LUNCH_TYPES, LunchLog, LunchTime
from utils.auth import caller_required, current_caller, employee_required, reportable_employee_id
from utils.db import json_body, serialize
from utils.errors import ValidationError

lunch_bp = Blueprint("lunch", __name__, url_prefix="/api/lunch")


def _log(lunch_type):
    result = LunchLog(current_caller().employee_id, lunch_type).save()
    return LunchLog.collection().find_one({"_id": result.inserted_id})


def _target_employee():
    employee_id = reportable_employee_id(request.args.get("employeeId"))
    if not employee_id:
        raise ValidationError("Missing employeeId")
    return employee_id


def taken_minutes(logs):
    """Sum lunch-start -> lunch-end pairs; logs must be in time order."""
    total = 0.0
    i = 0
    while i < len(logs) - 1:
        if logs[i]["type"] == "lunch-start" and logs[i + 1]["type"] == "lunch-end":
            total += (logs[i + 1]["timestamp"] - logs[i]["timestamp"]).total_seconds() / 60
            i += 2
        else:
            i += 1
    return total


@lunch_bp.route("/log", methods=["POST"])
@employee_required
def log_lunch():
    body = json_body()
    if body.get("type") not in LUNCH_TYPES:
        raise ValidationError("type must be lunch-start or lunch-end")
    return jsonify({"success": True, "log": serialize(_log(body["type"]))}), 201


@lunch_bp.route("/end", methods=["POST"])
@employee_required
def end_lunch():
    return jsonify({"success": True, "log": serialize(_log("lunch-end"))}), 201


@lunch_bp.route("/log", methods=["GET"])
@caller_required
def view_logs():
    employee_id = _target_employee()
    logs = list(LunchLog.collection().find({"employeeId": employee_id}).sort("timestamp", -1))
    return jsonify({"success": True, "logs": serialize(logs)})


@lunch_bp.route("/summary", methods=["GET"])
@caller_required
def summary():
    employee_id = _target_employee()
    logs = list(LunchLog.collection().find({"employeeId": employee_id}).sort("timestamp", 1))

    allowed = LunchTime.allowed_minutes(employee_id)
    total = taken_minutes(logs)

    return jsonify({
        "success": True,
        "employeeId": employee_id,
        "allowedMinutes": allowed,
        "totalMinutes": total,
        "difference": total - allowed,
    })
