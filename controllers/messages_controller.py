from flask import Blueprint, current_app, jsonify, request

from models.employees import Employee
from models.messages import NOTIFICATION_TYPES, BroadcastMessage, Notification
from utils.auth import admin_required, caller_required, current_caller
from utils.db import json_body, serialize, to_object_id
from utils.errors import Forbidden, NotFound, ValidationError

messages_bp = Blueprint("messages", __name__, url_prefix="/api")


def _text(body, field):
    value = body.get(field)
    return value.strip() if isinstance(value, str) else ""


# -----------------------------
# BROADCAST (admin -> every employee)
# -----------------------------
@messages_bp.route("/messages/broadcast", methods=["POST"])
@admin_required
def broadcast():
    body = json_body()
    subject = _text(body, "subject")
    text = _text(body, "body")

    if not subject or not text:
        raise ValidationError("Subject and body are required")

    recipients = [e["_id"] for e in Employee.collection().find({}, {"_id": 1})]
    message = BroadcastMessage(subject, text, created_by=current_caller().username,
                               recipients=recipients, urgent=bool(body.get("urgent")))
    result = message.save()

    current_app.logger.info("Broadcast %s sent to %d employees", result.inserted_id, len(recipients))
    return jsonify({"success": True, "id": str(result.inserted_id), "recipientCount": len(recipients)}), 201


@messages_bp.route("/messages", methods=["GET"])
@caller_required
def view_messages():
    caller = current_caller()
    if caller.is_admin:
        query = {}
    else:
        me = to_object_id(caller.employee_id)
        if me is None:
            return jsonify({"success": True, "messages": []})
        query = {"recipients": me}

    messages = BroadcastMessage.collection().find(query).sort("createdAt", -1)
    rows = [{
        "_id": m["_id"],
        "subject": m.get("subject"),
        "body": m.get("body"),
        "urgent": bool(m.get("urgent")),
        "createdAt": m.get("createdAt"),
        "createdBy": m.get("createdBy"),
        "recipientCount": len(m.get("recipients") or []),
    } for m in messages]
    return jsonify({"success": True, "messages": serialize(rows)})


# -----------------------------
# NOTIFICATIONS (admin -> one employee)
# -----------------------------
@messages_bp.route("/notifications", methods=["POST"])
@admin_required
def add_notification():
    body = json_body()
    to_employee_id = _text(body, "toEmployeeId")
    message = _text(body, "message")
    notification_type = body.get("type") or "admin_message"

    if not to_employee_id or not message:
        raise ValidationError("Missing required fields")
    if notification_type not in NOTIFICATION_TYPES:
        raise ValidationError("type must be one of: %s" % ", ".join(NOTIFICATION_TYPES))
    if not Employee.find_by_id(to_employee_id):
        raise NotFound("Employee not found")

    result = Notification(to_employee_id, current_caller().username, message, type=notification_type).save()
    saved = Notification.collection().find_one({"_id": result.inserted_id})
    return jsonify({"success": True, "notification": serialize(saved)}), 201


@messages_bp.route("/notifications", methods=["GET"])
@caller_required
def view_notifications():
    caller = current_caller()
    if caller.is_admin:
        employee_id = request.args.get("employeeId")
        if not employee_id:
            raise ValidationError("Employee ID is required")
    else:
        employee_id = caller.employee_id

    notifications = list(Notification.collection().find({"toEmployeeId": employee_id}).sort("createdAt", -1))
    return jsonify({"success": True, "notifications": serialize(notifications)})


def _own_notification(notification_id):
    oid = to_object_id(notification_id)
    notification = Notification.collection().find_one({"_id": oid}) if oid else None
    if not notification:
        raise NotFound("Notification not found")

    caller = current_caller()
    if not caller.is_admin and notification.get("toEmployeeId") != caller.employee_id:
        raise Forbidden()
    return notification


@messages_bp.route("/notifications/<notification_id>", methods=["PUT"])
@caller_required
def mark_read(notification_id):
    notification = _own_notification(notification_id)
    Notification.collection().update_one({"_id": notification["_id"]}, {"$set": {"read": True}})
    notification = Notification.collection().find_one({"_id": notification["_id"]})
    return jsonify({"success": True, "notification": serialize(notification)})


@messages_bp.route("/notifications/<notification_id>", methods=["DELETE"])
@caller_required
def delete_notification(notification_id):
    notification = _own_notification(notification_id)
    Notification.collection().delete_one({"_id": notification["_id"]})
    return jsonify({"success": True, "message": "Notification deleted"})
