from flask import Blueprint, current_app, jsonify, request
from bson.errors import InvalidId
from datetime import datetime

from models.employees import Employee
from models.tasks import Task
from utils.auth import caller_permissions, caller_role, caller_required, current_caller, permission_required
from utils.db import json_body, serialize
from utils.errors import Forbidden, NotFound, ValidationError
from utils.permissions import resolve_role_id
from utils.task_visibility import (
    build_task_query,
    can_append_progress,
    can_mutate_task,
    is_task_manager,
    is_task_visible,
    scope_task_updates,
    validate_status,
    validate_task_fields,
)

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")

FEED_DEFAULT_LIMIT = 50
FEED_MAX_LIMIT = 200


def _load_task(task_id):
    task = Task.find_by_id(task_id)
    if not task:
        raise NotFound("Task not found")
    return task


def _require_employee(employee_id):
    if not Employee.find_by_id(employee_id):
        raise NotFound("Employee not found")


# -----------------------------
# LIST TASKS
# -----------------------------
@tasks_bp.route("", methods=["GET"])
@caller_required
def list_tasks():
    caller = current_caller()
    assigned_to = (request.args.get("assignedTo") or "").strip() or None

    query = build_task_query(caller, caller_role(caller), assigned_to)
    tasks = list(Task.collection().find(query))
    tasks.sort(key=Task.sort_key)

    return jsonify({"success": True, "tasks": serialize(tasks)})


# -----------------------------
# CREATE TASK
# -----------------------------
@tasks_bp.route("", methods=["POST"])
@permission_required("canAssignTasks")
def create_task():
    caller = current_caller()
    body = json_body()

    missing = [f for f in ("title", "assignedTo", "dueDate") if not body.get(f)]
    if missing:
        raise ValidationError("Title, assignedTo, and valid dueDate are required")

    fields = validate_task_fields({
        "title": body.get("title"),
        "description": body.get("description") or "",
        "assignedTo": body.get("assignedTo"),
        "dueDate": body.get("dueDate"),
        "priority": body.get("priority") or "medium",
        "status": body.get("status") or "pending",
    })
    _require_employee(fields["assignedTo"])

    if caller.is_admin:
        assigned_by = body.get("assignedBy") or caller.username
    else:
        assigned_by = caller.employee_id

    task = Task(
        title=fields["title"],
        description=fields["description"],
        assigned_by=assigned_by,
        assigned_to=fields["assignedTo"],
        role=resolve_role_id(fields["assignedTo"]),
        priority=fields["priority"],
        status=fields["status"],
        due_date=fields["dueDate"],
    )
    result = task.save()

    created = Task.collection().find_one({"_id": result.inserted_id})
    current_app.logger.info("Task %s assigned to %s by %s", result.inserted_id, task.assigned_to, assigned_by)
    return jsonify({"success": True, "task": serialize(created)}), 201


# -----------------------------
# PROGRESS FEED (all tasks)
# -----------------------------
@tasks_bp.route("/progress", methods=["GET"])
@permission_required("canViewReports")
def progress_feed():
    try:
        limit = int(request.args.get("limit", FEED_DEFAULT_LIMIT))
    except ValueError:
        raise ValidationError("limit must be a number")
    limit = max(1, min(limit, FEED_MAX_LIMIT))

    tasks = Task.collection().find(
        {"progressUpdates": {"$exists": True, "$ne": []}},
        {"title": 1, "assignedTo": 1, "progressUpdates": 1},
    )

    updates = []
    for t in tasks:
        for entry in t.get("progressUpdates") or []:
            updates.append({
                "taskId": str(t["_id"]),
                "taskTitle": t.get("title"),
                "assignedTo": str(t.get("assignedTo")),
                "message": entry.get("message"),
                "timestamp": entry.get("timestamp"),
            })

    updates.sort(key=lambda u: u["timestamp"] or datetime.min, reverse=True)
    updates = updates[:limit]

    try:
        names = Employee.names_for(u["assignedTo"] for u in updates)
    except InvalidId as e:
        # Serve the feed without names rather than failing it
        current_app.logger.warning("Progress feed served without employee names: %s", e)
        names = None

    for u in updates:
        if names is not None:
            u["employeeName"] = names.get(u["assignedTo"], "Unknown")

    return jsonify({"success": True, "updates": serialize(updates)})


# -----------------------------
# VIEW ONE TASK
# -----------------------------
@tasks_bp.route("/<task_id>", methods=["GET"])
@caller_required
def get_task(task_id):
    caller = current_caller()
    task = _load_task(task_id)

    if not is_task_visible(caller, caller_role(caller), task):
        raise Forbidden()

    return jsonify({"success": True, "task": serialize(task)})


# -----------------------------
# UPDATE TASK
# -----------------------------
@tasks_bp.route("/<task_id>", methods=["PUT"])
@caller_required
def update_task(task_id):
    caller = current_caller()
    task = _load_task(task_id)
    permissions = caller_permissions(caller)

    if not can_mutate_task(caller, permissions, task):
        current_app.logger.info("Task %s update refused for %s", task_id, caller)
        raise Forbidden()

    body = json_body()
    manager = is_task_manager(caller, permissions)
    updates = validate_task_fields(scope_task_updates(body, manager))

    if "assignedTo" in updates:
        if updates["assignedTo"] == str(task.get("assignedTo")):
            del updates["assignedTo"]
        else:
            _require_employee(updates["assignedTo"])
            updates["role"] = resolve_role_id(updates["assignedTo"])

    if updates:
        updates["updatedAt"] = datetime.utcnow()
        Task.collection().update_one({"_id": task["_id"]}, {"$set": updates})

    task = Task.collection().find_one({"_id": task["_id"]})
    return jsonify({"success": True, "task": serialize(task)})


# -----------------------------
# DELETE TASK
# -----------------------------
@tasks_bp.route("/<task_id>", methods=["DELETE"])
@caller_required
def delete_task(task_id):
    caller = current_caller()
    task = _load_task(task_id)

    if not can_mutate_task(caller, caller_permissions(caller), task):
        raise Forbidden()

    Task.collection().delete_one({"_id": task["_id"]})
    current_app.logger.info("Task %s deleted by %s", task_id, caller)
    return jsonify({"success": True, "message": "Task deleted"})


# -----------------------------
# ADD PROGRESS (assignee only)
# -----------------------------
@tasks_bp.route("/<task_id>/progress", methods=["POST"])
@caller_required
def add_progress(task_id):
    caller = current_caller()
    task = _load_task(task_id)
    if not can_append_progress(caller, task):
        current_app.logger.info("Progress on task %s refused for %s", task_id, caller)
        raise Forbidden()

    body = json_body()
    message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Message is required")

    status = body.get("status")
    if status is not None:
        validate_status(status)

    now = datetime.utcnow()
    update = {"$push": {"progressUpdates": {"message": message.strip(), "timestamp": now}},
              "$set": {"updatedAt": now}}
    if status:
        update["$set"]["status"] = status

    # One document, one update: the append and the status change land together
    Task.collection().update_one({"_id": task["_id"]}, update)

    return jsonify({"success": True}), 201


# -----------------------------
# LIST PROGRESS
# -----------------------------
@tasks_bp.route("/<task_id>/progress", methods=["GET"])
@caller_required
def list_progress(task_id):
    caller = current_caller()
    task = _load_task(task_id)

    if not is_task_visible(caller, caller_role(caller), task):
        raise Forbidden()

    messages = task.get("progressUpdates") or []
    return jsonify({"success": True, "messages": serialize(messages)})
