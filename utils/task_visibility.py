"""
utils/task_visibility.py
-----------------
Which tasks a caller may see, change, or report progress on.

A task carries a `role` snapshot: the Role id of its assignee at the time
it was created or reassigned. Role-based visibility matches that snapshot,
not the assignee's current role.
"""

from models.tasks import PRIORITIES, STATUSES
from utils.db import parse_date
from utils.errors import ValidationError

MANAGER_FIELDS = ("title", "description", "priority", "status", "dueDate", "assignedTo")
ASSIGNEE_FIELDS = ("description", "status")


def build_task_query(caller, resolved, assigned_to=None):
    """Mongo filter for the tasks `caller` may list."""
    permissions = resolved.permissions

    if caller.is_admin or permissions.allows("canViewAllTasks"):
        return {"assignedTo": assigned_to} if assigned_to else {}

    me = caller.employee_id

    if permissions.allows("canViewTasks"):
        or_conditions = [{"assignedTo": me}]
        if resolved.role_id is not None:
            or_conditions.append({"role": str(resolved.role_id)})
        if assigned_to:
            return {"$and": [{"$or": or_conditions}, {"assignedTo": assigned_to}]}
        return {"$or": or_conditions}

    return {"assignedTo": me}


def is_task_visible(caller, resolved, task):
    """Same rule as build_task_query, applied to one loaded task."""
    permissions = resolved.permissions
    if caller.is_admin or permissions.allows("canViewAllTasks"):
        return True
    if is_assignee(caller, task):
        return True
    return (permissions.allows("canViewTasks")
            and resolved.role_id is not None
            and task.get("role") == str(resolved.role_id))


def is_assignee(caller, task):
    if caller.is_admin:
        return False
    assigned_to = task.get("assignedTo")
    return assigned_to is not None and str(assigned_to) == caller.employee_id


def is_task_manager(caller, permissions):
    return caller.is_admin or permissions.allows("canAssignTasks")


def can_mutate_task(caller, permissions, task):
    return is_task_manager(caller, permissions) or is_assignee(caller, task)


def can_append_progress(caller, task):
    # Managers reassign instead of writing progress for someone else
    return is_assignee(caller, task)


def scope_task_updates(body, manager):
    """Keep only the fields this class of caller may change; drop the rest silently."""
    allowed = MANAGER_FIELDS if manager else ASSIGNEE_FIELDS
    return {field: body[field] for field in allowed if field in body and body[field] is not None}


def validate_status(value):
    if value not in STATUSES:
        raise ValidationError("Invalid status. Must be one of: %s" % ", ".join(STATUSES))
    return value


def validate_task_fields(fields):
    """Check scoped task fields and convert them to stored values. Raises ValidationError."""
    clean = {}
    for field, value in fields.items():
        if field in ("title", "description", "assignedTo"):
            if not isinstance(value, str):
                raise ValidationError("%s must be a string" % field)
            value = value.strip() if field != "description" else value
            if field != "description" and not value:
                raise ValidationError("%s cannot be empty" % field)
        elif field == "priority":
            if value not in PRIORITIES:
                raise ValidationError("Invalid priority. Must be one of: %s" % ", ".join(PRIORITIES))
        elif field == "status":
            validate_status(value)
        elif field == "dueDate":
            value = parse_date(value)
            if value is None:
                raise ValidationError("dueDate must be a valid date")
        clean[field] = value
    return clean
