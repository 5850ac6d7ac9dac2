from utils.db import mongo, to_object_id
from datetime import datetime

PRIORITIES = ("low", "medium", "high")
STATUSES = ("pending", "in-progress", "completed", "cancelled")

# Sort weight for "priority descending"
PRIORITY_RANK = {"low": 0, "medium": 1, "high": 2}


class Task:

    @staticmethod
    def collection():
        return mongo.db.tasks

    def __init__(self, title, assigned_by, assigned_to, due_date, description="", role=None,
                 priority="medium", status="pending", progress_updates=None,
                 created_at=None, updated_at=None):
        self.title = title
        self.description = description
        self.assigned_by = assigned_by
        self.assigned_to = assigned_to
        # Role id of the assignee when the task was (re)assigned
        self.role = role
        self.priority = priority
        self.status = status
        self.due_date = due_date
        self.progress_updates = progress_updates or []
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def to_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "assignedBy": self.assigned_by,
            "assignedTo": self.assigned_to,
            "role": self.role,
            "priority": self.priority,
            "status": self.status,
            "dueDate": self.due_date,
            "progressUpdates": self.progress_updates,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(task_id):
        oid = to_object_id(task_id)
        if oid is None:
            return None
        return Task.collection().find_one({"_id": oid})

    @staticmethod
    def sort_key(task):
        """dueDate ascending, then priority descending."""
        due = task.get("dueDate") or datetime.max
        return due, -PRIORITY_RANK.get(task.get("priority"), 0)


"""
progressUpdates: append-only list, only ever written with $push.
Example:
[
    {"message": "Drafted the schedule", "timestamp": ISODate("2026-10-19T09:12:00Z")},
    {"message": "Sent for review", "timestamp": ISODate("2026-10-19T15:40:00Z")}
]
"""
