from utils.db import mongo
from datetime import datetime

NOTIFICATION_TYPES = ("admin_message", "work_check")


class BroadcastMessage:

    @staticmethod
    def collection():
        return mongo.db.broadcast_messages

    def __init__(self, subject, body, created_by, recipients, urgent=False, created_at=None):
        self.subject = subject
        self.body = body
        self.urgent = urgent
        self.created_by = created_by
        self.recipients = recipients
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "subject": self.subject,
            "body": self.body,
            "urgent": self.urgent,
            "createdBy": self.created_by,
            "recipients": self.recipients,
            "createdAt": self.created_at,
        }

    def save(self):
        return BroadcastMessage.collection().insert_one(self.to_dict())


class Notification:

    @staticmethod
    def collection():
        return mongo.db.notifications

    def __init__(self, to_employee_id, from_admin_id, message, type="admin_message",
                 read=False, created_at=None):
        self.to_employee_id = to_employee_id
        self.from_admin_id = from_admin_id
        self.message = message
        self.type = type  # admin_message | work_check
        self.read = read
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "toEmployeeId": self.to_employee_id,
            "fromAdminId": self.from_admin_id,
            "message": self.message,
            "type": self.type,
            "read": self.read,
            "createdAt": self.created_at,
        }

    def save(self):
        return Notification.collection().insert_one(self.to_dict())
