from utils.db import mongo
from datetime import datetime

REQUEST_STATUSES = ("pending", "approved", "rejected")


class Holiday:

    @staticmethod
    def collection():
        return mongo.db.holidays

    def __init__(self, date, description=None, created_at=None):
        self.date = date
        self.description = description
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "date": self.date,
            "description": self.description,
            "created_at": self.created_at
        }

    def save(self):
        return Holiday.collection().insert_one(self.to_dict())


class HolidayRequest:

    @staticmethod
    def collection():
        return mongo.db.holiday_requests

    def __init__(self, employee_id, employee_name, date, message, status="pending", created_at=None):
        self.employee_id = employee_id
        self.employee_name = employee_name
        self.date = date  # YYYY-MM-DD
        self.message = message
        self.status = status  # pending | approved | rejected
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.date,
            "message": self.message,
            "status": self.status,
            "createdAt": self.created_at
        }

    def save(self):
        return HolidayRequest.collection().insert_one(self.to_dict())
