from utils.db import mongo
from datetime import datetime

ATTENDANCE_TYPES = ("checkin", "checkout")


class Attendance:
    @staticmethod
    def collection():
        return mongo.db.attendances

    def __init__(self, employee_id, employee_name, type, timestamp=None, image_data=None,
                 created_at=None):
        self.employee_id = employee_id
        self.employee_name = employee_name
        self.type = type  # checkin | checkout
        self.timestamp = timestamp or datetime.utcnow()
        # Captured image is kept as the opaque string the client sent
        self.image_data = image_data
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "type": self.type,
            "timestamp": self.timestamp,
            "imageData": self.image_data,
            "createdAt": self.created_at,
        }

    def save(self):
        return Attendance.collection().insert_one(self.to_dict())


class Ping:
    @staticmethod
    def collection():
        return mongo.db.pings

    def __init__(self, employee_id, timestamp=None):
        self.employee_id = employee_id
        self.timestamp = timestamp or datetime.utcnow()

    def to_dict(self):
        return {
            "employeeId": self.employee_id,
            "timestamp": self.timestamp,
        }

    def save(self):
        return Ping.collection().insert_one(self.to_dict())
