from utils.db import mongo
from datetime import datetime

LUNCH_TYPES = ("lunch-start", "lunch-end")


class LunchLog:

    @staticmethod
    def collection():
        return mongo.db.lunch_logs

    def __init__(self, employee_id, type, timestamp=None):
        self.employee_id = employee_id
        self.type = type  # lunch-start | lunch-end
        self.timestamp = timestamp or datetime.utcnow()

    def to_dict(self):
        return {
            "employeeId": self.employee_id,
            "type": self.type,
            "timestamp": self.timestamp
        }

    def save(self):
        return LunchLog.collection().insert_one(self.to_dict())


class LunchTime:
    """Allowed lunch window per employee, times as HH:MM."""

    @staticmethod
    def collection():
        return mongo.db.lunch_times

    @staticmethod
    def allowed_minutes(employee_id):
        schedule = LunchTime.collection().find_one({"employeeId": employee_id})
        if not schedule:
            return 0
        try:
            sh, sm = (int(p) for p in schedule["startTime"].split(":"))
            eh, em = (int(p) for p in schedule["endTime"].split(":"))
        except (KeyError, ValueError, AttributeError):
            return 0
        return (eh * 60 + em) - (sh * 60 + sm)
