# models/__init__.py

from .roles import Role, PermissionSet
from .departments import Department
from .employees import Employee
from .tasks import Task
from .attendance import Attendance, Ping
from .holiday import Holiday, HolidayRequest
from .lunch import LunchLog, LunchTime
from .messages import BroadcastMessage, Notification

__all__ = [
    "Role",
    "PermissionSet",
    "Department",
    "Employee",
    "Task",
    "Attendance",
    "Ping",
    "Holiday",
    "HolidayRequest",
    "LunchLog",
    "LunchTime",
    "BroadcastMessage",
    "Notification"
]
