from utils.db import mongo, to_object_id
from datetime import datetime
from bson import ObjectId
from werkzeug.security import generate_password_hash, check_password_hash


class Employee:

    @staticmethod
    def collection():
        return mongo.db.employees

    def __init__(self, name, email, password, role=None, department=None, position=None,
                 created_at=None, updated_at=None):
        self.name = name
        self.email = email
        self.password = generate_password_hash(password)
        # Either an ObjectId reference to a Role or a plain Role name
        self.role = role
        self.department = department
        self.position = position
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "role": self.role,
            "department": self.department,
            "position": self.position,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    # Save new employee
    def save(self):
        return self.collection().insert_one(self.to_dict())

    # Find employee by ID
    @staticmethod
    def find_by_id(employee_id):
        oid = to_object_id(employee_id)
        if oid is None:
            return None
        return Employee.collection().find_one({"_id": oid})

    # Find employee by email
    @staticmethod
    def find_by_email(email):
        return Employee.collection().find_one({"email": email})

    # Map employee id -> name. Raises InvalidId if any id is malformed.
    @staticmethod
    def names_for(employee_ids):
        ids = [ObjectId(str(i)) for i in set(employee_ids) if i]
        if not ids:
            return {}
        cursor = Employee.collection().find({"_id": {"$in": ids}}, {"name": 1})
        return {str(e["_id"]): e.get("name") for e in cursor}

    # Verify password
    @staticmethod
    def verify_password(email, password):
        employee = Employee.find_by_email(email)
        if employee and check_password_hash(employee.get("password") or "", password):
            return employee
        return None
