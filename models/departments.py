from utils.db import mongo, to_object_id
from datetime import datetime


class Department:

    @staticmethod
    def collection():
        return mongo.db.departments

    def __init__(self, name, description=None, created_at=None, updated_at=None):
        self.name = name
        self.description = description
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    def save(self):
        return Department.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(department_id):
        oid = to_object_id(department_id)
        if oid is None:
            return None
        return Department.collection().find_one({"_id": oid})
