from utils.db import mongo, to_object_id
from datetime import datetime

# Every capability a Role can grant, in display order
PERMISSION_KEYS = (
    "canCheckIn",
    "canManageEmployees",
    "canManageDepartments",
    "canManageRoles",
    "canAssignTasks",
    "canViewAllTasks",
    "canViewTasks",
    "canViewReports",
)


class PermissionSet:
    """
    Immutable set of granted capabilities.

    Built from the `permissions` sub-document of a Role. Keys that are
    missing or not True are denied; unknown keys are ignored.
    """

    __slots__ = ("_granted", "_grant_all")

    def __init__(self, granted=(), grant_all=False):
        object.__setattr__(self, "_granted", frozenset(k for k in granted if k in PERMISSION_KEYS))
        object.__setattr__(self, "_grant_all", grant_all)

    def __setattr__(self, name, value):
        raise AttributeError("PermissionSet is immutable")

    @classmethod
    def from_document(cls, permissions):
        permissions = permissions if isinstance(permissions, dict) else {}
        return cls(k for k, v in permissions.items() if v is True)

    @classmethod
    def default(cls):
        # No-role fallback. canViewTasks is deliberately False here.
        return cls()

    @classmethod
    def everything(cls):
        return cls(grant_all=True)

    @property
    def grants_everything(self):
        return self._grant_all

    def allows(self, name):
        return self._grant_all or name in self._granted

    def __getitem__(self, name):
        return self.allows(name)

    def to_dict(self):
        return {key: self.allows(key) for key in PERMISSION_KEYS}

    def __eq__(self, other):
        if not isinstance(other, PermissionSet):
            return NotImplemented
        return self._grant_all == other._grant_all and self._granted == other._granted

    def __hash__(self):
        return hash((self._grant_all, self._granted))

    def __repr__(self):
        if self._grant_all:
            return "PermissionSet(<all>)"
        return "PermissionSet(%s)" % ", ".join(sorted(self._granted))


class Role:

    @staticmethod
    def collection():
        return mongo.db.roles

    def __init__(self, name, department=None, permissions=None, description=None, created_at=None):
        self.name = name
        self.department = department
        self.permissions = PermissionSet.from_document(permissions).to_dict()
        self.description = description
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "name": self.name,
            "department": self.department,
            "permissions": self.permissions,
            "description": self.description,
            "created_at": self.created_at
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(role_id):
        oid = to_object_id(role_id)
        if oid is None:
            return None
        return Role.collection().find_one({"_id": oid})

    @staticmethod
    def find_by_name(name, department=None):
        query = {"name": name}
        if department is not None:
            query["department"] = department
        return Role.collection().find_one(query)
