import pytest
from bson import ObjectId

from models.employees import Employee
from models.roles import PERMISSION_KEYS, PermissionSet, Role
from utils.permissions import NO_ROLE, resolve_permissions, resolve_role, resolve_role_id


def test_permission_set_defaults_missing_keys_to_false():
    perms = PermissionSet.from_document({"canAssignTasks": True, "canViewTasks": "yes", "bogus": True})

    assert perms.allows("canAssignTasks")
    assert not perms.allows("canViewTasks")
    assert not perms.allows("bogus")
    assert set(perms.to_dict()) == set(PERMISSION_KEYS)


def test_default_permission_set_denies_everything():
    assert not any(PermissionSet.default().to_dict().values())


def test_everything_grants_names_outside_the_known_list():
    perms = PermissionSet.everything()
    assert perms.allows("canViewReports")
    assert perms.allows("canLaunchRockets")


def test_permission_set_is_immutable():
    perms = PermissionSet.from_document({"canCheckIn": True})
    with pytest.raises(AttributeError):
        perms._granted = frozenset()


def test_reference_role_resolves_to_that_roles_permissions(make_role, make_employee):
    role_id = make_role("Supervisor", canAssignTasks=True, canViewTasks=True)
    employee_id = make_employee("Ada", role=role_id)

    resolved = resolve_role(employee_id)

    assert resolved.role_id == role_id
    assert resolved.name == "Supervisor"
    assert resolved.permissions == PermissionSet.from_document({"canAssignTasks": True, "canViewTasks": True})


def test_role_name_string_resolves_by_name(make_role, make_employee):
    role_id = make_role("Cashier", canCheckIn=True)
    employee_id = make_employee("Bo", role="Cashier")

    resolved = resolve_role(employee_id)

    assert resolved.role_id == role_id
    assert resolve_permissions(employee_id).allows("canCheckIn")


def test_embedded_role_document_is_followed(make_role, app):
    role_id = make_role("Lead", canViewAllTasks=True)
    by_id = Employee.collection().insert_one({"name": "Cy", "role": {"_id": role_id}}).inserted_id
    by_name = Employee.collection().insert_one({"name": "Di", "role": {"name": "Lead"}}).inserted_id

    assert resolve_role(by_id).role_id == role_id
    assert resolve_role(by_name).role_id == role_id


def test_unknown_role_name_falls_back_to_default(make_employee):
    employee_id = make_employee("Ed", role="Ghost")

    assert resolve_role(employee_id) == NO_ROLE
    assert resolve_permissions(employee_id) == PermissionSet.default()


def test_dangling_role_reference_falls_back_to_default(make_employee):
    employee_id = make_employee("Fay", role=ObjectId())
    assert resolve_role(employee_id) == NO_ROLE


@pytest.mark.parametrize("employee_id", [str(ObjectId()), "not-an-object-id", "", None])
def test_missing_employee_never_raises(app, employee_id):
    assert resolve_permissions(employee_id) == PermissionSet.default()


def test_employee_without_role_gets_default(make_employee):
    employee_id = make_employee("Gus")
    assert resolve_role(employee_id) == NO_ROLE
    assert resolve_role_id(employee_id) is None


def test_role_changes_are_seen_on_the_next_lookup(make_role, make_employee):
    role_id = make_role("Clerk", canViewReports=False)
    employee_id = make_employee("Hal", role=role_id)
    assert not resolve_permissions(employee_id).allows("canViewReports")

    Role.collection().update_one({"_id": role_id}, {"$set": {"permissions.canViewReports": True}})

    assert resolve_permissions(employee_id).allows("canViewReports")


def test_resolve_role_id_is_a_string(make_role, make_employee):
    role_id = make_role("Driver")
    employee_id = make_employee("Ivy", role="Driver")
    assert resolve_role_id(employee_id) == str(role_id)
