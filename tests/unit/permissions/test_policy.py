"""Unit tests for the permission set and the authorization decision."""

import pytest

from salescrm.core.permissions.defaults import (
    ADMIN,
    DEFAULT_ROLES,
    SALES_MANAGER,
    SALES_REP,
    SUPER_ADMIN,
    default_permission_set,
)
from salescrm.core.permissions.policy import (
    Action,
    PermissionSet,
    Resource,
    grants_all,
    is_allowed,
)


pytestmark = pytest.mark.unit


class TestIsAllowed:
    """Tests for is_allowed."""

    def test_universal_wildcard_grants_everything(self):
        permissions = PermissionSet.from_mapping({"*": ["*"]})

        assert is_allowed(permissions, "accounts", "delete")
        assert is_allowed(permissions, "anything-at-all", "read")

    def test_universal_without_wildcard_action_does_not_grant(self):
        """{"*": ["read"]} is not a blanket read grant."""
        permissions = PermissionSet.from_mapping({"*": ["read"]})

        assert not is_allowed(permissions, "accounts", "read")

    def test_resource_action_listed(self):
        permissions = PermissionSet.from_mapping({"accounts": ["read", "write"]})

        assert is_allowed(permissions, "accounts", Action.READ)
        assert is_allowed(permissions, "accounts", "write")
        assert not is_allowed(permissions, "accounts", "delete")

    def test_resource_wildcard_action(self):
        permissions = PermissionSet.from_mapping({"leads": ["*"]})

        assert is_allowed(permissions, "leads", "delete")
        assert not is_allowed(permissions, "accounts", "read")

    def test_absent_resource_denies(self):
        permissions = PermissionSet.from_mapping({"accounts": ["read"]})

        assert not is_allowed(permissions, "contacts", "read")

    def test_empty_action_list_denies(self):
        permissions = PermissionSet.from_mapping({"accounts": []})

        assert not is_allowed(permissions, "accounts", "read")

    def test_no_permission_set_denies(self):
        assert not is_allowed(None, "accounts", "read")

    def test_accepts_resource_enum(self):
        permissions = PermissionSet.from_mapping({"users": ["read"]})

        assert is_allowed(permissions, Resource.USERS, Action.READ)


class TestPermissionSet:
    """Tests for parsing and serializing PermissionSet."""

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError, match="Unknown action 'approve'"):
            PermissionSet.from_mapping({"accounts": ["approve"]})

    def test_string_instead_of_list_rejected(self):
        with pytest.raises(ValueError, match="must be a list"):
            PermissionSet.from_mapping({"accounts": "read"})

    def test_none_is_empty(self):
        permissions = PermissionSet.from_mapping(None)

        assert permissions.to_mapping() == {}
        assert not permissions.is_superuser

    def test_to_mapping_is_sorted_and_deduplicated(self):
        permissions = PermissionSet.from_mapping(
            {"leads": ["write", "read", "read"], "accounts": ["read"]}
        )

        assert permissions.to_mapping() == {
            "accounts": ["read"],
            "leads": ["read", "write"],
        }

    def test_universal_entry_serialized_first(self):
        permissions = PermissionSet.from_mapping({"notes": ["read"], "*": ["*"]})

        assert list(permissions.to_mapping()) == ["*", "notes"]
        assert permissions.is_superuser


class TestGrantsAll:
    """Tests for grants_all."""

    def test_superuser_covers_anything(self):
        holder = PermissionSet.from_mapping({"*": ["*"]})

        assert grants_all(holder, PermissionSet.from_mapping({"*": ["*"]}))
        assert grants_all(holder, PermissionSet.from_mapping({"reports": ["write"]}))

    def test_subset_is_covered(self):
        holder = default_permission_set(ADMIN)

        assert grants_all(holder, default_permission_set(SALES_MANAGER))
        assert grants_all(holder, default_permission_set(SALES_REP))
        assert grants_all(holder, PermissionSet())

    def test_wildcards_need_the_same_wildcard(self):
        holder = default_permission_set(ADMIN)

        assert not grants_all(holder, default_permission_set(SUPER_ADMIN))
        assert not grants_all(holder, PermissionSet.from_mapping({"*": ["read"]}))
        assert not grants_all(holder, PermissionSet.from_mapping({"accounts": ["*"]}))
        assert grants_all(
            PermissionSet.from_mapping({"leads": ["*"]}),
            PermissionSet.from_mapping({"leads": ["*"]}),
        )

    def test_missing_action_not_covered(self):
        holder = default_permission_set(SALES_MANAGER)

        assert not grants_all(holder, default_permission_set(ADMIN))
        assert not grants_all(holder, PermissionSet.from_mapping({"reports": ["write"]}))

    def test_no_role_covers_only_nothing(self):
        assert grants_all(None, PermissionSet())
        assert not grants_all(None, PermissionSet.from_mapping({"accounts": ["read"]}))


class TestDefaultRoles:
    """Tests for the system roles created at onboarding."""

    def test_four_system_roles(self):
        assert [r["name"] for r in DEFAULT_ROLES] == [
            SUPER_ADMIN,
            ADMIN,
            SALES_MANAGER,
            SALES_REP,
        ]

    def test_super_admin_is_superuser(self):
        assert default_permission_set(SUPER_ADMIN).is_superuser

    def test_admin_manages_users_and_roles(self):
        permissions = default_permission_set(ADMIN)

        assert is_allowed(permissions, "users", "delete")
        assert is_allowed(permissions, "roles", "write")
        assert not permissions.is_superuser

    def test_manager_cannot_manage_users(self):
        permissions = default_permission_set(SALES_MANAGER)

        assert is_allowed(permissions, "accounts", "delete")
        assert not is_allowed(permissions, "users", "read")

    def test_rep_cannot_delete(self):
        permissions = default_permission_set(SALES_REP)

        assert is_allowed(permissions, "opportunities", "write")
        assert not is_allowed(permissions, "opportunities", "delete")
        assert not is_allowed(permissions, "reports", "read")

    def test_grant_tables(self):
        crm = ["accounts", "activities", "contacts", "leads", "notes", "opportunities", "tasks"]
        rwd = ["delete", "read", "write"]

        assert default_permission_set(ADMIN).to_mapping() == {
            **{resource: rwd for resource in crm},
            "users": rwd,
            "roles": rwd,
            "reports": ["read"],
            "settings": ["read", "write"],
        }
        assert default_permission_set(SALES_MANAGER).to_mapping() == {
            **{resource: rwd for resource in crm},
            "reports": ["read"],
        }
        assert default_permission_set(SALES_REP).to_mapping() == {
            resource: ["read", "write"] for resource in crm
        }

    def test_unknown_role(self):
        with pytest.raises(KeyError):
            default_permission_set("Intern")
