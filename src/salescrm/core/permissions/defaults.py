"""System roles created for every new tenant.

Admins and managers may delete CRM records and reps may not. Admins may
also edit roles, within the limits ``RoleService`` enforces.
"""

from typing import TypedDict

from salescrm.core.permissions.policy import Action, PermissionSet, Resource


CRM_RESOURCES: tuple[Resource, ...] = (
    Resource.ACCOUNTS,
    Resource.CONTACTS,
    Resource.LEADS,
    Resource.OPPORTUNITIES,
    Resource.ACTIVITIES,
    Resource.TASKS,
    Resource.NOTES,
)

_RWD = [Action.READ.value, Action.WRITE.value, Action.DELETE.value]
_RW = [Action.READ.value, Action.WRITE.value]


class RoleDefinition(TypedDict):
    """Seed data for one system role."""

    name: str
    description: str
    permissions: dict[str, list[str]]


SUPER_ADMIN = "Super Admin"
ADMIN = "Admin"
SALES_MANAGER = "Sales Manager"
SALES_REP = "Sales Rep"

DEFAULT_ROLES: list[RoleDefinition] = [
    {
        "name": SUPER_ADMIN,
        "description": "Full access to everything in the tenant",
        "permissions": {"*": [Action.ALL.value]},
    },
    {
        "name": ADMIN,
        "description": "Manages users, roles, and all CRM records",
        "permissions": {
            Resource.USERS.value: _RWD,
            Resource.ROLES.value: _RWD,
            **{resource.value: _RWD for resource in CRM_RESOURCES},
            Resource.REPORTS.value: [Action.READ.value],
            Resource.SETTINGS.value: _RW,
        },
    },
    {
        "name": SALES_MANAGER,
        "description": "Manages the sales team's records and reports",
        "permissions": {
            **{resource.value: _RWD for resource in CRM_RESOURCES},
            Resource.REPORTS.value: [Action.READ.value],
        },
    },
    {
        "name": SALES_REP,
        "description": "Works their own pipeline",
        "permissions": {resource.value: _RW for resource in CRM_RESOURCES},
    },
]


def default_permission_set(role_name: str) -> PermissionSet:
    """Return the parsed permission set of a system role.

    Raises:
        KeyError: If ``role_name`` is not a system role
    """
    for definition in DEFAULT_ROLES:
        if definition["name"] == role_name:
            return PermissionSet.from_mapping(definition["permissions"])
    raise KeyError(role_name)
