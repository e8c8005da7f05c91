"""Role-based permission model."""

from salescrm.core.permissions.cache import PermissionCache
from salescrm.core.permissions.checker import PermissionChecker
from salescrm.core.permissions.defaults import DEFAULT_ROLES, default_permission_set
from salescrm.core.permissions.models import Role
from salescrm.core.permissions.policy import (
    ALL_RESOURCES,
    Action,
    PermissionSet,
    Resource,
    is_allowed,
)


__all__ = [
    "ALL_RESOURCES",
    "DEFAULT_ROLES",
    "Action",
    "PermissionCache",
    "PermissionChecker",
    "PermissionSet",
    "Resource",
    "Role",
    "default_permission_set",
    "is_allowed",
]
