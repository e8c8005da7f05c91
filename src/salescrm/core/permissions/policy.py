"""Role permission sets and the pure authorization decision.

Roles store permissions as JSON of the form
``{"accounts": ["read", "write"], "*": ["*"]}``. In memory that shape is
parsed once into a frozen ``PermissionSet`` so wildcard handling is
explicit rather than string matching scattered across call sites.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


ALL_RESOURCES = "*"


class Action(StrEnum):
    """Operations a role can be granted on a resource."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    ALL = "*"


class Resource(StrEnum):
    """Resources guarded by the permission model."""

    USERS = "users"
    ROLES = "roles"
    ACCOUNTS = "accounts"
    CONTACTS = "contacts"
    LEADS = "leads"
    OPPORTUNITIES = "opportunities"
    ACTIVITIES = "activities"
    TASKS = "tasks"
    NOTES = "notes"
    REPORTS = "reports"
    SETTINGS = "settings"


def _parse_actions(resource: str, actions: Iterable[Any]) -> frozenset[Action]:
    if isinstance(actions, str):
        raise ValueError(f"Actions for '{resource}' must be a list, got a string")
    parsed: set[Action] = set()
    for action in actions:
        try:
            parsed.add(Action(action))
        except ValueError:
            raise ValueError(f"Unknown action '{action}' for resource '{resource}'") from None
    return frozenset(parsed)


@dataclass(frozen=True)
class PermissionSet:
    """Immutable grant table for one role.

    Attributes:
        universal: Actions granted under the all-resources entry
        resources: Actions granted per resource name
    """

    universal: frozenset[Action] = frozenset()
    resources: Mapping[str, frozenset[Action]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Iterable[Any]] | None) -> "PermissionSet":
        """Parse the stored JSON shape.

        Raises:
            ValueError: If an action string is not a known Action
        """
        universal: frozenset[Action] = frozenset()
        resources: dict[str, frozenset[Action]] = {}
        for resource, actions in (data or {}).items():
            parsed = _parse_actions(resource, actions)
            if resource == ALL_RESOURCES:
                universal = parsed
            else:
                resources[resource] = parsed
        return cls(universal=universal, resources=resources)

    def to_mapping(self) -> dict[str, list[str]]:
        """Serialize back to the stored JSON shape with stable ordering."""
        data: dict[str, list[str]] = {}
        if self.universal:
            data[ALL_RESOURCES] = sorted(a.value for a in self.universal)
        for resource in sorted(self.resources):
            data[resource] = sorted(a.value for a in self.resources[resource])
        return data

    @property
    def is_superuser(self) -> bool:
        """True when the set grants every action on every resource."""
        return Action.ALL in self.universal


def is_allowed(
    permissions: PermissionSet | None,
    resource: str,
    action: Action | str,
) -> bool:
    """Decide whether a permission set grants ``action`` on ``resource``.

    The universal entry only short-circuits when it holds the ``*`` action.
    Otherwise the resource's own entry must list the action or ``*``.
    Absent entries and a missing permission set deny.
    """
    if permissions is None:
        return False
    if permissions.is_superuser:
        return True
    granted = permissions.resources.get(str(resource))
    if granted is None:
        return False
    return Action(action) in granted or Action.ALL in granted


def grants_all(holder: PermissionSet | None, requested: PermissionSet) -> bool:
    """Decide whether ``holder`` already grants everything in ``requested``.

    Used to stop callers handing out access they do not have themselves.
    A superuser holder covers any set. The all-resources entry and a
    resource-wide ``*`` are only covered by the same wildcard.
    """
    if holder is not None and holder.is_superuser:
        return True
    if requested.universal:
        return False
    for resource, actions in requested.resources.items():
        if Action.ALL in actions:
            granted = holder.resources.get(resource) if holder else None
            if granted is None or Action.ALL not in granted:
                return False
            continue
        if not all(is_allowed(holder, resource, action) for action in actions):
            return False
    return True
