"""
Role based permission matrix.

Roles are organization scoped. OWNER holds every permission; the other roles
are granted explicit ``resource -> actions`` sets.
"""

from typing import Dict, FrozenSet

from staysync.models.base.enums import UserRole

WILDCARD = "*"

ROLE_PERMISSIONS: Dict[UserRole, Dict[str, FrozenSet[str]]] = {
    UserRole.OWNER: {WILDCARD: frozenset({WILDCARD})},
    UserRole.ADMIN: {
        "rooms": frozenset({"create", "read", "update", "delete"}),
        "residents": frozenset({"create", "read", "update", "delete"}),
        "billing": frozenset({"create", "read", "update"}),
        "broadcast": frozenset({"create"}),
        "expenses": frozenset({"create", "read", "update", "delete"}),
        "issues": frozenset({"create", "read", "update", "delete"}),
        "bookings": frozenset({"read", "update"}),
        "reports": frozenset({"read"}),
        "dashboard": frozenset({"read"}),
        "settings": frozenset({"read", "update"}),
        "audit": frozenset({"read"}),
        "users": frozenset({"read"}),
    },
    UserRole.STAFF: {
        "rooms": frozenset({"read"}),
        "residents": frozenset({"read", "update"}),
        "billing": frozenset({"read"}),
        "issues": frozenset({"create", "read", "update"}),
        "bookings": frozenset({"read"}),
        "settings": frozenset({"read"}),
        "dashboard": frozenset({"read"}),
    },
    UserRole.TENANT: {
        "rooms": frozenset({"read"}),
        "issues": frozenset({"create"}),
        "bookings": frozenset({"create"}),
    },
}


def has_permission(role: UserRole, resource: str, action: str) -> bool:
    grants = ROLE_PERMISSIONS.get(UserRole(role), {})
    if WILDCARD in grants:
        return True
    actions = grants.get(resource, frozenset())
    return action in actions or WILDCARD in actions


__all__ = ["ROLE_PERMISSIONS", "has_permission"]
