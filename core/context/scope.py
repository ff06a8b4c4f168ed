"""
EastGate Context — Roles & Branch Scope Constants
===================================================
Closed role catalog and the branch wildcard.

Elevated roles see and manage every branch. Every other role
is pinned to exactly one branch.
"""

from __future__ import annotations

from enum import Enum


BRANCH_WILDCARD = "all"


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    SUPER_MANAGER = "super_manager"
    BRANCH_ADMIN = "branch_admin"
    BRANCH_MANAGER = "branch_manager"
    ACCOUNTANT = "accountant"
    EVENT_MANAGER = "event_manager"
    RECEPTIONIST = "receptionist"
    WAITER = "waiter"
    RESTAURANT_STAFF = "restaurant_staff"
    KITCHEN_STAFF = "kitchen_staff"
    HOUSEKEEPING = "housekeeping"
    GUEST = "guest"


ELEVATED_ROLES = frozenset({Role.SUPER_ADMIN, Role.SUPER_MANAGER})

VALID_ROLES = frozenset(role.value for role in Role)


def parse_role(value) -> Role:
    """Coerce a raw value into a Role. Raises ValueError for unknown roles."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown role '{value}'.") from None


def is_elevated(role) -> bool:
    return parse_role(role) in ELEVATED_ROLES
