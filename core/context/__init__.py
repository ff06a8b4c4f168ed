"""
EastGate Context — Public API
===============================
Caller identity, role catalog and branch scope constants.
"""

from core.context.actor_context import ActorContext
from core.context.scope import (
    BRANCH_WILDCARD,
    ELEVATED_ROLES,
    VALID_ROLES,
    Role,
    is_elevated,
    parse_role,
)

__all__ = [
    "ActorContext",
    "BRANCH_WILDCARD",
    "ELEVATED_ROLES",
    "VALID_ROLES",
    "Role",
    "is_elevated",
    "parse_role",
]
