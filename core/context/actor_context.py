"""
EastGate Context - ActorContext
===============================
Immutable caller identity for reads and writes.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.context.scope import BRANCH_WILDCARD, Role, is_elevated


@dataclass(frozen=True)
class ActorContext:
    """
    Who is calling, in which role, pinned to which branch.

    branch_id is a concrete branch id, or BRANCH_WILDCARD for
    elevated roles and guests.
    """

    actor_id: str
    role: Role
    branch_id: str
    actor_name: str = ""

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

        if not isinstance(self.role, Role):
            raise ValueError("role must be a Role.")

        if not self.branch_id or not isinstance(self.branch_id, str):
            raise ValueError("branch_id must be a non-empty string.")

        if (
            self.branch_id == BRANCH_WILDCARD
            and not self.is_elevated
            and self.role != Role.GUEST
        ):
            raise ValueError(
                "Only elevated roles and guests may carry the branch wildcard."
            )

    @property
    def is_elevated(self) -> bool:
        return is_elevated(self.role)

    @property
    def display_name(self) -> str:
        return self.actor_name or self.actor_id
