"""
EastGate HTTP API - Session Principal
=====================================
What the session/cookie layer keeps after a successful login:
{isAuthenticated, role, branchId, userId} plus the rotation flag.

The session itself is any mutable mapping (Django's request.session
in the adapter, a plain dict in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from core.context.actor_context import ActorContext
from core.context.scope import parse_role
from core.identity.models import IdentityView

SESSION_KEY = "eastgate_principal"


@dataclass(frozen=True)
class SessionPrincipal:
    user_id: str
    role: str
    branch_id: str
    name: str = ""
    requires_credentials_change: bool = False

    @classmethod
    def from_identity(cls, identity: IdentityView) -> "SessionPrincipal":
        return cls(
            user_id=identity.id,
            role=identity.role.value,
            branch_id=identity.branch_id,
            name=identity.name,
            requires_credentials_change=identity.rotation_required,
        )

    def to_session_dict(self) -> dict[str, Any]:
        return {
            "isAuthenticated": True,
            "role": self.role,
            "branchId": self.branch_id,
            "userId": self.user_id,
            "name": self.name,
            "requiresCredentialsChange": self.requires_credentials_change,
        }

    @classmethod
    def from_session_dict(cls, data: Any) -> Optional["SessionPrincipal"]:
        if not isinstance(data, dict) or not data.get("isAuthenticated"):
            return None
        try:
            return cls(
                user_id=str(data["userId"]),
                role=str(data["role"]),
                branch_id=str(data["branchId"]),
                name=str(data.get("name") or ""),
                requires_credentials_change=bool(data.get("requiresCredentialsChange")),
            )
        except KeyError:
            return None

    def to_actor(self) -> ActorContext:
        return ActorContext(
            actor_id=self.user_id,
            role=parse_role(self.role),
            branch_id=self.branch_id,
            actor_name=self.name,
        )


ANONYMOUS_SESSION = {
    "isAuthenticated": False,
    "role": None,
    "branchId": None,
    "userId": None,
}


def read_principal(session: MutableMapping[str, Any]) -> Optional[SessionPrincipal]:
    return SessionPrincipal.from_session_dict(session.get(SESSION_KEY))


def write_principal(session: MutableMapping[str, Any], principal: SessionPrincipal) -> None:
    session[SESSION_KEY] = principal.to_session_dict()


def clear_principal(session: MutableMapping[str, Any]) -> None:
    session.pop(SESSION_KEY, None)
