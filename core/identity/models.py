"""
EastGate Identity — Models
============================
Authentication identities. Distinct from StaffMember / Guest business
records, although by convention they share the same id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, Role


class Namespace(str, Enum):
    SEEDED = "seeded"
    PROVISIONED = "provisioned"
    GUEST = "guest"


# Authentication checks namespaces in this order; first match wins.
AUTHENTICATION_ORDER = (Namespace.PROVISIONED, Namespace.SEEDED, Namespace.GUEST)


@dataclass(frozen=True)
class Identity:
    """
    Stored identity. Only the credential hash is ever kept.

    Invariants:
        - email is lower-case
        - seeded and guest identities never require rotation
        - guest identities carry the guest role and the branch wildcard
    """

    id: str
    email: str
    role: Role
    branch_id: str
    name: str
    credential_hash: str
    namespace: Namespace
    rotation_required: bool = False

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.email or self.email != self.email.strip().lower():
            raise ValueError("email must be non-empty, trimmed and lower-case.")
        if not isinstance(self.role, Role):
            raise ValueError("role must be a Role.")
        if not isinstance(self.namespace, Namespace):
            raise ValueError("namespace must be a Namespace.")
        if not self.credential_hash:
            raise ValueError("credential_hash must be set.")
        if self.namespace != Namespace.PROVISIONED and self.rotation_required:
            raise ValueError(
                f"{self.namespace.value} identities never require rotation."
            )
        if self.namespace == Namespace.GUEST and (
            self.role != Role.GUEST or self.branch_id != BRANCH_WILDCARD
        ):
            raise ValueError("guest identities use the guest role and branch wildcard.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "branch_id": self.branch_id,
            "name": self.name,
            "credential_hash": self.credential_hash,
            "namespace": self.namespace.value,
            "rotation_required": self.rotation_required,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        return cls(
            id=data["id"],
            email=data["email"],
            role=Role(data["role"]),
            branch_id=data["branch_id"],
            name=data.get("name", ""),
            credential_hash=data["credential_hash"],
            namespace=Namespace(data["namespace"]),
            rotation_required=bool(data.get("rotation_required", False)),
        )


@dataclass(frozen=True)
class IdentityView:
    """What callers get back: the identity without its credential hash."""

    id: str
    email: str
    role: Role
    branch_id: str
    name: str
    namespace: Namespace
    rotation_required: bool

    @classmethod
    def of(cls, identity: Identity) -> "IdentityView":
        return cls(
            id=identity.id,
            email=identity.email,
            role=identity.role,
            branch_id=identity.branch_id,
            name=identity.name,
            namespace=identity.namespace,
            rotation_required=identity.rotation_required,
        )

    def to_actor(self) -> ActorContext:
        return ActorContext(
            actor_id=self.id,
            role=self.role,
            branch_id=self.branch_id,
            actor_name=self.name,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "branch_id": self.branch_id,
            "name": self.name,
            "namespace": self.namespace.value,
            "rotation_required": self.rotation_required,
        }
