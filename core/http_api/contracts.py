"""
EastGate HTTP API - Contracts
=============================
Framework-agnostic request/response DTOs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


def _require_text(value: Any, field_name: str) -> None:
    if not value or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")


@dataclass(frozen=True)
class LoginHttpRequest:
    email: str
    password: str
    branch_id: str

    def __post_init__(self):
        _require_text(self.email, "email")
        _require_text(self.password, "password")
        _require_text(self.branch_id, "branch_id")


@dataclass(frozen=True)
class GuestRegisterHttpRequest:
    name: str
    email: str
    password: str
    phone: str = ""
    nationality: str = ""

    def __post_init__(self):
        _require_text(self.name, "name")
        _require_text(self.email, "email")
        _require_text(self.password, "password")


@dataclass(frozen=True)
class CredentialRotateHttpRequest:
    new_email: str
    new_password: str

    def __post_init__(self):
        _require_text(self.new_email, "new_email")
        _require_text(self.new_password, "new_password")


@dataclass(frozen=True)
class StaffProvisionHttpRequest:
    name: str
    email: str
    password: str
    role: str
    branch_id: str
    phone: str = ""
    department: str = ""

    def __post_init__(self):
        _require_text(self.name, "name")
        _require_text(self.email, "email")
        _require_text(self.password, "password")
        _require_text(self.role, "role")
        _require_text(self.branch_id, "branch_id")


@dataclass(frozen=True)
class StaffRemoveHttpRequest:
    identity_id: str

    def __post_init__(self):
        _require_text(self.identity_id, "identity_id")


@dataclass(frozen=True)
class ScopedReadRequest:
    resource: str
    branch: str = "all"

    def __post_init__(self):
        _require_text(self.resource, "resource")
        _require_text(self.branch, "branch")


@dataclass(frozen=True)
class MutationHttpRequest:
    """
    One façade call.

    action:    registry key, e.g. "bookings.create", "orders.status"
    record_id: target record for update/status/remove actions
    fields:    record fields (create) or changes (update)
    status:    target status for lifecycle actions
    """

    action: str
    fields: dict[str, Any] = field(default_factory=dict)
    record_id: Optional[str] = None
    status: Optional[str] = None

    def __post_init__(self):
        _require_text(self.action, "action")
        if not isinstance(self.fields, dict):
            raise ValueError("fields must be an object.")
        if self.record_id is not None:
            _require_text(self.record_id, "record_id")
        if self.status is not None:
            _require_text(self.status, "status")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None
    meta: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            payload = {"ok": True, "data": self.data}
        elif self.error is None:
            raise ValueError("error must be set when ok is False.")
        else:
            payload = {"ok": False, "error": self.error.to_dict()}
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload
