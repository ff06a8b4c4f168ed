"""
EastGate Command Layer — Rejection Model
==========================================
Structured rejection reasons for denied operations.

A rejection is NOT an exception. Expected business-rule outcomes
(bad credentials, duplicate email, illegal status change) are
returned to the caller as data.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Translatable (message_key + message_params)
- Non-leaking (no cross-branch detail in message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected operation.

    Fields:
        code:           Machine-readable rejection code (see ReasonCode).
        message:        Developer diagnostic, English only.
        policy_name:    Name of the rule that caused the rejection.
        message_key:    Translation key for the presentation layer.
        message_params: Interpolation values for message_key.
    """

    code: str
    message: str
    policy_name: str
    message_key: Optional[str] = None
    message_params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

        if not isinstance(self.message_params, dict):
            raise ValueError("message_params must be a dict.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
            "message_key": self.message_key or f"rejection.{self.code.lower()}",
            "message_params": dict(self.message_params),
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Identity ──────────────────────────────────────────────
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_RESERVED = "EMAIL_RESERVED"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    SELF_REMOVAL = "SELF_REMOVAL"

    # ── Records ───────────────────────────────────────────────
    NOT_FOUND = "NOT_FOUND"
    NOT_REMOVABLE = "NOT_REMOVABLE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # ── Transport / session ───────────────────────────────────
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    CREDENTIALS_CHANGE_REQUIRED = "CREDENTIALS_CHANGE_REQUIRED"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_REQUEST = "INVALID_REQUEST"


# ══════════════════════════════════════════════════════════════
# CONSTRUCTORS
# ══════════════════════════════════════════════════════════════

def reject(
    code: str,
    message: str,
    policy_name: str,
    **message_params: Any,
) -> RejectionReason:
    """Build a RejectionReason with the default translation key."""
    return RejectionReason(
        code=code,
        message=message,
        policy_name=policy_name,
        message_key=f"rejection.{code.lower()}",
        message_params=message_params,
    )


def validation_error(message: str, policy_name: str, **message_params: Any) -> RejectionReason:
    return reject(ReasonCode.VALIDATION_ERROR, message, policy_name, **message_params)


def not_found(kind: str, record_id: str, policy_name: str) -> RejectionReason:
    # Same wording whether the record is missing or in another branch.
    return reject(
        ReasonCode.NOT_FOUND,
        f"{kind} '{record_id}' not found.",
        policy_name,
        kind=kind,
        id=record_id,
    )
