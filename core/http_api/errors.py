"""
EastGate HTTP API - Error Mapping
=================================
Stable transport error mapping for rejections and handler failures.
"""

from __future__ import annotations

from typing import Any, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse

HTTP_STATUS_BY_CODE = {
    ReasonCode.VALIDATION_ERROR: 400,
    ReasonCode.INVALID_REQUEST: 400,
    ReasonCode.INVALID_CREDENTIALS: 401,
    ReasonCode.NOT_AUTHENTICATED: 401,
    ReasonCode.PERMISSION_DENIED: 403,
    ReasonCode.CREDENTIALS_CHANGE_REQUIRED: 403,
    ReasonCode.NOT_FOUND: 404,
    ReasonCode.EMAIL_RESERVED: 409,
    ReasonCode.EMAIL_TAKEN: 409,
    ReasonCode.NOT_REMOVABLE: 409,
    ReasonCode.SELF_REMOVAL: 409,
    ReasonCode.INVALID_STATUS_TRANSITION: 409,
    ReasonCode.RATE_LIMITED: 429,
}


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(
    data: Any,
    *,
    meta: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data, meta=meta).to_dict()


def map_rejection_reason(reason: RejectionReason) -> HttpApiErrorBody:
    message_key = (
        reason.message_key
        if reason.message_key is not None
        else f"rejection.{reason.code.lower()}"
    )
    return HttpApiErrorBody(
        code=reason.code,
        message=reason.message,
        details={
            "policy_name": reason.policy_name,
            "message_key": message_key,
            "message_params": dict(reason.message_params),
        },
    )


def rejection_response(
    reason: RejectionReason,
    *,
    extra_details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    mapped = map_rejection_reason(reason)
    details = dict(mapped.details)
    if extra_details:
        details.update(extra_details)
    return error_response(
        code=mapped.code,
        message=mapped.message,
        details=details,
    )


def http_status_for(payload: dict[str, Any]) -> int:
    if payload.get("ok"):
        return 200
    code = (payload.get("error") or {}).get("code")
    return HTTP_STATUS_BY_CODE.get(code, 400)
