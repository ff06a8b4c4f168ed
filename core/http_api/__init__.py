"""
EastGate HTTP API - Public API
==============================
"""

from core.http_api.contracts import (
    CredentialRotateHttpRequest,
    GuestRegisterHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    LoginHttpRequest,
    MutationHttpRequest,
    ScopedReadRequest,
    StaffProvisionHttpRequest,
    StaffRemoveHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    error_response,
    http_status_for,
    map_rejection_reason,
    rejection_response,
    success_response,
)
from core.http_api.session import SESSION_KEY, SessionPrincipal

__all__ = [
    "CredentialRotateHttpRequest",
    "GuestRegisterHttpRequest",
    "HttpApiDependencies",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "LoginHttpRequest",
    "MutationHttpRequest",
    "SESSION_KEY",
    "ScopedReadRequest",
    "SessionPrincipal",
    "StaffProvisionHttpRequest",
    "StaffRemoveHttpRequest",
    "error_response",
    "http_status_for",
    "map_rejection_reason",
    "rejection_response",
    "success_response",
]
