"""
EastGate Django Adapter Views
===============================
Pass-through HTTP views over core/http_api handlers.

The Django session (a signed cookie) is the session mapping the
handlers read and write; the handlers never see Django objects.
"""

from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.commands.rejection import ReasonCode
from core.context.scope import BRANCH_WILDCARD
from core.http_api.contracts import (
    CredentialRotateHttpRequest,
    GuestRegisterHttpRequest,
    LoginHttpRequest,
    MutationHttpRequest,
    ScopedReadRequest,
    StaffProvisionHttpRequest,
    StaffRemoveHttpRequest,
)
from core.http_api.errors import error_response, http_status_for
from core.http_api.handlers import (
    get_scoped_collection,
    get_session,
    list_provisioned_staff,
    post_guest_register,
    post_login,
    post_logout,
    post_mutation,
    post_rotate_credentials,
    post_staff_provision,
    post_staff_remove,
)


def _headers_from_request(request: HttpRequest) -> dict[str, str]:
    return {str(key): str(value) for key, value in request.headers.items()}


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _respond(payload: dict[str, Any]) -> JsonResponse:
    return JsonResponse(payload, status=http_status_for(payload))


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _dispatch_session(handler, request: HttpRequest) -> JsonResponse:
    payload = handler(
        build_dependencies(),
        session=request.session,
        headers=_headers_from_request(request),
    )
    return _respond(payload)


def _dispatch_write(handler, request_contract_factory, request: HttpRequest) -> JsonResponse:
    headers = _headers_from_request(request)
    try:
        body = _parse_json_body(request)
        contract = request_contract_factory(body)
    except (ValueError, KeyError, TypeError) as exc:
        return _json_error(ReasonCode.INVALID_REQUEST, str(exc), status=400)

    payload = handler(
        contract,
        build_dependencies(),
        session=request.session,
        headers=headers,
    )
    return _respond(payload)


# ══════════════════════════════════════════════════════════════
# CONTRACT FACTORIES
# ══════════════════════════════════════════════════════════════

def _login_contract_factory(body):
    return LoginHttpRequest(
        email=body["email"],
        password=body["password"],
        branch_id=body["branch_id"],
    )


def _guest_register_contract_factory(body):
    return GuestRegisterHttpRequest(
        name=body["name"],
        email=body["email"],
        password=body["password"],
        phone=body.get("phone", ""),
        nationality=body.get("nationality", ""),
    )


def _rotate_contract_factory(body):
    return CredentialRotateHttpRequest(
        new_email=body["new_email"],
        new_password=body["new_password"],
    )


def _staff_provision_contract_factory(body):
    return StaffProvisionHttpRequest(
        name=body["name"],
        email=body["email"],
        password=body["password"],
        role=body["role"],
        branch_id=body["branch_id"],
        phone=body.get("phone", ""),
        department=body.get("department", ""),
    )


def _staff_remove_contract_factory(body):
    return StaffRemoveHttpRequest(identity_id=body["identity_id"])


def _mutation_contract_factory(body):
    return MutationHttpRequest(
        action=body["action"],
        fields=body.get("fields") or {},
        record_id=body.get("record_id"),
        status=body.get("status"),
    )


# ══════════════════════════════════════════════════════════════
# AUTH
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def login_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_login, _login_contract_factory, request)


@csrf_exempt
def logout_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_session(post_logout, request)


@csrf_exempt
def session_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_session(get_session, request)


@csrf_exempt
def rotate_credentials_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_rotate_credentials, _rotate_contract_factory, request)


@csrf_exempt
def guest_register_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_guest_register, _guest_register_contract_factory, request)


# ══════════════════════════════════════════════════════════════
# STAFF ACCESS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def staff_list_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_session(list_provisioned_staff, request)


@csrf_exempt
def staff_provision_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_staff_provision, _staff_provision_contract_factory, request)


@csrf_exempt
def staff_remove_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_staff_remove, _staff_remove_contract_factory, request)


# ══════════════════════════════════════════════════════════════
# DATA
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def scoped_collection_view(request: HttpRequest, resource: str) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = ScopedReadRequest(
            resource=resource,
            branch=request.GET.get("branch") or BRANCH_WILDCARD,
        )
    except ValueError as exc:
        return _json_error(ReasonCode.INVALID_REQUEST, str(exc), status=400)

    payload = get_scoped_collection(
        contract,
        build_dependencies(),
        session=request.session,
        headers=_headers_from_request(request),
    )
    return _respond(payload)


@csrf_exempt
def mutation_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_mutation, _mutation_contract_factory, request)
