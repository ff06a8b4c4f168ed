"""
EastGate HTTP API - Framework-Agnostic Handlers
===============================================
Pure handler functions over contracts, injected dependencies and a
session mapping. Every handler returns an {"ok": ...} envelope.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, MutableMapping, Optional

from core.audit.models import ActivityLogEntry
from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode, RejectionReason, reject
from core.context.actor_context import ActorContext
from core.http_api.contracts import (
    CredentialRotateHttpRequest,
    GuestRegisterHttpRequest,
    LoginHttpRequest,
    MutationHttpRequest,
    ScopedReadRequest,
    StaffProvisionHttpRequest,
    StaffRemoveHttpRequest,
)
from core.http_api.errors import error_response, rejection_response, success_response
from core.http_api.session import (
    ANONYMOUS_SESSION,
    SessionPrincipal,
    clear_principal,
    read_principal,
    write_principal,
)
from core.identity.models import IdentityView
from core.mutations.facade import MutationFacade
from core.security.login_throttle import throttle_rejection
from core.store.codec import record_to_dict
from core.store.models import EntityKind

logger = logging.getLogger("eastgate.http")

Session = MutableMapping[str, Any]

READ_RESOURCES: dict[str, EntityKind] = {
    "branches": EntityKind.BRANCH,
    "staff": EntityKind.STAFF,
    "bookings": EntityKind.BOOKING,
    "rooms": EntityKind.ROOM,
    "orders": EntityKind.ORDER,
    "events": EntityKind.EVENT,
    "service-requests": EntityKind.SERVICE_REQUEST,
    "tables": EntityKind.TABLE,
    "notifications": EntityKind.NOTIFICATION,
    "guests": EntityKind.GUEST,
    "chat": EntityKind.CHAT_MESSAGE,
}
ACTIVITY_RESOURCE = "activity"
MENU_RESOURCE = "menu"

_WriteAction = Callable[[MutationFacade, ActorContext, MutationHttpRequest], Outcome]

WRITE_ACTIONS: dict[str, _WriteAction] = {
    "bookings.create": lambda f, a, r: f.create_booking(a, r.fields),
    "bookings.update": lambda f, a, r: f.update_booking(a, r.record_id, r.fields),
    "bookings.status": lambda f, a, r: f.set_booking_status(a, r.record_id, r.status),
    "guests.create": lambda f, a, r: f.register_guest_record(a, r.fields),
    "guests.update": lambda f, a, r: f.update_guest(a, r.record_id, r.fields),
    "rooms.create": lambda f, a, r: f.create_room(a, r.fields),
    "rooms.update": lambda f, a, r: f.update_room(a, r.record_id, r.fields),
    "rooms.remove": lambda f, a, r: f.remove_room(a, r.record_id),
    "orders.create": lambda f, a, r: f.place_order(a, r.fields),
    "orders.status": lambda f, a, r: f.set_order_status(a, r.record_id, r.status),
    "menu.create": lambda f, a, r: f.add_menu_item(a, r.fields),
    "menu.update": lambda f, a, r: f.update_menu_item(a, r.record_id, r.fields),
    "menu.remove": lambda f, a, r: f.remove_menu_item(a, r.record_id),
    "tables.update": lambda f, a, r: f.update_table(a, r.record_id, r.fields),
    "service-requests.create": lambda f, a, r: f.create_service_request(a, r.fields),
    "service-requests.update": lambda f, a, r: f.update_service_request(a, r.record_id, r.fields),
    "staff.create": lambda f, a, r: f.add_staff_member(a, r.fields),
    "staff.update": lambda f, a, r: f.update_staff_member(a, r.record_id, r.fields),
    "staff.remove": lambda f, a, r: f.remove_staff_member(a, r.record_id),
    "events.create": lambda f, a, r: f.create_event(a, r.fields),
    "events.update": lambda f, a, r: f.update_event(a, r.record_id, r.fields),
    "notifications.create": lambda f, a, r: f.post_notification(a, r.fields),
    "notifications.read": lambda f, a, r: f.mark_notification_read(a, r.record_id),
    "chat.create": lambda f, a, r: f.post_chat_message(a, r.fields),
}

_RECORD_ACTIONS = (".update", ".status", ".remove", ".read")


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def _resolve_language(headers: dict[str, Any] | None) -> str:
    for key, value in (headers or {}).items():
        if str(key).strip().lower() != "accept-language":
            continue
        raw = str(value).strip().lower()
        if not raw:
            break
        first_segment = raw.split(",")[0]
        lang = first_segment.split(";")[0].strip()
        if lang:
            return lang
        break
    return "en"


def _success_with_language(
    data: Any,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return success_response(data, meta={"language": _resolve_language(headers)})


def _serialize(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return {"removed": value}
    if isinstance(value, (IdentityView, ActivityLogEntry)):
        return value.to_dict()
    if dataclasses.is_dataclass(value):
        return record_to_dict(value)
    return value


def _outcome_response(
    outcome: Outcome,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    if outcome.is_rejected:
        return rejection_response(outcome.reason)
    return _success_with_language(_serialize(outcome.value), headers=headers)


def _reject(code: str, message: str) -> RejectionReason:
    return reject(code, message, "http_api_session")


def _live_principal(session: Session, dependencies) -> Optional[SessionPrincipal]:
    """
    Principal from the cookie, checked against the identity directory.

    The session ends when the identity is gone or no longer has the
    cookie's role and branch. The rotation flag always comes from the
    directory.
    """
    principal = read_principal(session)
    if principal is None:
        return None
    identity = dependencies.identities.get(principal.user_id)
    if identity is None:
        clear_principal(session)
        return None
    live = SessionPrincipal.from_identity(identity)
    if (live.role, live.branch_id) != (principal.role, principal.branch_id):
        clear_principal(session)
        return None
    if live != principal:
        write_principal(session, live)
    return live


def _resolve_actor(
    session: Session,
    dependencies,
    *,
    allow_pending_rotation: bool = False,
) -> tuple[Optional[ActorContext], Optional[RejectionReason]]:
    principal = _live_principal(session, dependencies)
    if principal is None:
        return None, _reject(ReasonCode.NOT_AUTHENTICATED, "Sign in first.")
    if principal.requires_credentials_change and not allow_pending_rotation:
        return None, _reject(
            ReasonCode.CREDENTIALS_CHANGE_REQUIRED,
            "Change your credentials before continuing.",
        )
    try:
        return principal.to_actor(), None
    except ValueError:
        clear_principal(session)
        return None, _reject(ReasonCode.NOT_AUTHENTICATED, "Session is no longer valid.")


def _require_elevated(actor: ActorContext) -> Optional[RejectionReason]:
    if actor.is_elevated:
        return None
    return _reject(ReasonCode.PERMISSION_DENIED, "Access denied: elevated roles only.")


# ══════════════════════════════════════════════════════════════
# AUTH
# ══════════════════════════════════════════════════════════════

def post_login(
    request: LoginHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    throttle = dependencies.login_throttle
    limited = throttle_rejection(throttle.check(request.email))
    if limited is not None:
        logger.warning("Login throttled for %s.", throttle.key_for(request.email))
        return rejection_response(limited)

    outcome = dependencies.identities.authenticate(
        request.email, request.password, request.branch_id
    )
    if outcome.is_rejected:
        return rejection_response(outcome.reason)

    throttle.reset(request.email)
    principal = SessionPrincipal.from_identity(outcome.value)
    write_principal(session, principal)
    return _success_with_language(
        {"session": principal.to_session_dict(), "identity": outcome.value.to_dict()},
        headers=headers,
    )


def post_logout(
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    clear_principal(session)
    return _success_with_language({"session": dict(ANONYMOUS_SESSION)}, headers=headers)


def get_session(
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    principal = _live_principal(session, dependencies)
    data = principal.to_session_dict() if principal is not None else dict(ANONYMOUS_SESSION)
    return _success_with_language({"session": data}, headers=headers)


def post_guest_register(
    request: GuestRegisterHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    outcome = dependencies.identities.register_guest(
        request.name,
        request.email,
        request.password,
        phone=request.phone,
        nationality=request.nationality,
    )
    if outcome.is_rejected:
        return rejection_response(outcome.reason)

    dependencies.notify_write()
    principal = SessionPrincipal.from_identity(outcome.value)
    write_principal(session, principal)
    return _success_with_language(
        {"session": principal.to_session_dict(), "identity": outcome.value.to_dict()},
        headers=headers,
    )


def post_rotate_credentials(
    request: CredentialRotateHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    actor, reason = _resolve_actor(session, dependencies, allow_pending_rotation=True)
    if reason is not None:
        return rejection_response(reason)

    outcome = dependencies.identities.rotate_credentials(
        actor.actor_id, request.new_email, request.new_password
    )
    if outcome.is_rejected:
        return rejection_response(outcome.reason)

    dependencies.notify_write()
    principal = SessionPrincipal.from_identity(outcome.value)
    write_principal(session, principal)
    return _success_with_language(
        {"session": principal.to_session_dict(), "identity": outcome.value.to_dict()},
        headers=headers,
    )


# ══════════════════════════════════════════════════════════════
# STAFF ACCESS (elevated only)
# ══════════════════════════════════════════════════════════════

def post_staff_provision(
    request: StaffProvisionHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    actor, reason = _resolve_actor(session, dependencies)
    if reason is None:
        reason = _require_elevated(actor)
    if reason is not None:
        return rejection_response(reason)

    outcome = dependencies.identities.provision_staff(
        actor,
        request.name,
        request.email,
        request.password,
        request.role,
        request.branch_id,
        phone=request.phone,
        department=request.department,
    )
    if outcome.is_accepted:
        dependencies.notify_write()
    return _outcome_response(outcome, headers=headers)


def post_staff_remove(
    request: StaffRemoveHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    actor, reason = _resolve_actor(session, dependencies)
    if reason is None:
        reason = _require_elevated(actor)
    if reason is not None:
        return rejection_response(reason)

    outcome = dependencies.identities.remove_staff(actor, request.identity_id)
    if outcome.is_accepted:
        dependencies.notify_write()
    return _outcome_response(outcome, headers=headers)


def list_provisioned_staff(
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    actor, reason = _resolve_actor(session, dependencies)
    if reason is None:
        reason = _require_elevated(actor)
    if reason is not None:
        return rejection_response(reason)
    views = dependencies.identities.list_provisioned()
    return _success_with_language([view.to_dict() for view in views], headers=headers)


# ══════════════════════════════════════════════════════════════
# SCOPED READS
# ══════════════════════════════════════════════════════════════

def get_scoped_collection(
    request: ScopedReadRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    actor, reason = _resolve_actor(session, dependencies)
    if reason is not None:
        return rejection_response(reason)

    projection = dependencies.projection
    if request.resource == MENU_RESOURCE:
        records = projection.menu_items()
    elif request.resource == ACTIVITY_RESOURCE:
        records = projection.activity_log(actor, request.branch)
    elif request.resource in READ_RESOURCES:
        records = projection.records(READ_RESOURCES[request.resource], actor, request.branch)
    else:
        return error_response(
            code=ReasonCode.INVALID_REQUEST,
            message=f"Unknown resource '{request.resource}'.",
        )
    return _success_with_language([_serialize(record) for record in records], headers=headers)


# ══════════════════════════════════════════════════════════════
# WRITES
# ══════════════════════════════════════════════════════════════

def post_mutation(
    request: MutationHttpRequest,
    dependencies,
    *,
    session: Session,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    action = WRITE_ACTIONS.get(request.action)
    if action is None:
        return error_response(
            code=ReasonCode.INVALID_REQUEST,
            message=f"Unknown action '{request.action}'.",
        )
    if request.action.endswith(_RECORD_ACTIONS) and request.record_id is None:
        return error_response(
            code=ReasonCode.INVALID_REQUEST,
            message="record_id is required.",
        )
    if request.action.endswith(".status") and request.status is None:
        return error_response(
            code=ReasonCode.INVALID_REQUEST,
            message="status is required.",
        )

    actor, reason = _resolve_actor(session, dependencies)
    if reason is not None:
        return rejection_response(reason)

    outcome = action(dependencies.facade, actor, request)
    if outcome.is_accepted:
        dependencies.notify_write()
    return _outcome_response(outcome, headers=headers)
