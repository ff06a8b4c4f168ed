"""
EastGate Mutations — Mutation Façade
======================================
The single write path into the entity store.

Every method:
1. takes the store write lock for its whole duration
2. validates (scope, fields, lifecycle, cross-entity rules)
3. writes the store
4. appends exactly one activity entry
5. returns an Outcome

On rejection nothing is written and nothing is audited. Scoped staff
only touch their own branch; a record in another branch is reported
exactly like a missing one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from core.audit.functions import (
    create_activity_entry,
    describe_booking,
    describe_order,
    describe_status_change,
)
from core.audit.models import ActivityType
from core.commands.outcomes import Outcome
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
    not_found,
    reject,
    validation_error,
)
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, ELEVATED_ROLES, Role, parse_role
from core.mutations.loyalty import stay_credit
from core.mutations.transitions import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_TRANSITIONS,
    ORDER_TRANSITIONS,
    SERVICE_REQUEST_TRANSITIONS,
    activity_for_booking_status,
    can_transition,
)
from core.security.branch_isolation import can_touch_branch, resolve_target_branch
from core.store.codec import coerce_fields
from core.store.entity_store import EntityStore
from core.store.models import (
    UNSCOPED_KINDS,
    Booking,
    BookingStatus,
    ChatSender,
    EntityKind,
    Guest,
    OrderStatus,
    RequestStatus,
    Room,
    RoomStatus,
    branch_of,
)
from core.store.patches import apply_patch
from core.time.clock import iso_timestamp

logger = logging.getLogger("eastgate.mutations")

_Pending = tuple[EntityKind, Any, dict]


def _normalize_email(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class MutationFacade:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    @property
    def store(self) -> EntityStore:
        return self._store

    # ══════════════════════════════════════════════════════════
    # PLUMBING
    # ══════════════════════════════════════════════════════════

    def _audit(
        self,
        caller: ActorContext,
        activity_type: ActivityType,
        entity_type: str,
        entity_id: str,
        description: str,
        branch_id: Optional[str],
        meta: Optional[dict[str, Any]] = None,
    ) -> None:
        if branch_id == BRANCH_WILDCARD:
            branch_id = None
        entry = create_activity_entry(
            entry_id=self._store.new_id("activity"),
            activity_type=activity_type,
            actor_role=caller.role.value,
            actor_name=caller.display_name,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            created_at=iso_timestamp(self._store.clock),
            branch_id=branch_id,
            branch_name=self._store.branch_name(branch_id),
            meta=meta,
        )
        self._store.append_activity(entry)
        logger.debug("%s by %s: %s", activity_type.value, caller.actor_id, description)

    @staticmethod
    def _caller_branch(caller: ActorContext) -> Optional[str]:
        return None if caller.branch_id == BRANCH_WILDCARD else caller.branch_id

    @staticmethod
    def _staff_only(caller: ActorContext, policy: str) -> Optional[RejectionReason]:
        if caller.role == Role.GUEST:
            return reject(
                ReasonCode.PERMISSION_DENIED,
                "Access denied: staff only.",
                policy,
            )
        return None

    def _owned(
        self,
        caller: ActorContext,
        kind: EntityKind,
        record_id: str,
        policy: str,
    ) -> tuple[Any, Optional[RejectionReason]]:
        record = self._store.get(kind, record_id)
        if record is None:
            return None, not_found(kind.value, record_id, policy)
        if kind not in UNSCOPED_KINDS and not can_touch_branch(caller, branch_of(record)):
            return None, not_found(kind.value, record_id, policy)
        return record, None

    def _create(
        self,
        kind: EntityKind,
        fields: dict[str, Any],
        policy: str,
        record_id: Optional[str] = None,
    ) -> tuple[Any, Optional[RejectionReason]]:
        try:
            return self._store.create(kind, fields, record_id=record_id), None
        except (ValueError, TypeError) as exc:
            return None, validation_error(str(exc), policy)

    def _commit(self, pending: Iterable[_Pending], policy: str) -> Optional[RejectionReason]:
        """
        Validate every pending patch, then write them all.

        Nothing is written unless every patch is valid.
        """
        pending = list(pending)
        for kind, record, changes in pending:
            try:
                apply_patch(kind, record, changes)
            except (ValueError, TypeError) as exc:
                return validation_error(str(exc), policy)
        for kind, record, changes in pending:
            self._store.patch(kind, record.id, changes)
        return None

    def _update(
        self,
        caller: ActorContext,
        kind: EntityKind,
        record_id: str,
        changes: dict[str, Any],
        activity_type: ActivityType,
        label: str,
        policy: str,
        locked_fields: frozenset[str] = frozenset(),
        check: Optional[Callable[[Any, dict], Optional[RejectionReason]]] = None,
    ) -> Outcome:
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        if not changes:
            return Outcome.rejected(validation_error("No changes given.", policy))
        blocked = sorted(set(changes) & locked_fields)
        if blocked:
            return Outcome.rejected(
                validation_error(
                    f"Field(s) change only through their lifecycle operation: {', '.join(blocked)}.",
                    policy,
                    fields=blocked,
                )
            )

        with self._store.write_locked():
            record, reason = self._owned(caller, kind, record_id, policy)
            if reason is not None:
                return Outcome.rejected(reason)
            if check is not None:
                reason = check(record, changes)
                if reason is not None:
                    return Outcome.rejected(reason)
            reason = self._commit([(kind, record, dict(changes))], policy)
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                activity_type,
                kind.value,
                record_id,
                f"{label} {record_id} updated: {', '.join(sorted(changes))}",
                branch_of(record) if kind not in UNSCOPED_KINDS else self._caller_branch(caller),
                meta={"fields": sorted(changes)},
            )
            updated = self._store.get(kind, record_id)
        return Outcome.accepted(updated)

    def _remove(
        self,
        caller: ActorContext,
        kind: EntityKind,
        record_id: str,
        activity_type: ActivityType,
        label: str,
        policy: str,
        guard: Optional[Callable[[Any], Optional[RejectionReason]]] = None,
    ) -> Outcome:
        """
        Idempotent delete. A record the caller cannot see counts as
        absent: the call succeeds with value False.
        """
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)

        with self._store.write_locked():
            record, reason = self._owned(caller, kind, record_id, policy)
            if reason is not None:
                self._audit(
                    caller,
                    activity_type,
                    kind.value,
                    record_id,
                    f"{label} {record_id} removed (not present)",
                    self._caller_branch(caller),
                    meta={"removed": False},
                )
                return Outcome.accepted(False)
            if guard is not None:
                reason = guard(record)
                if reason is not None:
                    return Outcome.rejected(reason)
            self._store.delete(kind, record_id)
            self._audit(
                caller,
                activity_type,
                kind.value,
                record_id,
                f"{label} {record_id} removed",
                branch_of(record) if kind not in UNSCOPED_KINDS else self._caller_branch(caller),
                meta={"removed": True},
            )
        return Outcome.accepted(True)

    def _target_branch(
        self, caller: ActorContext, fields: dict[str, Any]
    ) -> tuple[Optional[str], Optional[RejectionReason]]:
        return resolve_target_branch(
            caller, fields.pop("branch_id", None), self._store.branch_ids()
        )

    def _room_for(self, booking: Booking) -> Optional[Room]:
        matches = self._store.find(
            EntityKind.ROOM,
            lambda room: room.branch_id == booking.branch_id
            and room.number == booking.room_number,
        )
        return matches[0] if matches else None

    def _room_clash(
        self,
        branch_id: Optional[str],
        room_number: Any,
        check_in: Any,
        check_out: Any,
        policy: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[RejectionReason]:
        """Active bookings of the same room whose stay overlaps [check_in, check_out)."""
        if not all(isinstance(v, str) and v for v in (room_number, check_in, check_out)):
            return None
        clashes = self._store.find(
            EntityKind.BOOKING,
            lambda b: b.id != exclude_id
            and b.branch_id == branch_id
            and b.room_number == room_number
            and b.status in ACTIVE_BOOKING_STATUSES
            and check_in < b.check_out
            and check_out > b.check_in,
        )
        if not clashes:
            return None
        clash_ids = [b.id for b in clashes]
        return validation_error(
            f"Room {room_number} is already booked for those dates: {', '.join(clash_ids)}.",
            policy,
            room=room_number,
            bookings=clash_ids,
        )

    def _guest_for(self, booking: Booking) -> Optional[Guest]:
        if booking.guest_id:
            guest = self._store.get(EntityKind.GUEST, booking.guest_id)
            if guest is not None:
                return guest
        email = _normalize_email(booking.guest_email)
        matches = self._store.find(EntityKind.GUEST, lambda g: g.email == email)
        return matches[0] if matches else None

    # ══════════════════════════════════════════════════════════
    # BOOKINGS
    # ══════════════════════════════════════════════════════════

    def create_booking(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "create_booking"
        fields = dict(fields)
        raw_status = fields.pop("status", BookingStatus.PENDING)
        try:
            status = BookingStatus(raw_status)
        except ValueError:
            return Outcome.rejected(
                validation_error(f"status has invalid value '{raw_status}'.", policy)
            )
        if status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            return Outcome.rejected(
                reject(
                    ReasonCode.INVALID_STATUS_TRANSITION,
                    "New bookings start as pending or confirmed.",
                    policy,
                    to_status=status.value,
                )
            )
        if "guest_email" in fields:
            fields["guest_email"] = _normalize_email(fields["guest_email"])
        if caller.role == Role.GUEST:
            fields["guest_id"] = caller.actor_id

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            reason = self._room_clash(
                branch_id,
                fields.get("room_number"),
                fields.get("check_in"),
                fields.get("check_out"),
                policy,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            booking, reason = self._create(
                EntityKind.BOOKING,
                {**fields, "branch_id": branch_id, "status": status},
                policy,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.BOOKING_CREATED,
                "booking",
                booking.id,
                describe_booking(
                    booking.id, booking.guest_name, booking.room_number, booking.total_amount
                ),
                booking.branch_id,
                meta={"status": booking.status.value},
            )
        return Outcome.accepted(booking)

    def update_booking(
        self, caller: ActorContext, booking_id: str, changes: dict[str, Any]
    ) -> Outcome:
        policy = "update_booking"
        changes = dict(changes)
        if "guest_email" in changes:
            changes["guest_email"] = _normalize_email(changes["guest_email"])

        def _still_free(booking: Booking, changes: dict) -> Optional[RejectionReason]:
            if not {"room_number", "check_in", "check_out"} & set(changes):
                return None
            if booking.status not in ACTIVE_BOOKING_STATUSES:
                return None
            return self._room_clash(
                booking.branch_id,
                changes.get("room_number", booking.room_number),
                changes.get("check_in", booking.check_in),
                changes.get("check_out", booking.check_out),
                policy,
                exclude_id=booking.id,
            )

        return self._update(
            caller,
            EntityKind.BOOKING,
            booking_id,
            changes,
            ActivityType.BOOKING_UPDATED,
            "Booking",
            policy,
            locked_fields=frozenset({"status"}),
            check=_still_free,
        )

    def set_booking_status(self, caller: ActorContext, booking_id: str, status: Any) -> Outcome:
        """
        Move a booking along its lifecycle and keep rooms and guest
        stats consistent:

        - checked_in: room must exist and be free; it becomes occupied
        - checked_out: room goes to cleaning; the guest is credited
        """
        policy = "set_booking_status"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        try:
            target = BookingStatus(status)
        except ValueError:
            return Outcome.rejected(
                validation_error(f"status has invalid value '{status}'.", policy)
            )

        with self._store.write_locked():
            booking, reason = self._owned(caller, EntityKind.BOOKING, booking_id, policy)
            if reason is not None:
                return Outcome.rejected(reason)
            if not can_transition(BOOKING_TRANSITIONS, booking.status, target):
                return Outcome.rejected(
                    reject(
                        ReasonCode.INVALID_STATUS_TRANSITION,
                        f"Booking {booking_id} cannot move from "
                        f"{booking.status.value} to {target.value}.",
                        policy,
                        from_status=booking.status.value,
                        to_status=target.value,
                    )
                )
            activity_type = activity_for_booking_status(target)

            pending: list[_Pending] = [(EntityKind.BOOKING, booking, {"status": target})]
            if target == BookingStatus.CHECKED_IN:
                room = self._room_for(booking)
                if room is None:
                    return Outcome.rejected(not_found("room", booking.room_number, policy))
                if room.status in (RoomStatus.OCCUPIED, RoomStatus.MAINTENANCE):
                    return Outcome.rejected(
                        reject(
                            ReasonCode.INVALID_STATUS_TRANSITION,
                            f"Room {room.number} is {room.status.value}.",
                            policy,
                            room=room.number,
                            room_status=room.status.value,
                        )
                    )
                pending.append(
                    (
                        EntityKind.ROOM,
                        room,
                        {"status": RoomStatus.OCCUPIED, "current_guest": booking.guest_name},
                    )
                )
            elif target == BookingStatus.CHECKED_OUT:
                room = self._room_for(booking)
                if room is not None:
                    pending.append(
                        (
                            EntityKind.ROOM,
                            room,
                            {"status": RoomStatus.CLEANING, "current_guest": None},
                        )
                    )
                guest = self._guest_for(booking)
                if guest is not None:
                    pending.append(
                        (
                            EntityKind.GUEST,
                            guest,
                            stay_credit(guest, booking.total_amount, booking.check_out),
                        )
                    )

            reason = self._commit(pending, policy)
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                activity_type,
                "booking",
                booking_id,
                describe_status_change("Booking", booking_id, target.value),
                booking.branch_id,
                meta={
                    "from_status": booking.status.value,
                    "to_status": target.value,
                    "room_number": booking.room_number,
                },
            )
            updated = self._store.get(EntityKind.BOOKING, booking_id)
        return Outcome.accepted(updated)

    # ══════════════════════════════════════════════════════════
    # GUESTS
    # ══════════════════════════════════════════════════════════

    def register_guest_record(
        self,
        caller: ActorContext,
        fields: dict[str, Any],
        guest_id: Optional[str] = None,
    ) -> Outcome:
        """
        Create a Guest business record.

        Self-registration and elevated callers may leave the branch
        unset (chain-wide guest); front-desk staff register guests
        into their own branch.
        """
        policy = "register_guest_record"
        fields = dict(fields)
        if "email" in fields:
            fields["email"] = _normalize_email(fields["email"])

        with self._store.write_locked():
            if caller.role == Role.GUEST:
                fields.pop("branch_id", None)
                branch_id = None
            elif caller.is_elevated and fields.get("branch_id") in (None, "", BRANCH_WILDCARD):
                fields.pop("branch_id", None)
                branch_id = None
            else:
                branch_id, reason = self._target_branch(caller, fields)
                if reason is not None:
                    return Outcome.rejected(reason)

            guest, reason = self._create(
                EntityKind.GUEST, {**fields, "branch_id": branch_id}, policy, record_id=guest_id
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.GUEST_REGISTERED,
                "guest",
                guest.id,
                f"Guest {guest.name} registered",
                guest.branch_id,
            )
        return Outcome.accepted(guest)

    def update_guest(self, caller: ActorContext, guest_id: str, changes: dict[str, Any]) -> Outcome:
        changes = dict(changes)
        if "email" in changes:
            changes["email"] = _normalize_email(changes["email"])
        return self._update(
            caller,
            EntityKind.GUEST,
            guest_id,
            changes,
            ActivityType.GUEST_UPDATED,
            "Guest",
            "update_guest",
        )

    # ══════════════════════════════════════════════════════════
    # ROOMS
    # ══════════════════════════════════════════════════════════

    def create_room(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "create_room"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        fields = dict(fields)

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            number = fields.get("number")
            clash = self._store.find(
                EntityKind.ROOM,
                lambda room: room.branch_id == branch_id and room.number == number,
            )
            if clash:
                return Outcome.rejected(
                    validation_error(
                        f"Room {number} already exists in this branch.", policy, number=number
                    )
                )
            room, reason = self._create(
                EntityKind.ROOM,
                {"status": RoomStatus.AVAILABLE, **fields, "branch_id": branch_id},
                policy,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.ROOM_UPDATED,
                "room",
                room.id,
                f"Room {room.number} added ({room.room_type.value})",
                room.branch_id,
            )
        return Outcome.accepted(room)

    def update_room(self, caller: ActorContext, room_id: str, changes: dict[str, Any]) -> Outcome:
        return self._update(
            caller,
            EntityKind.ROOM,
            room_id,
            changes,
            ActivityType.ROOM_UPDATED,
            "Room",
            "update_room",
        )

    def remove_room(self, caller: ActorContext, room_id: str) -> Outcome:
        policy = "remove_room"

        def _no_active_booking(room: Room) -> Optional[RejectionReason]:
            active = self._store.find(
                EntityKind.BOOKING,
                lambda b: b.branch_id == room.branch_id
                and b.room_number == room.number
                and b.status in ACTIVE_BOOKING_STATUSES,
            )
            if not active:
                return None
            return reject(
                ReasonCode.NOT_REMOVABLE,
                f"Room {room.number} has {len(active)} active booking(s).",
                policy,
                room=room.number,
                bookings=len(active),
            )

        return self._remove(
            caller,
            EntityKind.ROOM,
            room_id,
            ActivityType.ROOM_UPDATED,
            "Room",
            policy,
            guard=_no_active_booking,
        )

    # ══════════════════════════════════════════════════════════
    # RESTAURANT
    # ══════════════════════════════════════════════════════════

    def place_order(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "place_order"
        fields = dict(fields)
        raw_status = fields.pop("status", OrderStatus.PENDING)
        if raw_status not in (OrderStatus.PENDING, OrderStatus.PENDING.value):
            return Outcome.rejected(
                reject(
                    ReasonCode.INVALID_STATUS_TRANSITION,
                    "New orders start as pending.",
                    policy,
                    to_status=str(raw_status),
                )
            )
        if "total" not in fields:
            try:
                lines = coerce_fields(EntityKind.ORDER, {"items": fields.get("items", [])})["items"]
            except ValueError as exc:
                return Outcome.rejected(validation_error(str(exc), policy))
            fields["total"] = sum(line.line_total for line in lines)
        fields["performed_by"] = caller.display_name

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            order, reason = self._create(
                EntityKind.ORDER,
                {**fields, "branch_id": branch_id, "status": OrderStatus.PENDING},
                policy,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.ORDER_PLACED,
                "order",
                order.id,
                describe_order(order.id, order.table_number, order.total),
                order.branch_id,
                meta={"items": len(order.items), "room_charge": order.room_charge},
            )
        return Outcome.accepted(order)

    def set_order_status(self, caller: ActorContext, order_id: str, status: Any) -> Outcome:
        policy = "set_order_status"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        try:
            target = OrderStatus(status)
        except ValueError:
            return Outcome.rejected(
                validation_error(f"status has invalid value '{status}'.", policy)
            )

        with self._store.write_locked():
            order, reason = self._owned(caller, EntityKind.ORDER, order_id, policy)
            if reason is not None:
                return Outcome.rejected(reason)
            if not can_transition(ORDER_TRANSITIONS, order.status, target):
                return Outcome.rejected(
                    reject(
                        ReasonCode.INVALID_STATUS_TRANSITION,
                        f"Order {order_id} cannot move from "
                        f"{order.status.value} to {target.value}.",
                        policy,
                        from_status=order.status.value,
                        to_status=target.value,
                    )
                )
            self._store.patch(EntityKind.ORDER, order_id, {"status": target})
            self._audit(
                caller,
                ActivityType.ORDER_STATUS,
                "order",
                order_id,
                describe_status_change("Order", order_id, target.value),
                order.branch_id,
                meta={"from_status": order.status.value, "to_status": target.value},
            )
            updated = self._store.get(EntityKind.ORDER, order_id)
        return Outcome.accepted(updated)

    def add_menu_item(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "add_menu_item"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)

        with self._store.write_locked():
            item, reason = self._create(EntityKind.MENU_ITEM, dict(fields), policy)
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.MENU_UPDATED,
                "menu_item",
                item.id,
                f"Menu item {item.name} added ({item.category})",
                self._caller_branch(caller),
            )
        return Outcome.accepted(item)

    def update_menu_item(self, caller: ActorContext, item_id: str, changes: dict[str, Any]) -> Outcome:
        return self._update(
            caller,
            EntityKind.MENU_ITEM,
            item_id,
            changes,
            ActivityType.MENU_UPDATED,
            "Menu item",
            "update_menu_item",
        )

    def remove_menu_item(self, caller: ActorContext, item_id: str) -> Outcome:
        return self._remove(
            caller,
            EntityKind.MENU_ITEM,
            item_id,
            ActivityType.MENU_UPDATED,
            "Menu item",
            "remove_menu_item",
        )

    def update_table(self, caller: ActorContext, table_id: str, changes: dict[str, Any]) -> Outcome:
        return self._update(
            caller,
            EntityKind.TABLE,
            table_id,
            changes,
            ActivityType.TABLE_UPDATED,
            "Table",
            "update_table",
        )

    # ══════════════════════════════════════════════════════════
    # SERVICE REQUESTS
    # ══════════════════════════════════════════════════════════

    def create_service_request(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "create_service_request"
        fields = dict(fields)
        fields.pop("status", None)

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            request, reason = self._create(
                EntityKind.SERVICE_REQUEST,
                {**fields, "branch_id": branch_id, "status": RequestStatus.PENDING},
                policy,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.SERVICE_REQUEST,
                "service_request",
                request.id,
                f"{request.request_type.value} request · Room {request.room_number}",
                request.branch_id,
                meta={"priority": request.priority.value},
            )
        return Outcome.accepted(request)

    def update_service_request(
        self, caller: ActorContext, request_id: str, changes: dict[str, Any]
    ) -> Outcome:
        policy = "update_service_request"

        def _lifecycle(request, patch: dict) -> Optional[RejectionReason]:
            if "status" not in patch:
                return None
            try:
                target = RequestStatus(patch["status"])
            except ValueError:
                return validation_error(f"status has invalid value '{patch['status']}'.", policy)
            if can_transition(SERVICE_REQUEST_TRANSITIONS, request.status, target):
                return None
            return reject(
                ReasonCode.INVALID_STATUS_TRANSITION,
                f"Service request {request.id} cannot move from "
                f"{request.status.value} to {target.value}.",
                policy,
                from_status=request.status.value,
                to_status=target.value,
            )

        return self._update(
            caller,
            EntityKind.SERVICE_REQUEST,
            request_id,
            changes,
            ActivityType.SERVICE_REQUEST,
            "Service request",
            policy,
            check=_lifecycle,
        )

    # ══════════════════════════════════════════════════════════
    # STAFF (HR RECORDS)
    # ══════════════════════════════════════════════════════════

    def add_staff_member(
        self,
        caller: ActorContext,
        fields: dict[str, Any],
        staff_id: Optional[str] = None,
    ) -> Outcome:
        """
        Create a StaffMember HR record.

        Only elevated callers may create chain-wide (wildcard) records,
        and only for elevated roles.
        """
        policy = "add_staff_member"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        fields = dict(fields)
        if "email" in fields:
            fields["email"] = _normalize_email(fields["email"])
        try:
            role = parse_role(fields.get("role"))
        except ValueError as exc:
            return Outcome.rejected(validation_error(str(exc), policy, field="role"))
        if role == Role.GUEST:
            return Outcome.rejected(
                validation_error("Staff records cannot carry the guest role.", policy, field="role")
            )

        with self._store.write_locked():
            if caller.is_elevated and fields.get("branch_id") == BRANCH_WILDCARD:
                if role not in ELEVATED_ROLES:
                    return Outcome.rejected(
                        validation_error(
                            "Only elevated roles may span all branches.", policy, field="branch_id"
                        )
                    )
                branch_id = fields.pop("branch_id")
            else:
                branch_id, reason = self._target_branch(caller, fields)
                if reason is not None:
                    return Outcome.rejected(reason)
            member, reason = self._create(
                EntityKind.STAFF,
                {**fields, "role": role, "branch_id": branch_id},
                policy,
                record_id=staff_id,
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.STAFF_UPDATED,
                "staff",
                member.id,
                f"Staff {member.name} added as {member.role.value}",
                member.branch_id,
            )
        return Outcome.accepted(member)

    def update_staff_member(self, caller: ActorContext, staff_id: str, changes: dict[str, Any]) -> Outcome:
        changes = dict(changes)
        if "email" in changes:
            changes["email"] = _normalize_email(changes["email"])
        return self._update(
            caller,
            EntityKind.STAFF,
            staff_id,
            changes,
            ActivityType.STAFF_UPDATED,
            "Staff",
            "update_staff_member",
        )

    def remove_staff_member(self, caller: ActorContext, staff_id: str) -> Outcome:
        policy = "remove_staff_member"
        if staff_id == caller.actor_id:
            return Outcome.rejected(
                reject(ReasonCode.SELF_REMOVAL, "Callers cannot remove themselves.", policy)
            )
        return self._remove(
            caller,
            EntityKind.STAFF,
            staff_id,
            ActivityType.STAFF_UPDATED,
            "Staff",
            policy,
        )

    def log_access_change(
        self,
        caller: ActorContext,
        identity_id: str,
        branch_id: Optional[str],
        description: str,
    ) -> None:
        """Audit an identity lifecycle change made outside the store."""
        with self._store.write_locked():
            self._audit(
                caller,
                ActivityType.STAFF_UPDATED,
                "identity",
                identity_id,
                description,
                branch_id,
            )

    # ══════════════════════════════════════════════════════════
    # EVENTS
    # ══════════════════════════════════════════════════════════

    def create_event(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "create_event"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        fields = dict(fields)

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            event, reason = self._create(
                EntityKind.EVENT, {**fields, "branch_id": branch_id}, policy
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.EVENT_UPDATED,
                "event",
                event.id,
                f"Event {event.name} booked for {event.date} · {event.hall}",
                event.branch_id,
            )
        return Outcome.accepted(event)

    def update_event(self, caller: ActorContext, event_id: str, changes: dict[str, Any]) -> Outcome:
        return self._update(
            caller,
            EntityKind.EVENT,
            event_id,
            changes,
            ActivityType.EVENT_UPDATED,
            "Event",
            "update_event",
        )

    # ══════════════════════════════════════════════════════════
    # NOTIFICATIONS & CHAT
    # ══════════════════════════════════════════════════════════

    def post_notification(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "post_notification"
        denied = self._staff_only(caller, policy)
        if denied is not None:
            return Outcome.rejected(denied)
        fields = dict(fields)
        fields.pop("read", None)

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            notification, reason = self._create(
                EntityKind.NOTIFICATION, {**fields, "branch_id": branch_id}, policy
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.NOTIFICATION_POSTED,
                "notification",
                notification.id,
                f"Notification: {notification.title}",
                notification.branch_id,
                meta={"type": notification.notification_type.value},
            )
        return Outcome.accepted(notification)

    def mark_notification_read(self, caller: ActorContext, notification_id: str) -> Outcome:
        return self._update(
            caller,
            EntityKind.NOTIFICATION,
            notification_id,
            {"read": True},
            ActivityType.NOTIFICATION_READ,
            "Notification",
            "mark_notification_read",
        )

    def post_chat_message(self, caller: ActorContext, fields: dict[str, Any]) -> Outcome:
        policy = "post_chat_message"
        fields = dict(fields)
        fields.pop("read", None)
        fields["sender"] = ChatSender.GUEST if caller.role == Role.GUEST else ChatSender.STAFF
        fields.setdefault("sender_name", caller.display_name)

        with self._store.write_locked():
            branch_id, reason = self._target_branch(caller, fields)
            if reason is not None:
                return Outcome.rejected(reason)
            message, reason = self._create(
                EntityKind.CHAT_MESSAGE, {**fields, "branch_id": branch_id}, policy
            )
            if reason is not None:
                return Outcome.rejected(reason)
            self._audit(
                caller,
                ActivityType.CHAT_MESSAGE,
                "chat_message",
                message.id,
                f"Message from {message.sender_name}",
                message.branch_id,
                meta={"sender": message.sender.value},
            )
        return Outcome.accepted(message)
