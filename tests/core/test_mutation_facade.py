"""
Tests — Mutation Façade
=========================
Write scope, lifecycle transitions, cross-entity side effects and
the one-entry-per-write audit rule, against the development seed.
"""

from __future__ import annotations

from datetime import datetime, timezone

from adapters.django_api.dev_seed import dev_seed_bundle
from core.audit.models import ActivityType
from core.bootstrap.seed import load_seed
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, Role
from core.identity.credentials import CredentialHasher
from core.identity.service import IdentityManager
from core.mutations.facade import MutationFacade
from core.mutations.loyalty import tier_for_points
from core.store.entity_store import EntityStore
from core.store.models import (
    BookingStatus,
    ChatSender,
    EntityKind,
    LoyaltyTier,
    OrderStatus,
    RequestStatus,
    RoomStatus,
)
from core.time.clock import FixedClock


T0 = datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc)

ADMIN = ActorContext("u-admin", Role.SUPER_ADMIN, BRANCH_WILDCARD, "EastGate Admin")
GRACE = ActorContext("s-002", Role.RECEPTIONIST, "br-001", "Grace Uwase")
PATRICK = ActorContext("s-005", Role.WAITER, "br-001", "Patrick Bizimana")
DIANE = ActorContext("s-201", Role.BRANCH_MANAGER, "br-002", "Diane Uwimana")
GUEST = ActorContext("g-900", Role.GUEST, BRANCH_WILDCARD, "Nadia Keza")

NEW_BOOKING = {
    "guest_name": "Nadia Keza",
    "guest_email": "Nadia@Mail.com",
    "room_number": "104",
    "room_type": "standard",
    "check_in": "2026-03-01",
    "check_out": "2026-03-03",
    "total_amount": 360,
}


# ── Helpers ──────────────────────────────────────────────────

def _facade():
    store = EntityStore(FixedClock(T0))
    facade = MutationFacade(store)
    load_seed(store, IdentityManager(store, facade, CredentialHasher(rounds=4)), dev_seed_bundle())
    return store, facade


def _audited(store):
    return len(store.activity)


# ══════════════════════════════════════════════════════════════
# BOOKINGS
# ══════════════════════════════════════════════════════════════


class TestCreateBooking:
    def test_scoped_staff_default_to_own_branch(self):
        store, facade = _facade()
        before = _audited(store)
        outcome = facade.create_booking(GRACE, NEW_BOOKING)
        assert outcome.is_accepted
        booking = outcome.value
        assert booking.branch_id == "br-001"
        assert booking.status is BookingStatus.PENDING
        assert booking.guest_email == "nadia@mail.com"
        assert _audited(store) == before + 1
        entry = store.activity.latest()
        assert entry.activity_type is ActivityType.BOOKING_CREATED
        assert entry.branch_id == "br-001"
        assert entry.branch_name == "Kigali Main"
        assert entry.actor_name == "Grace Uwase"

    def test_scoped_staff_cannot_write_elsewhere(self):
        store, facade = _facade()
        before = _audited(store)
        outcome = facade.create_booking(GRACE, {**NEW_BOOKING, "branch_id": "br-002"})
        assert outcome.code == "PERMISSION_DENIED"
        assert _audited(store) == before

    def test_elevated_must_choose_branch(self):
        _, facade = _facade()
        assert facade.create_booking(ADMIN, NEW_BOOKING).code == "VALIDATION_ERROR"
        outcome = facade.create_booking(ADMIN, {**NEW_BOOKING, "branch_id": "br-002"})
        assert outcome.value.branch_id == "br-002"

    def test_may_start_confirmed(self):
        _, facade = _facade()
        outcome = facade.create_booking(GRACE, {**NEW_BOOKING, "status": "confirmed"})
        assert outcome.value.status is BookingStatus.CONFIRMED

    def test_cannot_start_checked_in(self):
        _, facade = _facade()
        outcome = facade.create_booking(GRACE, {**NEW_BOOKING, "status": "checked_in"})
        assert outcome.code == "INVALID_STATUS_TRANSITION"

    def test_dates_must_be_ordered(self):
        store, facade = _facade()
        before = store.count(EntityKind.BOOKING)
        outcome = facade.create_booking(GRACE, {**NEW_BOOKING, "check_out": "2026-02-01"})
        assert outcome.code == "VALIDATION_ERROR"
        assert store.count(EntityKind.BOOKING) == before

    def test_guest_books_for_themselves(self):
        _, facade = _facade()
        outcome = facade.create_booking(GUEST, {**NEW_BOOKING, "branch_id": "br-002"})
        assert outcome.is_accepted
        assert outcome.value.guest_id == "g-900"
        assert outcome.value.branch_id == "br-002"

    def test_guest_must_pick_branch(self):
        _, facade = _facade()
        assert facade.create_booking(GUEST, NEW_BOOKING).code == "VALIDATION_ERROR"

    def test_guest_cannot_book_for_another_guest(self):
        _, facade = _facade()
        outcome = facade.create_booking(
            GUEST, {**NEW_BOOKING, "branch_id": "br-001", "guest_id": "g-001"}
        )
        assert outcome.value.guest_id == "g-900"


class TestRoomAvailability:
    def test_overlapping_stay_is_refused(self):
        store, facade = _facade()
        first = facade.create_booking(GRACE, NEW_BOOKING).value
        before = _audited(store)
        outcome = facade.create_booking(
            GRACE, {**NEW_BOOKING, "check_in": "2026-03-02", "check_out": "2026-03-04"}
        )
        assert outcome.code == "VALIDATION_ERROR"
        assert outcome.reason.message_params["bookings"] == [first.id]
        assert _audited(store) == before

    def test_back_to_back_stays_fit(self):
        _, facade = _facade()
        facade.create_booking(GRACE, NEW_BOOKING)
        outcome = facade.create_booking(
            GRACE, {**NEW_BOOKING, "check_in": "2026-03-03", "check_out": "2026-03-05"}
        )
        assert outcome.is_accepted

    def test_cancelled_booking_frees_the_dates(self):
        _, facade = _facade()
        first = facade.create_booking(GRACE, NEW_BOOKING).value
        assert facade.set_booking_status(GRACE, first.id, "cancelled").is_accepted
        assert facade.create_booking(GRACE, NEW_BOOKING).is_accepted

    def test_same_number_in_another_branch_is_a_different_room(self):
        _, facade = _facade()
        facade.create_booking(GRACE, NEW_BOOKING)
        assert facade.create_booking(DIANE, NEW_BOOKING).is_accepted

    def test_seeded_stay_blocks_new_booking(self):
        _, facade = _facade()
        outcome = facade.create_booking(
            GRACE,
            {**NEW_BOOKING, "room_number": "202", "check_in": "2026-02-18", "check_out": "2026-02-20"},
        )
        assert outcome.code == "VALIDATION_ERROR"

    def test_moving_dates_onto_another_stay_is_refused(self):
        _, facade = _facade()
        first = facade.create_booking(GRACE, NEW_BOOKING).value
        second = facade.create_booking(
            GRACE, {**NEW_BOOKING, "check_in": "2026-03-05", "check_out": "2026-03-07"}
        ).value
        outcome = facade.update_booking(GRACE, second.id, {"check_in": "2026-03-02"})
        assert outcome.code == "VALIDATION_ERROR"
        assert outcome.reason.message_params["bookings"] == [first.id]

    def test_booking_does_not_clash_with_itself(self):
        _, facade = _facade()
        booking = facade.create_booking(GRACE, NEW_BOOKING).value
        outcome = facade.update_booking(GRACE, booking.id, {"check_out": "2026-03-04"})
        assert outcome.value.check_out == "2026-03-04"


class TestBookingLifecycle:
    def test_check_in_occupies_room(self):
        store, facade = _facade()
        outcome = facade.set_booking_status(GRACE, "BK-2024007", "checked_in")
        assert outcome.value.status is BookingStatus.CHECKED_IN
        room = store.get(EntityKind.ROOM, "rm-202")
        assert room.status is RoomStatus.OCCUPIED
        assert room.current_guest == "Kwame Asante"
        assert store.activity.latest().activity_type is ActivityType.CHECK_IN

    def test_check_out_frees_room_and_credits_guest(self):
        store, facade = _facade()
        before = _audited(store)
        outcome = facade.set_booking_status(GRACE, "BK-2024001", "checked_out")
        assert outcome.is_accepted
        room = store.get(EntityKind.ROOM, "rm-101")
        assert room.status is RoomStatus.CLEANING
        assert room.current_guest is None

        guest = store.get(EntityKind.GUEST, "g-001")
        assert guest.total_stays == 13
        assert guest.total_spent == 29500
        assert guest.loyalty_points == 15300
        assert guest.loyalty_tier is LoyaltyTier.PLATINUM
        assert guest.last_visit == "2026-02-14"
        assert _audited(store) == before + 1
        assert store.activity.latest().activity_type is ActivityType.CHECK_OUT

    def test_backwards_transition_refused(self):
        store, facade = _facade()
        before = _audited(store)
        outcome = facade.set_booking_status(GRACE, "BK-2024001", "pending")
        assert outcome.code == "INVALID_STATUS_TRANSITION"
        assert store.get(EntityKind.BOOKING, "BK-2024001").status is BookingStatus.CHECKED_IN
        assert _audited(store) == before

    def test_same_state_refused(self):
        _, facade = _facade()
        outcome = facade.set_booking_status(DIANE, "BK-2024101", "confirmed")
        assert outcome.code == "INVALID_STATUS_TRANSITION"

    def test_check_in_needs_free_room(self):
        store, facade = _facade()
        booking = facade.create_booking(GRACE, {**NEW_BOOKING, "room_number": "203"}).value
        outcome = facade.set_booking_status(GRACE, booking.id, "checked_in")
        assert outcome.code == "INVALID_STATUS_TRANSITION"
        assert store.get(EntityKind.BOOKING, booking.id).status is BookingStatus.PENDING
        assert store.get(EntityKind.ROOM, "rm-203").status is RoomStatus.MAINTENANCE

    def test_other_branch_reads_as_missing(self):
        store, facade = _facade()
        foreign = facade.set_booking_status(DIANE, "BK-2024001", "checked_out")
        missing = facade.set_booking_status(DIANE, "BK-none", "checked_out")
        assert foreign.code == missing.code == "NOT_FOUND"
        assert "br-001" not in foreign.reason.message
        assert store.get(EntityKind.BOOKING, "BK-2024001").status is BookingStatus.CHECKED_IN

    def test_unknown_status(self):
        _, facade = _facade()
        assert facade.set_booking_status(GRACE, "BK-2024007", "teleported").code == "VALIDATION_ERROR"

    def test_guests_cannot_change_status(self):
        _, facade = _facade()
        assert facade.set_booking_status(GUEST, "BK-2024007", "cancelled").code == "PERMISSION_DENIED"

    def test_update_cannot_touch_status(self):
        _, facade = _facade()
        outcome = facade.update_booking(GRACE, "BK-2024007", {"status": "cancelled"})
        assert outcome.code == "VALIDATION_ERROR"

    def test_update_fields(self):
        store, facade = _facade()
        outcome = facade.update_booking(GRACE, "BK-2024007", {"payment_method": "visa"})
        assert outcome.value.payment_method == "visa"
        assert store.activity.latest().activity_type is ActivityType.BOOKING_UPDATED


# ══════════════════════════════════════════════════════════════
# ROOMS
# ══════════════════════════════════════════════════════════════


class TestRooms:
    def test_create_room_defaults_available(self):
        _, facade = _facade()
        outcome = facade.create_room(
            DIANE, {"number": "201", "floor": 2, "room_type": "family", "price": 300}
        )
        assert outcome.value.status is RoomStatus.AVAILABLE
        assert outcome.value.branch_id == "br-002"

    def test_room_numbers_unique_per_branch(self):
        _, facade = _facade()
        outcome = facade.create_room(
            DIANE, {"number": "101", "floor": 1, "room_type": "standard", "price": 150}
        )
        assert outcome.code == "VALIDATION_ERROR"

    def test_branch_never_changes(self):
        _, facade = _facade()
        outcome = facade.update_room(ADMIN, "rm-102", {"branch_id": "br-002"})
        assert outcome.code == "VALIDATION_ERROR"

    def test_room_with_active_booking_not_removable(self):
        store, facade = _facade()
        before = _audited(store)
        outcome = facade.remove_room(GRACE, "rm-101")
        assert outcome.code == "NOT_REMOVABLE"
        assert store.get(EntityKind.ROOM, "rm-101") is not None
        assert _audited(store) == before

    def test_remove_is_idempotent_and_audited(self):
        store, facade = _facade()
        before = _audited(store)
        assert facade.remove_room(GRACE, "rm-104").value is True
        assert facade.remove_room(GRACE, "rm-104").value is False
        assert store.get(EntityKind.ROOM, "rm-104") is None
        assert _audited(store) == before + 2

    def test_remove_in_other_branch_is_a_no_op(self):
        store, facade = _facade()
        outcome = facade.remove_room(DIANE, "rm-102")
        assert outcome.is_accepted
        assert outcome.value is False
        assert store.get(EntityKind.ROOM, "rm-102") is not None

    def test_guests_cannot_manage_rooms(self):
        _, facade = _facade()
        outcome = facade.create_room(
            GUEST, {"branch_id": "br-001", "number": "999", "floor": 9, "room_type": "standard", "price": 1}
        )
        assert outcome.code == "PERMISSION_DENIED"


# ══════════════════════════════════════════════════════════════
# RESTAURANT
# ══════════════════════════════════════════════════════════════


class TestOrders:
    ITEMS = [
        {"name": "Grilled Tilapia", "quantity": 2, "price": 18},
        {"name": "Rwandan Coffee", "quantity": 1, "price": 5},
    ]

    def test_total_derived_from_lines(self):
        _, facade = _facade()
        outcome = facade.place_order(PATRICK, {"table_number": 1, "items": self.ITEMS})
        order = outcome.value
        assert order.total == 41
        assert order.status is OrderStatus.PENDING
        assert order.performed_by == "Patrick Bizimana"

    def test_orders_start_pending(self):
        _, facade = _facade()
        outcome = facade.place_order(
            PATRICK, {"table_number": 1, "items": self.ITEMS, "status": "served"}
        )
        assert outcome.code == "INVALID_STATUS_TRANSITION"

    def test_empty_order_refused(self):
        _, facade = _facade()
        assert facade.place_order(PATRICK, {"table_number": 1, "items": []}).code == "VALIDATION_ERROR"

    def test_status_moves_forward_only(self):
        _, facade = _facade()
        assert facade.set_order_status(PATRICK, "ORD-001", "ready").is_accepted
        assert facade.set_order_status(PATRICK, "ORD-001", "served").is_accepted
        outcome = facade.set_order_status(PATRICK, "ORD-001", "preparing")
        assert outcome.code == "INVALID_STATUS_TRANSITION"

    def test_guest_orders_to_chosen_branch(self):
        _, facade = _facade()
        outcome = facade.place_order(
            GUEST, {"branch_id": "br-001", "table_number": 1, "items": self.ITEMS}
        )
        assert outcome.value.branch_id == "br-001"


class TestMenuAndTables:
    def test_menu_is_chain_wide(self):
        store, facade = _facade()
        outcome = facade.update_menu_item(DIANE, "mi-001", {"price": 16})
        assert outcome.value.price == 16
        entry = store.activity.latest()
        assert entry.activity_type is ActivityType.MENU_UPDATED
        assert entry.branch_id == "br-002"

    def test_add_and_remove_menu_item(self):
        store, facade = _facade()
        item = facade.add_menu_item(GRACE, {"name": "Chapati", "category": "Sides", "price": 3}).value
        assert facade.remove_menu_item(GRACE, item.id).value is True
        assert store.get(EntityKind.MENU_ITEM, item.id) is None

    def test_table_in_other_branch(self):
        _, facade = _facade()
        assert facade.update_table(DIANE, "t-001", {"status": "cleaning"}).code == "NOT_FOUND"


# ══════════════════════════════════════════════════════════════
# SERVICE, STAFF, EVENTS, MESSAGING
# ══════════════════════════════════════════════════════════════


class TestServiceRequests:
    def test_guest_can_raise_request(self):
        _, facade = _facade()
        outcome = facade.create_service_request(
            GUEST,
            {
                "branch_id": "br-001",
                "guest_name": "Nadia Keza",
                "room_number": "104",
                "request_type": "laundry",
                "description": "Two shirts",
                "status": "completed",
            },
        )
        assert outcome.value.status is RequestStatus.PENDING

    def test_lifecycle(self):
        _, facade = _facade()
        assert facade.update_service_request(GRACE, "sr-001", {"status": "completed"}).is_accepted
        outcome = facade.update_service_request(GRACE, "sr-001", {"status": "in_progress"})
        assert outcome.code == "INVALID_STATUS_TRANSITION"

    def test_assign_without_status(self):
        _, facade = _facade()
        outcome = facade.update_service_request(GRACE, "sr-001", {"assigned_to": "Claudine"})
        assert outcome.value.assigned_to == "Claudine"


class TestStaffRecords:
    def test_self_removal_refused(self):
        _, facade = _facade()
        assert facade.remove_staff_member(GRACE, "s-002").code == "SELF_REMOVAL"

    def test_scoped_manager_hires_into_own_branch(self):
        _, facade = _facade()
        outcome = facade.add_staff_member(
            DIANE, {"name": "Eric", "email": "Eric@EastGate.rw", "role": "waiter"}
        )
        assert outcome.value.branch_id == "br-002"
        assert outcome.value.email == "eric@eastgate.rw"

    def test_wildcard_staff_must_be_elevated(self):
        _, facade = _facade()
        outcome = facade.add_staff_member(
            ADMIN, {"name": "Eric", "email": "eric@eastgate.rw", "role": "waiter", "branch_id": "all"}
        )
        assert outcome.code == "VALIDATION_ERROR"


class TestEventsAndMessaging:
    def test_attendees_within_capacity(self):
        _, facade = _facade()
        outcome = facade.update_event(GRACE, "ev-001", {"attendees": 501})
        assert outcome.code == "VALIDATION_ERROR"

    def test_mark_notification_read(self):
        _, facade = _facade()
        assert facade.mark_notification_read(GRACE, "n-001").value.read is True
        assert facade.mark_notification_read(GRACE, "n-201").code == "NOT_FOUND"

    def test_chat_sender_follows_role(self):
        _, facade = _facade()
        from_guest = facade.post_chat_message(GUEST, {"branch_id": "br-001", "message": "Hello"})
        from_staff = facade.post_chat_message(GRACE, {"message": "Welcome"})
        assert from_guest.value.sender is ChatSender.GUEST
        assert from_guest.value.sender_name == "Nadia Keza"
        assert from_staff.value.sender is ChatSender.STAFF


class TestAuditCompleteness:
    def test_one_entry_per_accepted_write_until_cap(self):
        store, facade = _facade()
        first = facade.update_booking(GRACE, "BK-2024007", {"payment_method": "cash"})
        oldest_id = store.activity.latest().id
        assert first.is_accepted
        for n in range(499):
            facade.update_booking(GRACE, "BK-2024007", {"payment_method": f"card-{n}"})
        assert len(store.activity) == 500

        facade.update_booking(GRACE, "BK-2024007", {"payment_method": "visa"})
        entries = store.activity.entries()
        assert len(entries) == 500
        assert oldest_id not in {entry.id for entry in entries}
        assert entries[0].meta == {"fields": ["payment_method"]}
        assert entries[0].entity_id == "BK-2024007"


class TestLoyaltyTiers:
    def test_thresholds(self):
        assert tier_for_points(999) is LoyaltyTier.NONE
        assert tier_for_points(1000) is LoyaltyTier.SILVER
        assert tier_for_points(5000) is LoyaltyTier.GOLD
        assert tier_for_points(15000) is LoyaltyTier.PLATINUM
