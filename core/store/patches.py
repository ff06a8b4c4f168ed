"""
EastGate Store — Allow-Listed Patches
=======================================
Explicit per-kind merge rules.

A patch may only touch the fields listed for its kind. `id` and
`branch_id` never change after creation; moving a record between
branches is not an update, it is a different record.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from core.store.codec import coerce_fields
from core.store.models import EntityKind


IMMUTABLE_FIELDS = frozenset({"id", "branch_id"})

MUTABLE_FIELDS: dict[EntityKind, frozenset[str]] = {
    EntityKind.BRANCH: frozenset(),
    EntityKind.ROOM: frozenset(
        {"floor", "room_type", "status", "price", "current_guest"}
    ),
    EntityKind.BOOKING: frozenset(
        {
            "guest_name",
            "guest_email",
            "guest_id",
            "room_number",
            "room_type",
            "check_in",
            "check_out",
            "status",
            "total_amount",
            "payment_method",
            "add_ons",
        }
    ),
    EntityKind.GUEST: frozenset(
        {
            "name",
            "email",
            "phone",
            "nationality",
            "loyalty_tier",
            "loyalty_points",
            "total_stays",
            "total_spent",
            "last_visit",
        }
    ),
    EntityKind.STAFF: frozenset(
        {"name", "email", "phone", "role", "department", "shift", "status"}
    ),
    EntityKind.ORDER: frozenset(
        {"table_number", "items", "status", "total", "guest_name", "room_charge"}
    ),
    EntityKind.MENU_ITEM: frozenset(
        {
            "name",
            "category",
            "price",
            "description",
            "available",
            "popular",
            "vegetarian",
            "spicy",
        }
    ),
    EntityKind.EVENT: frozenset(
        {
            "name",
            "event_type",
            "date",
            "start_time",
            "end_time",
            "hall",
            "capacity",
            "attendees",
            "status",
            "total_amount",
            "organizer",
        }
    ),
    EntityKind.SERVICE_REQUEST: frozenset(
        {"description", "status", "priority", "assigned_to"}
    ),
    EntityKind.TABLE: frozenset(
        {"seats", "status", "current_order", "waiter", "guest_name"}
    ),
    EntityKind.NOTIFICATION: frozenset({"read"}),
    EntityKind.CHAT_MESSAGE: frozenset({"read"}),
}


def check_patch_fields(kind: EntityKind, changes: dict[str, Any]) -> None:
    """Raise ValueError naming every field the patch may not touch."""
    frozen = sorted(set(changes) & IMMUTABLE_FIELDS)
    if frozen:
        raise ValueError(f"Field(s) cannot be changed: {', '.join(frozen)}.")

    disallowed = sorted(set(changes) - MUTABLE_FIELDS[kind])
    if disallowed:
        raise ValueError(
            f"Field(s) not editable on {kind.value}: {', '.join(disallowed)}."
        )


def apply_patch(kind: EntityKind, record, changes: dict[str, Any]):
    """
    Return a new record with `changes` merged in.

    The result is re-validated by the model's __post_init__, so a patch
    that breaks a record invariant raises ValueError.
    """
    check_patch_fields(kind, changes)
    if not changes:
        return record
    return dataclasses.replace(record, **coerce_fields(kind, changes))
