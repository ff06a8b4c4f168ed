"""
EastGate Core Audit — Pure Entry Functions
============================================
Factories for activity entries and deterministic description text.
All functions are pure: same inputs, same entry.
"""

from __future__ import annotations

from typing import Any, Optional

from core.audit.models import ActivityLogEntry, ActivityType

CURRENCY = "RWF"


def format_amount(amount: float) -> str:
    """`12000` → `RWF 12,000`."""
    return f"{CURRENCY} {amount:,.0f}"


def describe_status_change(entity_label: str, entity_id: str, status: str) -> str:
    return f"{entity_label} {entity_id} → {status}"


def describe_order(order_id: str, table_number: int, total: float) -> str:
    return f"Order {order_id} · Table {table_number} · {format_amount(total)}"


def describe_booking(booking_id: str, guest_name: str, room_number: str, total: float) -> str:
    return f"Booking {booking_id} · {guest_name} · Room {room_number} · {format_amount(total)}"


def create_activity_entry(
    entry_id: str,
    activity_type: ActivityType,
    actor_role: str,
    actor_name: str,
    entity_type: str,
    entity_id: str,
    description: str,
    created_at: str,
    branch_id: Optional[str] = None,
    branch_name: str = "",
    meta: Optional[dict[str, Any]] = None,
) -> ActivityLogEntry:
    """Create an immutable activity entry."""
    return ActivityLogEntry(
        id=entry_id,
        activity_type=activity_type,
        actor_role=actor_role,
        actor_name=actor_name,
        branch_id=branch_id,
        branch_name=branch_name,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description,
        created_at=created_at,
        meta=dict(meta or {}),
    )
