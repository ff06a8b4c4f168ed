"""
EastGate Core Audit — Activity Log Models
===========================================
Append-only activity entries. Frozen dataclasses: once created,
never modified. Deletion happens only by eviction past the cap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# ══════════════════════════════════════════════════════════════
# ACTIVITY TAXONOMY
# ══════════════════════════════════════════════════════════════

class ActivityType(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_REFUNDED = "booking_refunded"
    BOOKING_UPDATED = "booking_updated"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    ORDER_PLACED = "order_placed"
    ORDER_STATUS = "order_status"
    SERVICE_REQUEST = "service_request"
    GUEST_REGISTERED = "guest_registered"
    GUEST_UPDATED = "guest_updated"
    ROOM_UPDATED = "room_updated"
    MENU_UPDATED = "menu_updated"
    STAFF_UPDATED = "staff_updated"
    EVENT_UPDATED = "event_updated"
    TABLE_UPDATED = "table_updated"
    NOTIFICATION_POSTED = "notification_posted"
    NOTIFICATION_READ = "notification_read"
    CHAT_MESSAGE = "chat_message"


# ══════════════════════════════════════════════════════════════
# ACTIVITY LOG ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActivityLogEntry:
    """
    Immutable record of one successful state change.

    branch_id is None for chain-wide changes (menu edits by elevated
    staff, self-registered guests). Such entries are only visible
    through the elevated wildcard view.
    """

    id: str
    activity_type: ActivityType
    actor_role: str
    actor_name: str
    branch_id: Optional[str]
    branch_name: str
    entity_type: str
    entity_id: str
    description: str
    created_at: str
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.activity_type, ActivityType):
            raise ValueError(
                f"activity_type must be ActivityType, got '{self.activity_type}'."
            )
        if not self.id or not self.entity_id:
            raise ValueError("id and entity_id must be non-empty.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "activity_type": self.activity_type.value,
            "actor_role": self.actor_role,
            "actor_name": self.actor_name,
            "branch_id": self.branch_id,
            "branch_name": self.branch_name,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "created_at": self.created_at,
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivityLogEntry":
        return cls(
            id=data["id"],
            activity_type=ActivityType(data["activity_type"]),
            actor_role=data["actor_role"],
            actor_name=data["actor_name"],
            branch_id=data.get("branch_id"),
            branch_name=data.get("branch_name", ""),
            entity_type=data["entity_type"],
            entity_id=data["entity_id"],
            description=data["description"],
            created_at=data["created_at"],
            meta=dict(data.get("meta") or {}),
        )
