"""
EastGate Store — Public API
=============================
Entity models, allow-listed patches and the in-process entity store.
"""

from core.store.codec import build_record, coerce_fields, record_to_dict
from core.store.entity_store import EntityStore
from core.store.ids import ID_PREFIXES, IdFactory
from core.store.locking import ReadWriteLock
from core.store.models import (
    MODEL_BY_KIND,
    UNSCOPED_KINDS,
    Booking,
    BookingStatus,
    Branch,
    ChatMessage,
    ChatSender,
    EntityKind,
    EventStatus,
    Guest,
    HotelEvent,
    LoyaltyTier,
    MenuItem,
    Notification,
    NotificationType,
    Order,
    OrderLine,
    OrderStatus,
    Priority,
    RequestStatus,
    RequestType,
    RestaurantTable,
    Room,
    RoomStatus,
    RoomType,
    ServiceRequest,
    StaffMember,
    StaffStatus,
    TableStatus,
    branch_of,
)
from core.store.patches import IMMUTABLE_FIELDS, MUTABLE_FIELDS, apply_patch

__all__ = [
    # Store
    "EntityStore",
    "IdFactory",
    "ID_PREFIXES",
    "ReadWriteLock",
    # Codec / patches
    "build_record",
    "coerce_fields",
    "record_to_dict",
    "apply_patch",
    "IMMUTABLE_FIELDS",
    "MUTABLE_FIELDS",
    # Models
    "EntityKind",
    "MODEL_BY_KIND",
    "UNSCOPED_KINDS",
    "branch_of",
    "Branch",
    "Room",
    "RoomType",
    "RoomStatus",
    "Booking",
    "BookingStatus",
    "Guest",
    "LoyaltyTier",
    "StaffMember",
    "StaffStatus",
    "Order",
    "OrderLine",
    "OrderStatus",
    "MenuItem",
    "HotelEvent",
    "EventStatus",
    "ServiceRequest",
    "RequestType",
    "RequestStatus",
    "Priority",
    "RestaurantTable",
    "TableStatus",
    "Notification",
    "NotificationType",
    "ChatMessage",
    "ChatSender",
]
