"""
EastGate Store — Business Entity Models
=========================================
Frozen dataclasses for every business entity the core holds.

Records are never mutated in place: a patch produces a new record
that replaces the old one in its collection. Enum values are the
lowercase strings the presentation layer already speaks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.context.scope import Role


# ══════════════════════════════════════════════════════════════
# ENTITY KINDS
# ══════════════════════════════════════════════════════════════

class EntityKind(str, Enum):
    BRANCH = "branch"
    ROOM = "room"
    BOOKING = "booking"
    GUEST = "guest"
    STAFF = "staff"
    ORDER = "order"
    MENU_ITEM = "menu_item"
    EVENT = "event"
    SERVICE_REQUEST = "service_request"
    TABLE = "table"
    NOTIFICATION = "notification"
    CHAT_MESSAGE = "chat_message"


# ══════════════════════════════════════════════════════════════
# ENUMERATIONS
# ══════════════════════════════════════════════════════════════

class RoomType(str, Enum):
    STANDARD = "standard"
    DELUXE = "deluxe"
    FAMILY = "family"
    EXECUTIVE = "executive"
    PRESIDENTIAL = "presidential"


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    CLEANING = "cleaning"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class LoyaltyTier(str, Enum):
    NONE = "none"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    OFF_DUTY = "off_duty"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestType(str, Enum):
    ROOM_SERVICE = "room_service"
    HOUSEKEEPING = "housekeeping"
    MAINTENANCE = "maintenance"
    CONCIERGE = "concierge"
    WAKE_UP = "wake_up"
    LAUNDRY = "laundry"


class RequestStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    CLEANING = "cleaning"


class NotificationType(str, Enum):
    ORDER = "order"
    BOOKING = "booking"
    SERVICE = "service"
    ALERT = "alert"
    CHAT = "chat"


class ChatSender(str, Enum):
    GUEST = "guest"
    STAFF = "staff"


# ══════════════════════════════════════════════════════════════
# VALIDATION HELPERS
# ══════════════════════════════════════════════════════════════

def _require_text(value, field_name: str) -> None:
    if not value or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")


def _require_non_negative(value, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValueError(f"{field_name} must be a non-negative number.")


def _require_enum(value, enum_cls, field_name: str) -> None:
    if not isinstance(value, enum_cls):
        raise ValueError(f"{field_name} must be {enum_cls.__name__}.")


# ══════════════════════════════════════════════════════════════
# BRANCH
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Branch:
    """Immutable after seeding. The core exposes no branch CRUD."""

    id: str
    name: str
    location: str
    manager_name: str = ""
    total_rooms: int = 0
    occupancy_rate: float = 0.0

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.name, "name")


# ══════════════════════════════════════════════════════════════
# ROOMS & BOOKINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Room:
    id: str
    branch_id: str
    number: str
    floor: int
    room_type: RoomType
    status: RoomStatus
    price: float
    current_guest: Optional[str] = None

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.number, "number")
        _require_enum(self.room_type, RoomType, "room_type")
        _require_enum(self.status, RoomStatus, "status")
        _require_non_negative(self.price, "price")


@dataclass(frozen=True)
class Booking:
    """
    Reservation of one room in one branch.

    check_in / check_out are ISO dates (YYYY-MM-DD); lexical order
    matches chronological order.
    """

    id: str
    branch_id: str
    guest_name: str
    guest_email: str
    room_number: str
    room_type: RoomType
    check_in: str
    check_out: str
    status: BookingStatus
    total_amount: float
    payment_method: str = ""
    guest_id: Optional[str] = None
    add_ons: tuple[str, ...] = field(default_factory=tuple)
    created_at: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.guest_name, "guest_name")
        _require_text(self.room_number, "room_number")
        _require_enum(self.room_type, RoomType, "room_type")
        _require_enum(self.status, BookingStatus, "status")
        _require_text(self.check_in, "check_in")
        _require_text(self.check_out, "check_out")
        if self.check_out < self.check_in:
            raise ValueError("check_out must not precede check_in.")
        _require_non_negative(self.total_amount, "total_amount")
        if not isinstance(self.add_ons, tuple):
            raise ValueError("add_ons must be a tuple.")


# ══════════════════════════════════════════════════════════════
# PEOPLE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Guest:
    """
    Guest business record.

    branch_id is None for self-registered guests; such records are
    only visible through the elevated wildcard view.
    """

    id: str
    name: str
    email: str
    phone: str = ""
    nationality: str = ""
    branch_id: Optional[str] = None
    loyalty_tier: LoyaltyTier = LoyaltyTier.NONE
    loyalty_points: int = 0
    total_stays: int = 0
    total_spent: float = 0.0
    last_visit: Optional[str] = None
    created_at: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.name, "name")
        _require_enum(self.loyalty_tier, LoyaltyTier, "loyalty_tier")
        _require_non_negative(self.loyalty_points, "loyalty_points")
        _require_non_negative(self.total_stays, "total_stays")
        _require_non_negative(self.total_spent, "total_spent")


@dataclass(frozen=True)
class StaffMember:
    """HR record. Shares its id with the staff Identity, if one exists."""

    id: str
    branch_id: str
    name: str
    email: str
    role: Role
    phone: str = ""
    department: str = ""
    shift: str = ""
    status: StaffStatus = StaffStatus.ACTIVE
    join_date: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.name, "name")
        _require_enum(self.role, Role, "role")
        _require_enum(self.status, StaffStatus, "status")


# ══════════════════════════════════════════════════════════════
# RESTAURANT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OrderLine:
    name: str
    quantity: int
    price: float

    def __post_init__(self):
        _require_text(self.name, "name")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer.")
        _require_non_negative(self.price, "price")

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class Order:
    id: str
    branch_id: str
    table_number: int
    items: tuple[OrderLine, ...]
    status: OrderStatus
    total: float
    guest_name: Optional[str] = None
    room_charge: bool = False
    performed_by: str = ""
    created_at: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        if not isinstance(self.items, tuple) or not self.items:
            raise ValueError("items must be a non-empty tuple of OrderLine.")
        for line in self.items:
            if not isinstance(line, OrderLine):
                raise ValueError("items must contain OrderLine entries.")
        _require_enum(self.status, OrderStatus, "status")
        _require_non_negative(self.total, "total")


@dataclass(frozen=True)
class MenuItem:
    """Chain-wide menu entry. Not branch-scoped."""

    id: str
    name: str
    category: str
    price: float
    description: str = ""
    available: bool = True
    popular: bool = False
    vegetarian: bool = False
    spicy: bool = False

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.name, "name")
        _require_text(self.category, "category")
        _require_non_negative(self.price, "price")


@dataclass(frozen=True)
class RestaurantTable:
    id: str
    branch_id: str
    number: int
    seats: int
    status: TableStatus = TableStatus.AVAILABLE
    current_order: Optional[str] = None
    waiter: Optional[str] = None
    guest_name: Optional[str] = None

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_enum(self.status, TableStatus, "status")


# ══════════════════════════════════════════════════════════════
# EVENTS & SERVICE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HotelEvent:
    id: str
    branch_id: str
    name: str
    event_type: str
    date: str
    hall: str
    capacity: int
    start_time: str = ""
    end_time: str = ""
    attendees: int = 0
    status: EventStatus = EventStatus.UPCOMING
    total_amount: float = 0.0
    organizer: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.name, "name")
        _require_text(self.date, "date")
        _require_enum(self.status, EventStatus, "status")
        _require_non_negative(self.capacity, "capacity")
        _require_non_negative(self.attendees, "attendees")
        if self.attendees > self.capacity:
            raise ValueError("attendees must not exceed capacity.")


@dataclass(frozen=True)
class ServiceRequest:
    id: str
    branch_id: str
    guest_name: str
    room_number: str
    request_type: RequestType
    description: str
    status: RequestStatus = RequestStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = None
    created_at: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.room_number, "room_number")
        _require_enum(self.request_type, RequestType, "request_type")
        _require_enum(self.status, RequestStatus, "status")
        _require_enum(self.priority, Priority, "priority")


# ══════════════════════════════════════════════════════════════
# MESSAGING
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Notification:
    id: str
    branch_id: str
    title: str
    message: str
    notification_type: NotificationType
    read: bool = False
    created_at: str = ""

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_text(self.title, "title")
        _require_enum(self.notification_type, NotificationType, "notification_type")


@dataclass(frozen=True)
class ChatMessage:
    id: str
    branch_id: str
    sender: ChatSender
    sender_name: str
    message: str
    timestamp: str = ""
    read: bool = False

    def __post_init__(self):
        _require_text(self.id, "id")
        _require_text(self.branch_id, "branch_id")
        _require_enum(self.sender, ChatSender, "sender")
        _require_text(self.message, "message")


# ══════════════════════════════════════════════════════════════
# KIND → MODEL
# ══════════════════════════════════════════════════════════════

MODEL_BY_KIND = {
    EntityKind.BRANCH: Branch,
    EntityKind.ROOM: Room,
    EntityKind.BOOKING: Booking,
    EntityKind.GUEST: Guest,
    EntityKind.STAFF: StaffMember,
    EntityKind.ORDER: Order,
    EntityKind.MENU_ITEM: MenuItem,
    EntityKind.EVENT: HotelEvent,
    EntityKind.SERVICE_REQUEST: ServiceRequest,
    EntityKind.TABLE: RestaurantTable,
    EntityKind.NOTIFICATION: Notification,
    EntityKind.CHAT_MESSAGE: ChatMessage,
}

# Kinds whose records are not tied to a branch.
UNSCOPED_KINDS = frozenset({EntityKind.MENU_ITEM})


def branch_of(record) -> Optional[str]:
    """Owning branch of a record. A Branch owns itself."""
    if isinstance(record, Branch):
        return record.id
    return getattr(record, "branch_id", None)
