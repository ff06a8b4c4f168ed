"""
EastGate Store — Record Codec
===============================
Raw field dicts (HTTP bodies, seed files, state documents) ⇄ records.

All coercion failures raise ValueError with a message naming the
offending field. Callers in the mutation layer turn that into a
VALIDATION_ERROR rejection.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from core.context.scope import Role
from core.store.models import (
    MODEL_BY_KIND,
    BookingStatus,
    ChatSender,
    EntityKind,
    EventStatus,
    LoyaltyTier,
    NotificationType,
    OrderLine,
    OrderStatus,
    Priority,
    RequestStatus,
    RequestType,
    RoomStatus,
    RoomType,
    StaffStatus,
    TableStatus,
)


_ENUM_FIELDS: dict[EntityKind, dict[str, type]] = {
    EntityKind.ROOM: {"room_type": RoomType, "status": RoomStatus},
    EntityKind.BOOKING: {"room_type": RoomType, "status": BookingStatus},
    EntityKind.GUEST: {"loyalty_tier": LoyaltyTier},
    EntityKind.STAFF: {"role": Role, "status": StaffStatus},
    EntityKind.ORDER: {"status": OrderStatus},
    EntityKind.EVENT: {"status": EventStatus},
    EntityKind.SERVICE_REQUEST: {
        "request_type": RequestType,
        "status": RequestStatus,
        "priority": Priority,
    },
    EntityKind.TABLE: {"status": TableStatus},
    EntityKind.NOTIFICATION: {"notification_type": NotificationType},
    EntityKind.CHAT_MESSAGE: {"sender": ChatSender},
}


def field_names(kind: EntityKind) -> frozenset[str]:
    return frozenset(f.name for f in dataclasses.fields(MODEL_BY_KIND[kind]))


def required_field_names(kind: EntityKind) -> frozenset[str]:
    return frozenset(
        f.name
        for f in dataclasses.fields(MODEL_BY_KIND[kind])
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
    )


def _coerce_line(value: Any) -> OrderLine:
    if isinstance(value, OrderLine):
        return value
    if not isinstance(value, dict):
        raise ValueError("items entries must be objects with name, quantity, price.")
    try:
        return OrderLine(
            name=value["name"],
            quantity=int(value["quantity"]),
            price=float(value["price"]),
        )
    except KeyError as exc:
        raise ValueError(f"items entry is missing '{exc.args[0]}'.") from None
    except TypeError:
        raise ValueError("items entry has a non-numeric quantity or price.") from None


def coerce_fields(kind: EntityKind, raw: dict[str, Any]) -> dict[str, Any]:
    """
    Validate field names and convert wire values to model types.

    Unknown field names are rejected. Enum-valued fields accept either
    the enum member or its string value.
    """
    if not isinstance(raw, dict):
        raise ValueError("fields must be an object.")

    unknown = set(raw) - field_names(kind)
    if unknown:
        raise ValueError(
            f"Unknown field(s) for {kind.value}: {', '.join(sorted(unknown))}."
        )

    enum_fields = _ENUM_FIELDS.get(kind, {})
    coerced: dict[str, Any] = {}
    for name, value in raw.items():
        if name in enum_fields and value is not None:
            try:
                value = enum_fields[name](value)
            except ValueError:
                raise ValueError(f"{name} has invalid value '{value}'.") from None
        elif kind == EntityKind.ORDER and name == "items":
            if not isinstance(value, (list, tuple)):
                raise ValueError("items must be a list.")
            value = tuple(_coerce_line(line) for line in value)
        elif name == "add_ons":
            if not isinstance(value, (list, tuple)):
                raise ValueError("add_ons must be a list.")
            value = tuple(str(item) for item in value)
        coerced[name] = value
    return coerced


def build_record(kind: EntityKind, raw: dict[str, Any]):
    """Construct a record of `kind`. Raises ValueError on any defect."""
    coerced = coerce_fields(kind, raw)
    missing = required_field_names(kind) - set(coerced)
    if missing:
        raise ValueError(
            f"Missing required field(s) for {kind.value}: {', '.join(sorted(missing))}."
        )
    return MODEL_BY_KIND[kind](**coerced)


# ══════════════════════════════════════════════════════════════
# RECORD → PLAIN DATA
# ══════════════════════════════════════════════════════════════

def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return record_to_dict(value)
    if isinstance(value, (tuple, list)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def record_to_dict(record) -> dict[str, Any]:
    """JSON-safe dict of a record. Inverse of build_record."""
    return {
        f.name: _plain(getattr(record, f.name))
        for f in dataclasses.fields(record)
    }
