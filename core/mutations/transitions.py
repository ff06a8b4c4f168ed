"""
EastGate Mutations — Status Transition Tables
===============================================
One-directional lifecycles. A status may only move along an edge
listed here; same-state "transitions" are refused too.
"""

from __future__ import annotations

import logging
from typing import Mapping

from core.audit.models import ActivityType
from core.bootstrap.errors import InvariantViolation
from core.store.models import BookingStatus, OrderStatus, RequestStatus

logger = logging.getLogger("eastgate.mutations")


BOOKING_TRANSITIONS: Mapping[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN, BookingStatus.CANCELLED}
    ),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.CHECKED_IN, BookingStatus.CANCELLED, BookingStatus.REFUNDED}
    ),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset({BookingStatus.REFUNDED}),
    BookingStatus.CANCELLED: frozenset({BookingStatus.REFUNDED}),
    BookingStatus.REFUNDED: frozenset(),
}

ORDER_TRANSITIONS: Mapping[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.SERVED}),
    OrderStatus.SERVED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

SERVICE_REQUEST_TRANSITIONS: Mapping[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED, RequestStatus.CANCELLED}
    ),
    RequestStatus.IN_PROGRESS: frozenset(
        {RequestStatus.COMPLETED, RequestStatus.CANCELLED}
    ),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}

# Bookings that still hold their room.
ACTIVE_BOOKING_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN}
)


def can_transition(table: Mapping, current, target) -> bool:
    return target in table.get(current, frozenset())


# ══════════════════════════════════════════════════════════════
# BOOKING STATUS → ACTIVITY TAG
# ══════════════════════════════════════════════════════════════

BOOKING_STATUS_ACTIVITY: Mapping[BookingStatus, ActivityType] = {
    BookingStatus.PENDING: ActivityType.BOOKING_CREATED,
    BookingStatus.CONFIRMED: ActivityType.BOOKING_CONFIRMED,
    BookingStatus.CHECKED_IN: ActivityType.CHECK_IN,
    BookingStatus.CHECKED_OUT: ActivityType.CHECK_OUT,
    BookingStatus.CANCELLED: ActivityType.BOOKING_CANCELLED,
    BookingStatus.REFUNDED: ActivityType.BOOKING_REFUNDED,
}


def _check_exhaustive() -> None:
    missing = set(BookingStatus) - set(BOOKING_STATUS_ACTIVITY)
    if missing:
        raise InvariantViolation(
            invariant="BOOKING_STATUS_ACTIVITY",
            detail=f"no activity tag for {sorted(s.value for s in missing)}.",
        )
    for table, enum_cls in (
        (BOOKING_TRANSITIONS, BookingStatus),
        (ORDER_TRANSITIONS, OrderStatus),
        (SERVICE_REQUEST_TRANSITIONS, RequestStatus),
    ):
        if set(table) != set(enum_cls):
            raise InvariantViolation(
                invariant="TRANSITION_TABLE",
                detail=f"{enum_cls.__name__} table does not cover every status.",
            )


_check_exhaustive()


def activity_for_booking_status(status: BookingStatus) -> ActivityType:
    try:
        return BOOKING_STATUS_ACTIVITY[status]
    except KeyError:
        logger.error("No activity tag for booking status %r.", status)
        raise InvariantViolation(
            invariant="BOOKING_STATUS_ACTIVITY",
            detail=f"no activity tag for booking status {status!r}.",
        ) from None
