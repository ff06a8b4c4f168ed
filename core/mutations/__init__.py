"""
EastGate Mutations — Public API
=================================
Single audited write path plus lifecycle tables.
"""

from core.mutations.facade import MutationFacade
from core.mutations.loyalty import stay_credit, tier_for_points
from core.mutations.transitions import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_STATUS_ACTIVITY,
    BOOKING_TRANSITIONS,
    ORDER_TRANSITIONS,
    SERVICE_REQUEST_TRANSITIONS,
    activity_for_booking_status,
    can_transition,
)

__all__ = [
    "MutationFacade",
    "stay_credit",
    "tier_for_points",
    "ACTIVE_BOOKING_STATUSES",
    "BOOKING_STATUS_ACTIVITY",
    "BOOKING_TRANSITIONS",
    "ORDER_TRANSITIONS",
    "SERVICE_REQUEST_TRANSITIONS",
    "activity_for_booking_status",
    "can_transition",
]
