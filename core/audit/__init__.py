"""
EastGate Core Audit — Public API
==================================
Bounded, newest-first activity log.
"""

from core.audit.functions import (
    create_activity_entry,
    describe_booking,
    describe_order,
    describe_status_change,
    format_amount,
)
from core.audit.log import DEFAULT_ACTIVITY_LOG_CAPACITY, ActivityLog
from core.audit.models import ActivityLogEntry, ActivityType

__all__ = [
    "ActivityLog",
    "ActivityLogEntry",
    "ActivityType",
    "DEFAULT_ACTIVITY_LOG_CAPACITY",
    "create_activity_entry",
    "describe_booking",
    "describe_order",
    "describe_status_change",
    "format_amount",
]
