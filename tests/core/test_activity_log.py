"""
Tests for core.audit — bounded activity log and entry text.
"""

from datetime import datetime, timezone

import pytest

from core.audit.functions import (
    create_activity_entry,
    describe_booking,
    describe_order,
    describe_status_change,
    format_amount,
)
from core.audit.log import DEFAULT_ACTIVITY_LOG_CAPACITY, ActivityLog
from core.audit.models import ActivityLogEntry, ActivityType
from core.bootstrap.errors import InvariantViolation


NOW = datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc).isoformat()


def _entry(n: int, branch_id="br-001") -> ActivityLogEntry:
    return create_activity_entry(
        entry_id=f"act-{n}",
        activity_type=ActivityType.ORDER_PLACED,
        actor_role="waiter",
        actor_name="Patrick",
        entity_type="order",
        entity_id=f"ORD-{n}",
        description=f"Order ORD-{n}",
        created_at=NOW,
        branch_id=branch_id,
        branch_name="Kigali Main",
    )


# ── ActivityLogEntry ─────────────────────────────────────────

class TestActivityLogEntry:
    def test_frozen(self):
        entry = _entry(1)
        with pytest.raises(AttributeError):
            entry.description = "edited"

    def test_activity_type_must_be_enum(self):
        with pytest.raises(ValueError, match="activity_type"):
            ActivityLogEntry(
                id="act-1",
                activity_type="order_placed",
                actor_role="waiter",
                actor_name="Patrick",
                branch_id="br-001",
                branch_name="Kigali Main",
                entity_type="order",
                entity_id="ORD-1",
                description="",
                created_at=NOW,
            )

    def test_dict_form_restores_entry(self):
        entry = _entry(7)
        assert ActivityLogEntry.from_dict(entry.to_dict()) == entry

    def test_meta_is_copied(self):
        meta = {"items": 2}
        entry = create_activity_entry(
            entry_id="act-1",
            activity_type=ActivityType.ORDER_PLACED,
            actor_role="waiter",
            actor_name="Patrick",
            entity_type="order",
            entity_id="ORD-1",
            description="",
            created_at=NOW,
            meta=meta,
        )
        meta["items"] = 99
        assert entry.meta == {"items": 2}


# ── ActivityLog ──────────────────────────────────────────────

class TestActivityLog:
    def test_default_capacity_is_500(self):
        assert ActivityLog().capacity == DEFAULT_ACTIVITY_LOG_CAPACITY == 500

    def test_newest_first(self):
        log = ActivityLog()
        for n in range(3):
            log.append(_entry(n))
        assert [e.id for e in log.entries()] == ["act-2", "act-1", "act-0"]
        assert log.latest().id == "act-2"

    def test_cap_evicts_oldest(self):
        log = ActivityLog()
        for n in range(500):
            assert log.append(_entry(n)) is None
        evicted = log.append(_entry(500))
        assert evicted.id == "act-0"
        assert len(log) == 500
        entries = log.entries()
        assert entries[0].id == "act-500"
        assert entries[-1].id == "act-1"

    def test_steady_at_capacity(self):
        log = ActivityLog(capacity=3)
        for n in range(10):
            log.append(_entry(n))
            assert len(log) == min(n + 1, 3)
        assert [e.id for e in log.entries()] == ["act-9", "act-8", "act-7"]

    def test_over_capacity_is_fatal(self):
        log = ActivityLog(capacity=2)
        log.restore([_entry(1), _entry(2)])
        log._entries.append(_entry(3))
        with pytest.raises(InvariantViolation, match="ACTIVITY_LOG_BOUND"):
            log.append(_entry(4))

    def test_restore_over_capacity_refused(self):
        log = ActivityLog(capacity=2)
        with pytest.raises(InvariantViolation):
            log.restore([_entry(1), _entry(2), _entry(3)])

    def test_rejects_non_entries(self):
        with pytest.raises(TypeError):
            ActivityLog().append({"id": "act-1"})

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            ActivityLog(capacity=0)


# ── Description text ─────────────────────────────────────────

class TestDescriptions:
    def test_format_amount(self):
        assert format_amount(12000) == "RWF 12,000"

    def test_status_change(self):
        assert describe_status_change("Booking", "BK-1", "checked_in") == "Booking BK-1 → checked_in"

    def test_order(self):
        assert describe_order("ORD-1", 4, 12000) == "Order ORD-1 · Table 4 · RWF 12,000"

    def test_booking(self):
        assert (
            describe_booking("BK-1", "Sarah Mitchell", "101", 1000)
            == "Booking BK-1 · Sarah Mitchell · Room 101 · RWF 1,000"
        )
