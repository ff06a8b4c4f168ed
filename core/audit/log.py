"""
EastGate Core Audit — Bounded Activity Log
============================================
Newest-first, capped at the most recent N entries (default 500).

The cap is an invariant checked on every append, not a silent trim:
appending one entry to a full log evicts exactly one (the oldest).
Observing the log above capacity means something bypassed append(),
and that is fatal.

Not thread-safe on its own. The entity store's lock guards it.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, Optional

from core.audit.models import ActivityLogEntry
from core.bootstrap.errors import InvariantViolation

logger = logging.getLogger("eastgate.audit")

DEFAULT_ACTIVITY_LOG_CAPACITY = 500


class ActivityLog:
    def __init__(self, capacity: int = DEFAULT_ACTIVITY_LOG_CAPACITY) -> None:
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError("capacity must be a positive integer.")
        self._capacity = capacity
        self._entries: Deque[ActivityLogEntry] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def _check_bound(self, stage: str) -> None:
        if len(self._entries) > self._capacity:
            logger.error(
                "Activity log holds %d entries (cap %d) %s append.",
                len(self._entries),
                self._capacity,
                stage,
            )
            raise InvariantViolation(
                invariant="ACTIVITY_LOG_BOUND",
                detail=(
                    f"log holds {len(self._entries)} entries, "
                    f"capacity is {self._capacity}."
                ),
            )

    def append(self, entry: ActivityLogEntry) -> Optional[ActivityLogEntry]:
        """
        Add `entry` as the newest record.

        Returns the evicted entry when the log was full, else None.
        """
        if not isinstance(entry, ActivityLogEntry):
            raise TypeError("entry must be ActivityLogEntry.")

        self._check_bound("before")
        self._entries.appendleft(entry)
        evicted = None
        if len(self._entries) > self._capacity:
            evicted = self._entries.pop()
        self._check_bound("after")

        logger.debug(
            "activity %s %s/%s", entry.activity_type.value, entry.entity_type, entry.entity_id
        )
        return evicted

    def restore(self, entries: Iterable[ActivityLogEntry]) -> None:
        """Replace contents from a persisted newest-first sequence."""
        restored = deque(entries)
        if len(restored) > self._capacity:
            raise InvariantViolation(
                invariant="ACTIVITY_LOG_BOUND",
                detail=(
                    f"persisted log holds {len(restored)} entries, "
                    f"capacity is {self._capacity}."
                ),
            )
        self._entries = restored

    def entries(self) -> tuple[ActivityLogEntry, ...]:
        """Newest first."""
        return tuple(self._entries)

    def latest(self) -> Optional[ActivityLogEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)
