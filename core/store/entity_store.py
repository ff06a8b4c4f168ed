"""
EastGate Store — Entity Store
===============================
In-process owner of every business collection and the activity log.

Rules:
- One insertion-ordered collection per EntityKind
- Records are immutable; patch() swaps in a new record
- patch() honours the per-kind allow-list; id/branch_id never change
- delete() is idempotent: absent id → False, collection untouched
- No implicit cascades between collections
- Branches enter only through seed()

Every public method takes the store lock itself. The lock is
write-reentrant, so the mutation layer can hold write_locked() across
several store calls plus the audit append.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Optional

from core.audit.log import DEFAULT_ACTIVITY_LOG_CAPACITY, ActivityLog
from core.audit.models import ActivityLogEntry
from core.store.codec import build_record, field_names
from core.store.ids import IdFactory
from core.store.locking import ReadWriteLock
from core.store.models import MODEL_BY_KIND, Branch, EntityKind
from core.store.patches import apply_patch
from core.time.clock import Clock, iso_timestamp

logger = logging.getLogger("eastgate.store")

_STAMPED_FIELDS = ("created_at", "timestamp")


class EntityStore:
    def __init__(
        self,
        clock: Clock,
        activity_capacity: int = DEFAULT_ACTIVITY_LOG_CAPACITY,
        id_factory: Optional[IdFactory] = None,
        lock: Optional[ReadWriteLock] = None,
    ) -> None:
        self._clock = clock
        self._ids = id_factory or IdFactory(clock)
        self._lock = lock or ReadWriteLock()
        self._collections: dict[EntityKind, dict[str, Any]] = {
            kind: {} for kind in EntityKind
        }
        self.activity = ActivityLog(activity_capacity)

    # ══════════════════════════════════════════════════════════
    # LOCKING & SHARED SERVICES
    # ══════════════════════════════════════════════════════════

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    @contextmanager
    def read_locked(self) -> Iterator["EntityStore"]:
        with self._lock.read_locked():
            yield self

    @contextmanager
    def write_locked(self) -> Iterator["EntityStore"]:
        with self._lock.write_locked():
            yield self

    def new_id(self, kind) -> str:
        """Fresh id for `kind` (an EntityKind or "activity"), unused so far."""
        with self._lock.read_locked():
            if isinstance(kind, EntityKind):
                taken = self._collections[kind]
            else:
                taken = {entry.id for entry in self.activity.entries()}
            while True:
                candidate = self._ids.new_id(kind)
                if candidate not in taken:
                    return candidate

    # ══════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════

    def seed(self, kind: EntityKind, records: Iterable[Any]) -> int:
        """Load pre-built records (or raw dicts) once at start."""
        count = 0
        with self._lock.write_locked():
            for record in records:
                if isinstance(record, dict):
                    record = build_record(kind, record)
                self._insert(kind, record)
                count += 1
        logger.info("Seeded %d %s record(s).", count, kind.value)
        return count

    def insert(self, kind: EntityKind, record) -> Any:
        """Store a record whose id was chosen by the caller."""
        with self._lock.write_locked():
            self._insert(kind, record)
        return record

    def _insert(self, kind: EntityKind, record) -> None:
        model = MODEL_BY_KIND[kind]
        if not isinstance(record, model):
            raise TypeError(f"{kind.value} collection only holds {model.__name__}.")
        collection = self._collections[kind]
        if record.id in collection:
            raise ValueError(f"{kind.value} '{record.id}' already exists.")
        collection[record.id] = record

    def create(
        self,
        kind: EntityKind,
        fields: dict[str, Any],
        record_id: Optional[str] = None,
    ) -> Any:
        """
        Mint an id (unless `record_id` is given), stamp creation time
        where the model has one, store.

        Raises ValueError for unknown, missing or invalid fields.
        """
        if kind == EntityKind.BRANCH:
            raise ValueError("Branches are seeded, not created.")
        if "id" in fields:
            raise ValueError("id is assigned by the store.")

        with self._lock.write_locked():
            raw = dict(fields)
            known = field_names(kind)
            for stamp in _STAMPED_FIELDS:
                if stamp in known and not raw.get(stamp):
                    raw[stamp] = iso_timestamp(self._clock)
            raw["id"] = record_id or self.new_id(kind)
            record = build_record(kind, raw)
            self._insert(kind, record)
        logger.debug("created %s/%s", kind.value, record.id)
        return record

    def patch(self, kind: EntityKind, record_id: str, changes: dict[str, Any]) -> Optional[Any]:
        """Allow-listed merge. None when the record does not exist."""
        with self._lock.write_locked():
            current = self._collections[kind].get(record_id)
            if current is None:
                return None
            updated = apply_patch(kind, current, changes)
            self._collections[kind][record_id] = updated
        logger.debug("patched %s/%s fields=%s", kind.value, record_id, sorted(changes))
        return updated

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        with self._lock.write_locked():
            removed = self._collections[kind].pop(record_id, None)
        if removed is not None:
            logger.debug("deleted %s/%s", kind.value, record_id)
        return removed is not None

    def append_activity(self, entry: ActivityLogEntry) -> None:
        with self._lock.write_locked():
            self.activity.append(entry)

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get(self, kind: EntityKind, record_id: str) -> Optional[Any]:
        with self._lock.read_locked():
            return self._collections[kind].get(record_id)

    def list(self, kind: EntityKind) -> tuple:
        with self._lock.read_locked():
            return tuple(self._collections[kind].values())

    def find(self, kind: EntityKind, predicate: Callable[[Any], bool]) -> tuple:
        with self._lock.read_locked():
            return tuple(r for r in self._collections[kind].values() if predicate(r))

    def count(self, kind: EntityKind) -> int:
        with self._lock.read_locked():
            return len(self._collections[kind])

    def activity_entries(self) -> tuple[ActivityLogEntry, ...]:
        with self._lock.read_locked():
            return self.activity.entries()

    def branch_ids(self) -> frozenset[str]:
        with self._lock.read_locked():
            return frozenset(self._collections[EntityKind.BRANCH])

    def branch_name(self, branch_id: Optional[str]) -> str:
        if branch_id is None:
            return ""
        branch: Optional[Branch] = self.get(EntityKind.BRANCH, branch_id)
        return branch.name if branch is not None else ""
