"""
EastGate Projections — Scoped Read Model
==========================================
Branch-scoped views over the entity store.

Every reader is the same generic filter (scope_records) applied to
one collection, taken under the store read lock. Callers pass the
branch filter the UI selected; scoped roles get their own branch no
matter what they ask for.
"""

from __future__ import annotations

from typing import Optional

from core.audit.models import ActivityLogEntry
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD
from core.security.branch_isolation import scope_records
from core.store.entity_store import EntityStore
from core.store.models import EntityKind


class ScopedProjection:
    """
    Read-only, branch-aware access to business collections.

    Menu items are chain-wide and returned unfiltered.
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def records(
        self,
        kind: EntityKind,
        caller: ActorContext,
        branch_filter: Optional[str] = BRANCH_WILDCARD,
    ) -> tuple:
        with self._store.read_locked():
            return scope_records(self._store.list(kind), caller, branch_filter)

    def branches(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.BRANCH, caller, branch_filter)

    def staff(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.STAFF, caller, branch_filter)

    def bookings(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.BOOKING, caller, branch_filter)

    def rooms(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.ROOM, caller, branch_filter)

    def orders(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.ORDER, caller, branch_filter)

    def events(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.EVENT, caller, branch_filter)

    def service_requests(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.SERVICE_REQUEST, caller, branch_filter)

    def tables(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.TABLE, caller, branch_filter)

    def notifications(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.NOTIFICATION, caller, branch_filter)

    def guests(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.GUEST, caller, branch_filter)

    def chat_messages(self, caller: ActorContext, branch_filter: Optional[str] = BRANCH_WILDCARD) -> tuple:
        return self.records(EntityKind.CHAT_MESSAGE, caller, branch_filter)

    def activity_log(
        self,
        caller: ActorContext,
        branch_filter: Optional[str] = BRANCH_WILDCARD,
    ) -> tuple[ActivityLogEntry, ...]:
        """Newest first."""
        with self._store.read_locked():
            return scope_records(self._store.activity_entries(), caller, branch_filter)

    def menu_items(self) -> tuple:
        return self._store.list(EntityKind.MENU_ITEM)

    def unread_notification_count(
        self,
        caller: ActorContext,
        branch_filter: Optional[str] = BRANCH_WILDCARD,
    ) -> int:
        return sum(1 for n in self.notifications(caller, branch_filter) if not n.read)
