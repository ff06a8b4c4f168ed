"""
EastGate Store — Id Generation
================================
Ids are `<prefix><epoch-millis>-<4 hex>`, e.g. `BK-1739521234567-3fa1`.

The millisecond component comes from the injected clock; the suffix
keeps ids unique when several records are minted in the same
millisecond.
"""

from __future__ import annotations

import secrets
from typing import Callable, Optional

from core.store.models import EntityKind
from core.time.clock import Clock, epoch_millis


ID_PREFIXES: dict[str, str] = {
    EntityKind.BRANCH.value: "br-",
    EntityKind.ROOM.value: "rm-",
    EntityKind.BOOKING.value: "BK-",
    EntityKind.GUEST.value: "g-",
    EntityKind.STAFF.value: "s-",
    EntityKind.ORDER.value: "ORD-",
    EntityKind.MENU_ITEM.value: "mi-",
    EntityKind.EVENT.value: "ev-",
    EntityKind.SERVICE_REQUEST.value: "sr-",
    EntityKind.TABLE.value: "t-",
    EntityKind.NOTIFICATION.value: "n-",
    EntityKind.CHAT_MESSAGE.value: "cm-",
    "activity": "act-",
}


class IdFactory:
    def __init__(
        self,
        clock: Clock,
        suffix_source: Optional[Callable[[], str]] = None,
    ) -> None:
        self._clock = clock
        self._suffix_source = suffix_source or (lambda: secrets.token_hex(2))

    def new_id(self, kind) -> str:
        key = kind.value if isinstance(kind, EntityKind) else str(kind)
        prefix = ID_PREFIXES[key]
        return f"{prefix}{epoch_millis(self._clock)}-{self._suffix_source()}"
