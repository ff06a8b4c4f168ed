"""
EastGate HTTP API - Dependencies
================================
Injected services for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from core.identity.service import IdentityManager
from core.mutations.facade import MutationFacade
from core.security.login_throttle import LoginThrottle
from core.store.entity_store import EntityStore
from projections.scoped import ScopedProjection


@dataclass(frozen=True)
class HttpApiDependencies:
    store: EntityStore
    projection: ScopedProjection
    facade: MutationFacade
    identities: IdentityManager
    login_throttle: LoginThrottle
    # Called after every accepted write, e.g. to save the state document.
    after_write: Optional[Callable[[], None]] = None

    def notify_write(self) -> None:
        if self.after_write is not None:
            self.after_write()
