"""
EastGate Django Adapter Wiring
================================
Constructs HttpApiDependencies for local/staging live runs.

This module is adapter-only glue and the single composition root:
- reads EASTGATE_* settings and injects them into the core
- loads the JSON state document when EASTGATE_STATE_PATH exists,
  otherwise the development seed
- saves the state document after every accepted write when a path
  is configured
"""

from __future__ import annotations

import logging
import os
import threading

from django.conf import settings

from adapters.django_api.dev_seed import dev_seed_bundle
from core.audit.log import DEFAULT_ACTIVITY_LOG_CAPACITY
from core.bootstrap.seed import load_seed
from core.http_api.dependencies import HttpApiDependencies
from core.identity.credentials import DEFAULT_BCRYPT_ROUNDS, CredentialHasher
from core.identity.service import IdentityManager
from core.mutations.facade import MutationFacade
from core.persistence.state_document import read_state_file, write_state_file
from core.security.login_throttle import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_WINDOW_SECONDS,
    LoginThrottle,
)
from core.store.entity_store import EntityStore
from core.time.clock import SystemClock
from projections.scoped import ScopedProjection

logger = logging.getLogger("eastgate.http")

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _int_setting(name: str, default: int) -> int:
    return int(getattr(settings, name, default))


def _create_dependencies() -> HttpApiDependencies:
    clock = SystemClock()
    store = EntityStore(
        clock,
        activity_capacity=_int_setting(
            "EASTGATE_ACTIVITY_LOG_CAPACITY", DEFAULT_ACTIVITY_LOG_CAPACITY
        ),
    )
    facade = MutationFacade(store)
    identities = IdentityManager(
        store,
        facade,
        CredentialHasher(
            rounds=_int_setting("EASTGATE_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)
        ),
    )

    state_path = getattr(settings, "EASTGATE_STATE_PATH", None) or None
    if state_path and os.path.exists(state_path):
        read_state_file(state_path, store, identities)
    else:
        load_seed(store, identities, dev_seed_bundle())
        logger.info("Development seed loaded.")

    after_write = None
    if state_path:
        def after_write() -> None:
            write_state_file(state_path, store, identities)

    return HttpApiDependencies(
        store=store,
        projection=ScopedProjection(store),
        facade=facade,
        identities=identities,
        login_throttle=LoginThrottle(
            clock,
            max_attempts=_int_setting("EASTGATE_LOGIN_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            window_seconds=_int_setting(
                "EASTGATE_LOGIN_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS
            ),
        ),
        after_write=after_write,
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the singleton so the next request rebuilds from settings."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
