"""
EastGate Bootstrap — Seed Loader
==================================
One-shot population of an empty store + identity directory, followed
by the startup invariant checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from core.bootstrap.errors import SystemBootstrapError
from core.bootstrap.invariants import run_startup_checks
from core.store.models import EntityKind

# Branches first: everything else references them.
SEED_ORDER = (
    EntityKind.BRANCH,
    EntityKind.ROOM,
    EntityKind.GUEST,
    EntityKind.STAFF,
    EntityKind.BOOKING,
    EntityKind.MENU_ITEM,
    EntityKind.TABLE,
    EntityKind.ORDER,
    EntityKind.EVENT,
    EntityKind.SERVICE_REQUEST,
    EntityKind.NOTIFICATION,
    EntityKind.CHAT_MESSAGE,
)


@dataclass(frozen=True)
class SeedBundle:
    """
    collections: kind → records (model instances or raw field dicts)
    accounts:    seeded identities as dicts with id, email, password,
                 role, branch_id, name
    """

    collections: Mapping[EntityKind, tuple] = field(default_factory=dict)
    accounts: tuple[dict[str, Any], ...] = field(default_factory=tuple)


def load_seed(store, identities, bundle: SeedBundle) -> None:
    """
    Populate `store` and `identities` from `bundle`, then verify.

    Malformed records surface as SystemBootstrapError naming the
    offending collection.
    """
    for kind in SEED_ORDER:
        records = bundle.collections.get(kind, ())
        if not records:
            continue
        try:
            store.seed(kind, records)
        except (ValueError, TypeError) as exc:
            raise SystemBootstrapError(
                invariant="SEED_RECORDS",
                detail=f"{kind.value}: {exc}",
            ) from exc

    try:
        identities.seed_identities(bundle.accounts)
    except (ValueError, KeyError) as exc:
        raise SystemBootstrapError(
            invariant="SEED_ACCOUNTS",
            detail=str(exc),
        ) from exc

    run_startup_checks(store, identities)
