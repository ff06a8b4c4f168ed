"""
Tests — Seed Loading & Startup Checks
=======================================
The system refuses to start on inconsistent seed data.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from adapters.django_api.dev_seed import (
    ACCOUNTS,
    BRANCHES,
    DEV_MAIN_BRANCH_ID,
    dev_seed_bundle,
)
from core.bootstrap.errors import SystemBootstrapError
from core.bootstrap.seed import SeedBundle, load_seed
from core.identity.credentials import CredentialHasher
from core.identity.service import IdentityManager
from core.mutations.facade import MutationFacade
from core.store.entity_store import EntityStore
from core.store.models import EntityKind
from core.time.clock import FixedClock


T0 = datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc)

ROOM = {
    "id": "rm-x",
    "branch_id": "br-404",
    "number": "1",
    "floor": 1,
    "room_type": "standard",
    "status": "available",
    "price": 100,
}


def _targets():
    store = EntityStore(FixedClock(T0))
    facade = MutationFacade(store)
    return store, IdentityManager(store, facade, CredentialHasher(rounds=4))


class TestDevSeed:
    def test_loads_cleanly(self):
        store, identities = _targets()
        load_seed(store, identities, dev_seed_bundle())
        assert DEV_MAIN_BRANCH_ID in store.branch_ids()
        assert store.count(EntityKind.BRANCH) == len(BRANCHES)
        assert len(identities.export()) == len(ACCOUNTS)
        assert len(store.activity) == 0

    def test_seeded_accounts_never_rotate(self):
        store, identities = _targets()
        load_seed(store, identities, dev_seed_bundle())
        assert all(not identity.rotation_required for identity in identities.export())


class TestStartupChecks:
    def test_no_branches(self):
        store, identities = _targets()
        with pytest.raises(SystemBootstrapError, match="BRANCHES_PRESENT"):
            load_seed(store, identities, SeedBundle())

    def test_unknown_branch_reference(self):
        store, identities = _targets()
        bundle = SeedBundle(
            collections={EntityKind.BRANCH: BRANCHES, EntityKind.ROOM: (ROOM,)},
        )
        with pytest.raises(SystemBootstrapError, match="BRANCH_REFERENCES"):
            load_seed(store, identities, bundle)

    def test_malformed_record_names_collection(self):
        store, identities = _targets()
        bundle = SeedBundle(
            collections={
                EntityKind.BRANCH: BRANCHES,
                EntityKind.ROOM: ({**ROOM, "branch_id": DEV_MAIN_BRANCH_ID, "price": -1},),
            },
        )
        with pytest.raises(SystemBootstrapError, match="room"):
            load_seed(store, identities, bundle)

    def test_duplicate_account_email(self):
        store, identities = _targets()
        twin = {**ACCOUNTS[2], "id": "s-twin", "email": ACCOUNTS[2]["email"].upper()}
        bundle = SeedBundle(
            collections={EntityKind.BRANCH: BRANCHES},
            accounts=(ACCOUNTS[2], twin),
        )
        with pytest.raises(SystemBootstrapError, match="SEED_ACCOUNTS"):
            load_seed(store, identities, bundle)

    def test_scoped_account_cannot_span_branches(self):
        store, identities = _targets()
        bundle = SeedBundle(
            collections={EntityKind.BRANCH: BRANCHES},
            accounts=({**ACCOUNTS[3], "branch_id": "all"},),
        )
        with pytest.raises(SystemBootstrapError, match="IDENTITY_BRANCH"):
            load_seed(store, identities, bundle)

    def test_account_at_unknown_branch(self):
        store, identities = _targets()
        bundle = SeedBundle(
            collections={EntityKind.BRANCH: BRANCHES},
            accounts=({**ACCOUNTS[3], "branch_id": "br-404"},),
        )
        with pytest.raises(SystemBootstrapError, match="IDENTITY_BRANCH"):
            load_seed(store, identities, bundle)
