"""
Tests — Identity & Credential Manager
=======================================
Authentication order and branch matching, email uniqueness across
namespaces, guest self-registration, staff provisioning, the one-shot
credential rotation, and removal.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from adapters.django_api.dev_seed import dev_seed_bundle
from core.audit.models import ActivityType
from core.bootstrap.seed import load_seed
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, Role
from core.identity.credentials import CredentialHasher
from core.identity.models import Identity, Namespace
from core.identity.service import IdentityManager
from core.mutations.facade import MutationFacade
from core.store.entity_store import EntityStore
from core.store.models import EntityKind
from core.time.clock import FixedClock


T0 = datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc)

ADMIN = ActorContext("u-admin", Role.SUPER_ADMIN, BRANCH_WILDCARD, "EastGate Admin")
KIGALI_MANAGER = ActorContext("s-001", Role.BRANCH_MANAGER, "br-001", "Jean-Pierre")

NEW_HIRE = {
    "name": "Eric Nshuti",
    "email": "eric@eastgate.rw",
    "credential": "welcome1",
    "role": "receptionist",
    "branch_id": "br-002",
}


# ── Helpers ──────────────────────────────────────────────────

def _system():
    store = EntityStore(FixedClock(T0))
    facade = MutationFacade(store)
    identities = IdentityManager(store, facade, CredentialHasher(rounds=4))
    load_seed(store, identities, dev_seed_bundle())
    return store, identities


def _provision(identities, **overrides):
    return identities.provision_staff(ADMIN, **{**NEW_HIRE, **overrides})


# ══════════════════════════════════════════════════════════════
# AUTHENTICATE
# ══════════════════════════════════════════════════════════════


class TestAuthenticate:
    def test_branch_staff_at_own_branch(self):
        _, identities = _system()
        outcome = identities.authenticate("grace@eastgate.rw", "grace123", "br-001")
        assert outcome.is_accepted
        assert outcome.value.id == "s-002"
        assert outcome.value.role is Role.RECEPTIONIST
        assert outcome.value.namespace is Namespace.SEEDED

    def test_email_is_case_insensitive(self):
        _, identities = _system()
        outcome = identities.authenticate("  Grace@EastGate.RW ", "grace123", "br-001")
        assert outcome.is_accepted

    def test_elevated_matches_any_branch(self):
        _, identities = _system()
        for branch in ("br-001", "br-002", BRANCH_WILDCARD):
            assert identities.authenticate("admin@eastgate.rw", "admin123", branch).is_accepted

    def test_failures_are_indistinguishable(self):
        _, identities = _system()
        wrong_branch = identities.authenticate("grace@eastgate.rw", "grace123", "br-002")
        wrong_credential = identities.authenticate("grace@eastgate.rw", "nope-nope", "br-001")
        unknown = identities.authenticate("nobody@eastgate.rw", "grace123", "br-001")
        for outcome in (wrong_branch, wrong_credential, unknown):
            assert outcome.is_rejected
            assert outcome.code == "INVALID_CREDENTIALS"
        assert wrong_branch.reason == wrong_credential.reason == unknown.reason

    def test_view_never_carries_hash(self):
        _, identities = _system()
        view = identities.authenticate("admin@eastgate.rw", "admin123", "all").value
        assert "credential_hash" not in view.to_dict()

    def test_provisioned_checked_before_seeded(self):
        store, identities = _system()
        provisioned = Identity(
            id="s-900",
            email="twin@eastgate.rw",
            role=Role.WAITER,
            branch_id="br-001",
            name="Twin",
            credential_hash=CredentialHasher(rounds=4).hash("twin-pass"),
            namespace=Namespace.PROVISIONED,
            rotation_required=True,
        )
        identities.restore([*identities.export(), provisioned])
        outcome = identities.authenticate("twin@eastgate.rw", "twin-pass", "br-001")
        assert outcome.value.namespace is Namespace.PROVISIONED
        assert outcome.value.rotation_required is True


# ══════════════════════════════════════════════════════════════
# GUEST SELF-REGISTRATION
# ══════════════════════════════════════════════════════════════


class TestRegisterGuest:
    def test_creates_identity_and_guest_record(self):
        store, identities = _system()
        before = len(store.activity)
        outcome = identities.register_guest("Nadia Keza", "Nadia@Mail.com", "secret1", phone="+250")
        assert outcome.is_accepted
        view = outcome.value
        assert view.email == "nadia@mail.com"
        assert view.role is Role.GUEST
        assert view.branch_id == BRANCH_WILDCARD
        assert view.rotation_required is False

        guest = store.get(EntityKind.GUEST, view.id)
        assert guest.name == "Nadia Keza"
        assert guest.branch_id is None
        assert len(store.activity) == before + 1
        assert store.activity.latest().activity_type is ActivityType.GUEST_REGISTERED

    def test_registered_guest_can_log_in_anywhere(self):
        _, identities = _system()
        identities.register_guest("Nadia Keza", "nadia@mail.com", "secret1")
        assert identities.authenticate("nadia@mail.com", "secret1", "br-002").is_accepted

    def test_staff_email_is_reserved(self):
        store, identities = _system()
        before = store.count(EntityKind.GUEST)
        outcome = identities.register_guest("Impostor", "GRACE@eastgate.rw", "secret1")
        assert outcome.code == "EMAIL_RESERVED"
        assert store.count(EntityKind.GUEST) == before

    def test_duplicate_guest_email_taken(self):
        _, identities = _system()
        identities.register_guest("Nadia Keza", "nadia@mail.com", "secret1")
        outcome = identities.register_guest("Nadia K", "NADIA@mail.com", "secret2")
        assert outcome.code == "EMAIL_TAKEN"

    @pytest.mark.parametrize(
        "name, email, credential",
        [
            ("", "nadia@mail.com", "secret1"),
            (None, "nadia@mail.com", "secret1"),
            ("   ", "nadia@mail.com", "secret1"),
            ("Nadia", None, "secret1"),
            ("Nadia", "not-an-email", "secret1"),
            ("Nadia", "nadia@mail.com", "short"),
        ],
    )
    def test_input_validation(self, name, email, credential):
        store, identities = _system()
        before = len(store.activity)
        outcome = identities.register_guest(name, email, credential)
        assert outcome.code == "VALIDATION_ERROR"
        assert len(store.activity) == before


# ══════════════════════════════════════════════════════════════
# PROVISIONING
# ══════════════════════════════════════════════════════════════


class TestProvisionStaff:
    def test_creates_identity_and_hr_record(self):
        store, identities = _system()
        outcome = _provision(identities)
        assert outcome.is_accepted
        view = outcome.value
        assert view.namespace is Namespace.PROVISIONED
        assert view.rotation_required is True

        member = store.get(EntityKind.STAFF, view.id)
        assert member.branch_id == "br-002"
        assert member.role is Role.RECEPTIONIST
        assert member.email == "eric@eastgate.rw"
        assert [v.id for v in identities.list_provisioned()] == [view.id]

    @pytest.mark.parametrize("name", [None, "", 42])
    def test_name_required(self, name):
        store, identities = _system()
        before = store.count(EntityKind.STAFF)
        outcome = _provision(identities, name=name)
        assert outcome.code == "VALIDATION_ERROR"
        assert outcome.reason.message_params["field"] == "name"
        assert store.count(EntityKind.STAFF) == before
        assert identities.list_provisioned() == ()

    def test_fresh_staff_sign_in_at_their_branch_only(self):
        _, identities = _system()
        _provision(identities, email="a@x.com", branch_id="br-001")
        outcome = identities.authenticate("a@x.com", "welcome1", "br-001")
        assert outcome.is_accepted
        assert outcome.value.rotation_required is True
        assert identities.authenticate("a@x.com", "welcome1", "br-002").code == "INVALID_CREDENTIALS"

    def test_emails_stay_unique(self):
        _, identities = _system()
        _provision(identities)
        identities.register_guest("Nadia Keza", "nadia@mail.com", "secret1")
        _provision(identities, email="NADIA@mail.com")
        emails = [identity.email for identity in identities.export()]
        assert len(emails) == len(set(emails)) == len(identities.all_emails())

    def test_elevated_only(self):
        _, identities = _system()
        outcome = identities.provision_staff(KIGALI_MANAGER, **NEW_HIRE)
        assert outcome.code == "PERMISSION_DENIED"

    def test_email_taken_across_namespaces(self):
        _, identities = _system()
        assert _provision(identities, email="Diane@EastGate.rw").code == "EMAIL_TAKEN"

    def test_unknown_branch(self):
        _, identities = _system()
        assert _provision(identities, branch_id="br-999").code == "NOT_FOUND"

    def test_wildcard_only_for_elevated_roles(self):
        _, identities = _system()
        assert _provision(identities, branch_id=BRANCH_WILDCARD).code == "NOT_FOUND"
        outcome = _provision(identities, role="super_manager", branch_id=BRANCH_WILDCARD)
        assert outcome.is_accepted

    def test_guest_role_refused(self):
        _, identities = _system()
        assert _provision(identities, role="guest").code == "VALIDATION_ERROR"

    def test_unknown_role_refused(self):
        _, identities = _system()
        assert _provision(identities, role="chef").code == "VALIDATION_ERROR"


# ══════════════════════════════════════════════════════════════
# ROTATION
# ══════════════════════════════════════════════════════════════


class TestRotateCredentials:
    def test_rotation_clears_flag_and_replaces_credential(self):
        store, identities = _system()
        staff_id = _provision(identities).value.id

        outcome = identities.rotate_credentials(staff_id, "eric.n@eastgate.rw", "my-own-pass")
        assert outcome.is_accepted
        assert outcome.value.rotation_required is False
        assert outcome.value.email == "eric.n@eastgate.rw"

        assert identities.authenticate("eric@eastgate.rw", "welcome1", "br-002").is_rejected
        assert identities.authenticate("eric.n@eastgate.rw", "my-own-pass", "br-002").is_accepted
        assert store.get(EntityKind.STAFF, staff_id).email == "eric.n@eastgate.rw"
        assert identities.get(staff_id).rotation_required is False
        assert identities.get(staff_id).rotation_required is False
        latest = store.activity.latest()
        assert latest.entity_type == "identity"
        assert latest.entity_id == staff_id

    def test_rotation_keeps_email(self):
        _, identities = _system()
        staff_id = _provision(identities).value.id
        outcome = identities.rotate_credentials(staff_id, "eric@eastgate.rw", "my-own-pass")
        assert outcome.is_accepted

    def test_seeded_identities_do_not_rotate(self):
        _, identities = _system()
        outcome = identities.rotate_credentials("s-002", "grace2@eastgate.rw", "another1")
        assert outcome.code == "NOT_FOUND"

    def test_new_email_must_be_free(self):
        _, identities = _system()
        staff_id = _provision(identities).value.id
        outcome = identities.rotate_credentials(staff_id, "jp@eastgate.rw", "my-own-pass")
        assert outcome.code == "EMAIL_TAKEN"
        assert identities.get(staff_id).rotation_required is True

    def test_weak_credential_refused(self):
        _, identities = _system()
        staff_id = _provision(identities).value.id
        outcome = identities.rotate_credentials(staff_id, "eric@eastgate.rw", "abc")
        assert outcome.code == "VALIDATION_ERROR"
        assert identities.get(staff_id).rotation_required is True


# ══════════════════════════════════════════════════════════════
# REMOVAL
# ══════════════════════════════════════════════════════════════


class TestRemoveStaff:
    def test_removes_identity_keeps_hr_record(self):
        store, identities = _system()
        staff_id = _provision(identities).value.id
        before = len(store.activity)

        outcome = identities.remove_staff(ADMIN, staff_id)
        assert outcome.is_accepted
        assert identities.get(staff_id) is None
        assert store.get(EntityKind.STAFF, staff_id) is not None
        assert identities.authenticate("eric@eastgate.rw", "welcome1", "br-002").is_rejected
        assert len(store.activity) == before + 1

    def test_self_removal_refused(self):
        _, identities = _system()
        assert identities.remove_staff(ADMIN, "u-admin").code == "SELF_REMOVAL"

    def test_seeded_not_removable(self):
        _, identities = _system()
        assert identities.remove_staff(ADMIN, "s-002").code == "NOT_REMOVABLE"

    def test_unknown_identity(self):
        _, identities = _system()
        assert identities.remove_staff(ADMIN, "s-missing").code == "NOT_FOUND"


class TestCredentialHasher:
    def test_rounds_bounds(self):
        with pytest.raises(ValueError):
            CredentialHasher(rounds=3)

    def test_hash_verifies(self):
        hasher = CredentialHasher(rounds=4)
        digest = hasher.hash("secret1")
        assert digest != "secret1"
        assert hasher.verify("secret1", digest)
        assert not hasher.verify("secret2", digest)
        assert not hasher.verify("", digest)
