"""
EastGate Identity — Identity & Credential Manager
===================================================
Three account namespaces, one case-insensitive email uniqueness rule.

    seeded       operator-provisioned, never rotates, immutable here
    provisioned  created by elevated staff, rotation_required=True
                 → one rotate_credentials() → active
    guest        self-registered, never rotates

Identities live beside the entity store and share its lock, so
registering a guest (identity + Guest record + activity entry) is
one critical section. Every operation returns an Outcome.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from core.commands.outcomes import Outcome
from core.commands.rejection import ReasonCode, not_found, reject, validation_error
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, Role, is_elevated, parse_role
from core.identity.credentials import (
    CredentialHasher,
    credential_problem,
    email_problem,
    normalize_email,
)
from core.identity.models import AUTHENTICATION_ORDER, Identity, IdentityView, Namespace
from core.mutations.facade import MutationFacade
from core.store.entity_store import EntityStore
from core.store.models import EntityKind

logger = logging.getLogger("eastgate.identity")


class IdentityManager:
    def __init__(
        self,
        store: EntityStore,
        facade: MutationFacade,
        hasher: Optional[CredentialHasher] = None,
    ) -> None:
        self._store = store
        self._facade = facade
        self._hasher = hasher or CredentialHasher()
        self._namespaces: dict[Namespace, dict[str, Identity]] = {
            namespace: {} for namespace in Namespace
        }

    # ══════════════════════════════════════════════════════════
    # LOOKUPS (caller holds the store lock)
    # ══════════════════════════════════════════════════════════

    def _find_by_email(self, email: str) -> Optional[Identity]:
        for namespace in AUTHENTICATION_ORDER:
            for identity in self._namespaces[namespace].values():
                if identity.email == email:
                    return identity
        return None

    def _find_by_id(self, identity_id: str) -> Optional[Identity]:
        for namespace in AUTHENTICATION_ORDER:
            identity = self._namespaces[namespace].get(identity_id)
            if identity is not None:
                return identity
        return None

    def _store_identity(self, identity: Identity) -> None:
        owner = self._find_by_email(identity.email)
        if owner is not None and owner.id != identity.id:
            raise ValueError(f"email '{identity.email}' is already registered.")
        other = self._find_by_id(identity.id)
        if other is not None and other.namespace != identity.namespace:
            raise ValueError(f"identity '{identity.id}' exists in another namespace.")
        self._namespaces[identity.namespace][identity.id] = identity

    @staticmethod
    def _input_problem(
        name: Optional[str],
        email: str,
        credential: str,
        policy: str,
        name_required: bool = False,
    ):
        if name_required and (not isinstance(name, str) or not name.strip()):
            return validation_error("name is required.", policy, field="name")
        problem = email_problem(email)
        if problem is not None:
            return validation_error(problem, policy, field="email")
        problem = credential_problem(credential)
        if problem is not None:
            return validation_error(problem, policy, field="credential")
        return None

    # ══════════════════════════════════════════════════════════
    # SEEDING & RESTORE
    # ══════════════════════════════════════════════════════════

    def seed_identities(self, accounts: Iterable[dict[str, Any]]) -> int:
        """
        Load seeded accounts: dicts with id, email, password, role,
        branch_id, name. Passwords are hashed here.
        """
        count = 0
        with self._store.write_locked():
            for account in accounts:
                identity = Identity(
                    id=account["id"],
                    email=normalize_email(account["email"]),
                    role=parse_role(account["role"]),
                    branch_id=account["branch_id"],
                    name=account.get("name", ""),
                    credential_hash=self._hasher.hash(account["password"]),
                    namespace=Namespace.SEEDED,
                )
                self._store_identity(identity)
                count += 1
        logger.info("Seeded %d identity account(s).", count)
        return count

    def restore(self, identities: Iterable[Identity]) -> None:
        """Replace the directory from persisted identities."""
        with self._store.write_locked():
            self._namespaces = {namespace: {} for namespace in Namespace}
            for identity in identities:
                self._store_identity(identity)

    def export(self) -> tuple[Identity, ...]:
        with self._store.read_locked():
            return tuple(
                identity
                for namespace in Namespace
                for identity in self._namespaces[namespace].values()
            )

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get(self, identity_id: str) -> Optional[IdentityView]:
        with self._store.read_locked():
            identity = self._find_by_id(identity_id)
        return IdentityView.of(identity) if identity is not None else None

    def list_provisioned(self) -> tuple[IdentityView, ...]:
        with self._store.read_locked():
            return tuple(
                IdentityView.of(identity)
                for identity in self._namespaces[Namespace.PROVISIONED].values()
            )

    def all_emails(self) -> frozenset[str]:
        with self._store.read_locked():
            return frozenset(
                identity.email
                for namespace in Namespace
                for identity in self._namespaces[namespace].values()
            )

    # ══════════════════════════════════════════════════════════
    # AUTHENTICATE
    # ══════════════════════════════════════════════════════════

    def authenticate(self, email: str, credential: str, branch_filter: str) -> Outcome:
        """
        Match email + credential + branch, checking namespaces in
        order provisioned → seeded → guest.

        Unknown email, wrong credential and wrong branch all produce
        the same INVALID_CREDENTIALS rejection.
        """
        email = normalize_email(email)
        with self._store.read_locked():
            candidate = self._find_by_email(email)

        if (
            candidate is not None
            and candidate.branch_id in (branch_filter, BRANCH_WILDCARD)
            and self._hasher.verify(credential, candidate.credential_hash)
        ):
            logger.info("Authenticated %s (%s).", candidate.id, candidate.namespace.value)
            return Outcome.accepted(IdentityView.of(candidate))

        logger.warning("Authentication rejected for %s at branch %s.", email, branch_filter)
        return Outcome.rejected(
            reject(
                ReasonCode.INVALID_CREDENTIALS,
                "Invalid email, password or branch.",
                "authenticate",
            )
        )

    # ══════════════════════════════════════════════════════════
    # GUEST SELF-REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register_guest(
        self,
        name: str,
        email: str,
        credential: str,
        phone: str = "",
        nationality: str = "",
    ) -> Outcome:
        policy = "register_guest"
        email = normalize_email(email)
        problem = self._input_problem(name, email, credential, policy, name_required=True)
        if problem is not None:
            return Outcome.rejected(problem)
        credential_hash = self._hasher.hash(credential)

        with self._store.write_locked():
            owner = self._find_by_email(email)
            if owner is not None and owner.namespace != Namespace.GUEST:
                return Outcome.rejected(
                    reject(
                        ReasonCode.EMAIL_RESERVED,
                        "This email belongs to a staff account.",
                        policy,
                        email=email,
                    )
                )
            if owner is not None:
                return Outcome.rejected(
                    reject(
                        ReasonCode.EMAIL_TAKEN,
                        "This email is already registered.",
                        policy,
                        email=email,
                    )
                )

            guest_id = self._store.new_id(EntityKind.GUEST)
            self_actor = ActorContext(
                actor_id=guest_id,
                role=Role.GUEST,
                branch_id=BRANCH_WILDCARD,
                actor_name=name.strip(),
            )
            record = self._facade.register_guest_record(
                self_actor,
                {
                    "name": name.strip(),
                    "email": email,
                    "phone": phone,
                    "nationality": nationality,
                },
                guest_id=guest_id,
            )
            if record.is_rejected:
                return record

            identity = Identity(
                id=guest_id,
                email=email,
                role=Role.GUEST,
                branch_id=BRANCH_WILDCARD,
                name=name.strip(),
                credential_hash=credential_hash,
                namespace=Namespace.GUEST,
            )
            self._store_identity(identity)

        logger.info("Guest %s registered.", guest_id)
        return Outcome.accepted(IdentityView.of(identity))

    # ══════════════════════════════════════════════════════════
    # STAFF PROVISIONING
    # ══════════════════════════════════════════════════════════

    def provision_staff(
        self,
        caller: ActorContext,
        name: str,
        email: str,
        credential: str,
        role: Any,
        branch_id: str,
        phone: str = "",
        department: str = "",
    ) -> Outcome:
        """
        Create a provisioned identity (rotation required) and its
        StaffMember HR record under the same id.
        """
        policy = "provision_staff"
        if not caller.is_elevated:
            return Outcome.rejected(
                reject(ReasonCode.PERMISSION_DENIED, "Access denied: elevated roles only.", policy)
            )
        email = normalize_email(email)
        problem = self._input_problem(name, email, credential, policy, name_required=True)
        if problem is not None:
            return Outcome.rejected(problem)
        try:
            role = parse_role(role)
        except ValueError as exc:
            return Outcome.rejected(validation_error(str(exc), policy, field="role"))
        if role == Role.GUEST:
            return Outcome.rejected(
                validation_error("Staff cannot be provisioned as guests.", policy, field="role")
            )
        credential_hash = self._hasher.hash(credential)

        with self._store.write_locked():
            if branch_id == BRANCH_WILDCARD:
                if not is_elevated(role):
                    return Outcome.rejected(not_found("branch", branch_id, policy))
            elif branch_id not in self._store.branch_ids():
                return Outcome.rejected(not_found("branch", str(branch_id), policy))

            if self._find_by_email(email) is not None:
                return Outcome.rejected(
                    reject(
                        ReasonCode.EMAIL_TAKEN,
                        "This email is already registered.",
                        policy,
                        email=email,
                    )
                )

            staff_id = self._store.new_id(EntityKind.STAFF)
            member = self._facade.add_staff_member(
                caller,
                {
                    "name": name.strip(),
                    "email": email,
                    "role": role,
                    "branch_id": branch_id,
                    "phone": phone,
                    "department": department,
                },
                staff_id=staff_id,
            )
            if member.is_rejected:
                return member

            identity = Identity(
                id=staff_id,
                email=email,
                role=role,
                branch_id=branch_id,
                name=name.strip(),
                credential_hash=credential_hash,
                namespace=Namespace.PROVISIONED,
                rotation_required=True,
            )
            self._store_identity(identity)

        logger.info("Provisioned %s as %s at %s by %s.", staff_id, role.value, branch_id, caller.actor_id)
        return Outcome.accepted(IdentityView.of(identity))

    # ══════════════════════════════════════════════════════════
    # CREDENTIAL ROTATION
    # ══════════════════════════════════════════════════════════

    def rotate_credentials(self, identity_id: str, new_email: str, new_credential: str) -> Outcome:
        """
        Replace email + credential of a provisioned identity and clear
        its rotation flag. The only path that clears the flag.
        """
        policy = "rotate_credentials"
        new_email = normalize_email(new_email)
        problem = self._input_problem(None, new_email, new_credential, policy)
        if problem is not None:
            return Outcome.rejected(problem)
        credential_hash = self._hasher.hash(new_credential)

        with self._store.write_locked():
            identity = self._namespaces[Namespace.PROVISIONED].get(identity_id)
            if identity is None:
                return Outcome.rejected(not_found("identity", identity_id, policy))

            owner = self._find_by_email(new_email)
            if owner is not None and owner.id != identity_id:
                return Outcome.rejected(
                    reject(
                        ReasonCode.EMAIL_TAKEN,
                        "This email is already registered.",
                        policy,
                        email=new_email,
                    )
                )

            view = IdentityView.of(identity)
            if new_email != identity.email and self._store.get(EntityKind.STAFF, identity_id):
                synced = self._facade.update_staff_member(
                    view.to_actor(), identity_id, {"email": new_email}
                )
                if synced.is_rejected:
                    return synced

            rotated = Identity(
                id=identity.id,
                email=new_email,
                role=identity.role,
                branch_id=identity.branch_id,
                name=identity.name,
                credential_hash=credential_hash,
                namespace=Namespace.PROVISIONED,
                rotation_required=False,
            )
            self._namespaces[Namespace.PROVISIONED][identity_id] = rotated
            self._facade.log_access_change(
                view.to_actor(),
                identity_id,
                identity.branch_id,
                f"Credentials rotated for {identity.name or identity_id}",
            )

        logger.info("Credentials rotated for %s.", identity_id)
        return Outcome.accepted(IdentityView.of(rotated))

    # ══════════════════════════════════════════════════════════
    # REMOVAL
    # ══════════════════════════════════════════════════════════

    def remove_staff(self, caller: ActorContext, identity_id: str) -> Outcome:
        """
        Delete a provisioned identity. The StaffMember HR record stays.
        """
        policy = "remove_staff"
        if identity_id == caller.actor_id:
            return Outcome.rejected(
                reject(ReasonCode.SELF_REMOVAL, "Callers cannot remove themselves.", policy)
            )

        with self._store.write_locked():
            identity = self._find_by_id(identity_id)
            if identity is None:
                return Outcome.rejected(not_found("identity", identity_id, policy))
            if identity.namespace != Namespace.PROVISIONED:
                return Outcome.rejected(
                    reject(
                        ReasonCode.NOT_REMOVABLE,
                        f"{identity.namespace.value} accounts cannot be removed.",
                        policy,
                        namespace=identity.namespace.value,
                    )
                )
            del self._namespaces[Namespace.PROVISIONED][identity_id]
            self._facade.log_access_change(
                caller,
                identity_id,
                identity.branch_id,
                f"Access removed for {identity.name or identity_id}",
            )

        logger.info("Identity %s removed by %s.", identity_id, caller.actor_id)
        return Outcome.accepted(IdentityView.of(identity))
