"""
EastGate Bootstrap — Invariant Checks
=======================================
Each function verifies one system law over freshly loaded state.
If any check fails → SystemBootstrapError is raised.

These checks do NOT:
- Auto-fix anything
- Drop offending records
- Silence failures

A hotel that boots with bookings pointing at missing branches is
worse than one that does not boot.
"""

import logging

from core.bootstrap.errors import SystemBootstrapError
from core.context.scope import BRANCH_WILDCARD, Role, is_elevated
from core.store.models import UNSCOPED_KINDS, EntityKind, branch_of

logger = logging.getLogger("eastgate.bootstrap")


# ══════════════════════════════════════════════════════════════
# CHECK 1: Branches Seeded
# ══════════════════════════════════════════════════════════════

def check_branches_present(store):
    if not store.branch_ids():
        raise SystemBootstrapError(
            invariant="BRANCHES_PRESENT",
            detail="No branches loaded. Every other record needs a branch.",
        )
    logger.info("✓ %d branch(es) loaded.", len(store.branch_ids()))


# ══════════════════════════════════════════════════════════════
# CHECK 2: Branch References Resolve
# ══════════════════════════════════════════════════════════════

def check_branch_references(store):
    """
    Every branch-owned record points at a known branch. Guests may be
    unbranched; elevated staff may carry the wildcard.
    """
    known = store.branch_ids()
    for kind in EntityKind:
        if kind == EntityKind.BRANCH or kind in UNSCOPED_KINDS:
            continue
        for record in store.list(kind):
            owner = branch_of(record)
            if owner is None and kind == EntityKind.GUEST:
                continue
            if owner == BRANCH_WILDCARD and kind == EntityKind.STAFF and is_elevated(record.role):
                continue
            if owner not in known:
                raise SystemBootstrapError(
                    invariant="BRANCH_REFERENCES",
                    detail=f"{kind.value} '{record.id}' references unknown branch '{owner}'.",
                )
    logger.info("✓ All branch references resolve.")


# ══════════════════════════════════════════════════════════════
# CHECK 3: Identity Directory Consistent
# ══════════════════════════════════════════════════════════════

def check_identity_directory(store, identities):
    """
    Emails unique (case-insensitive) across namespaces; identity
    branches known; wildcard only for elevated roles and guests.
    """
    known = store.branch_ids()
    seen = {}
    for identity in identities.export():
        email = identity.email.lower()
        if email in seen:
            raise SystemBootstrapError(
                invariant="EMAIL_UNIQUENESS",
                detail=f"'{email}' is used by both '{seen[email]}' and '{identity.id}'.",
            )
        seen[email] = identity.id

        if identity.branch_id == BRANCH_WILDCARD:
            if not (is_elevated(identity.role) or identity.role == Role.GUEST):
                raise SystemBootstrapError(
                    invariant="IDENTITY_BRANCH",
                    detail=f"identity '{identity.id}' ({identity.role.value}) cannot span all branches.",
                )
        elif identity.branch_id not in known:
            raise SystemBootstrapError(
                invariant="IDENTITY_BRANCH",
                detail=f"identity '{identity.id}' references unknown branch '{identity.branch_id}'.",
            )
    logger.info("✓ %d identit(ies) consistent.", len(seen))


# ══════════════════════════════════════════════════════════════
# CHECK 4: Activity Log Bound
# ══════════════════════════════════════════════════════════════

def check_activity_log_bound(store):
    size = len(store.activity)
    if size > store.activity.capacity:
        raise SystemBootstrapError(
            invariant="ACTIVITY_LOG_BOUND",
            detail=f"log holds {size} entries, capacity is {store.activity.capacity}.",
        )
    logger.info("✓ Activity log within bound (%d/%d).", size, store.activity.capacity)


def run_startup_checks(store, identities):
    """Run every check in order. The first failure aborts startup."""
    check_branches_present(store)
    check_branch_references(store)
    check_identity_directory(store, identities)
    check_activity_log_bound(store)
    logger.info("EastGate startup checks passed.")
