"""
EastGate Core Security — Branch Isolation Enforcement
=======================================================
The single scoping rule every read and write goes through.

Doctrine:
- Elevated roles: filter "all" → every record; a branch id → that branch.
- Every other role: own branch only. The requested filter is ignored.
- Records without a branch are visible only in the elevated wildcard view.
- Error messages MUST NOT leak that a record exists in another branch.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from core.commands.rejection import ReasonCode, RejectionReason, reject
from core.context.actor_context import ActorContext
from core.context.scope import BRANCH_WILDCARD, Role
from core.store.models import branch_of as default_branch_of


# ══════════════════════════════════════════════════════════════
# READ SCOPE
# ══════════════════════════════════════════════════════════════

def effective_branch(caller: ActorContext, branch_filter: Optional[str]) -> Optional[str]:
    """
    Branch a read is restricted to, or None for the unrestricted view.
    """
    if caller.is_elevated:
        if branch_filter in (None, "", BRANCH_WILDCARD):
            return None
        return branch_filter
    return caller.branch_id


def scope_records(
    records: Iterable[Any],
    caller: ActorContext,
    branch_filter: Optional[str] = BRANCH_WILDCARD,
    branch_of: Callable[[Any], Optional[str]] = default_branch_of,
) -> tuple:
    """
    Filter `records` to what `caller` may see. Order is preserved.

    Never returns a record from a branch other than the caller's own
    unless the caller is elevated.
    """
    target = effective_branch(caller, branch_filter)
    if target is None:
        return tuple(records)
    return tuple(record for record in records if branch_of(record) == target)


# ══════════════════════════════════════════════════════════════
# WRITE SCOPE
# ══════════════════════════════════════════════════════════════

def can_touch_branch(caller: ActorContext, branch_id: Optional[str]) -> bool:
    """May `caller` modify a record owned by `branch_id`?"""
    if caller.is_elevated:
        return True
    return branch_id is not None and branch_id == caller.branch_id


def resolve_target_branch(
    caller: ActorContext,
    requested: Optional[str],
    known_branches: frozenset[str],
) -> tuple[Optional[str], Optional[RejectionReason]]:
    """
    Branch a new record will belong to.

    Scoped staff default to their own branch and may not name
    another. Elevated callers and guests must name a concrete, known
    branch.
    """
    if not caller.is_elevated and caller.role != Role.GUEST:
        if requested not in (None, "", caller.branch_id):
            return None, reject(
                ReasonCode.PERMISSION_DENIED,
                "Access denied: caller may only write to its own branch.",
                "resolve_target_branch",
            )
        requested = caller.branch_id

    if not requested or requested == BRANCH_WILDCARD:
        return None, reject(
            ReasonCode.VALIDATION_ERROR,
            "A concrete branch_id is required.",
            "resolve_target_branch",
            field="branch_id",
        )

    if requested not in known_branches:
        return None, reject(
            ReasonCode.NOT_FOUND,
            f"branch '{requested}' not found.",
            "resolve_target_branch",
            kind="branch",
            id=requested,
        )

    return requested, None
