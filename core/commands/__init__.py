"""
EastGate Command Layer — Result Model
========================================
Every core operation produces exactly one Outcome.
REJECTED outcomes are first-class citizens, never exceptions.
"""

from core.commands.outcomes import (
    Outcome,
    OutcomeStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
    not_found,
    reject,
    validation_error,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "Outcome",
    "OutcomeStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    "reject",
    "not_found",
    "validation_error",
]
