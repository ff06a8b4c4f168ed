"""
EastGate Core Time — Explicit Clock Protocol
==============================================
No datetime.now() inside store, audit, identity or mutation logic.
Every component that stamps records receives a Clock at construction.

Record timestamps (created_at, activity entries) and generated ids
(millisecond component) are derived from the injected clock, so tests
that use FixedClock are fully deterministic.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp until advanced.

    Usage:
        clock = FixedClock(datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc))
        clock.advance(60)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def epoch_millis(clock: Clock) -> int:
    """Milliseconds since the Unix epoch, used in generated ids."""
    return int(clock.now_utc().timestamp() * 1000)


def iso_timestamp(clock: Clock) -> str:
    return clock.now_utc().isoformat()
