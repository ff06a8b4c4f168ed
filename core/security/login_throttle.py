"""
EastGate Core Security — Login Throttling
===========================================
Sliding window limiter for authentication attempts.
At most N attempts per key (normalized email) inside the window;
a successful login clears the key.

Time is injected via the Clock protocol — no datetime.now() calls.
"""

from __future__ import annotations

import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Deque, Dict, Optional

from core.commands.rejection import ReasonCode, RejectionReason, reject
from core.time.clock import Clock

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_WINDOW_SECONDS = 60


# ══════════════════════════════════════════════════════════════
# THROTTLE RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ThrottleResult:
    allowed: bool
    remaining: int
    limit: int
    retry_after_seconds: float = 0.0


# ══════════════════════════════════════════════════════════════
# SLIDING WINDOW LIMITER
# ══════════════════════════════════════════════════════════════

class LoginThrottle:
    """
    Tracks attempt timestamps per key.

    Thread-safe: HTTP workers share one instance.
    """

    def __init__(
        self,
        clock: Clock,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1.")
        self._clock = clock
        self._limit = max_attempts
        self._window = timedelta(seconds=window_seconds)
        self._buckets: Dict[str, Deque[datetime]] = defaultdict(deque)
        self._lock = threading.Lock()

    @staticmethod
    def key_for(email: str) -> str:
        return (email or "").strip().lower()

    def check(self, email: str) -> ThrottleResult:
        """Record one attempt for `email` if it is within the limit."""
        now = self._clock.now_utc()
        key = self.key_for(email)
        with self._lock:
            bucket = self._buckets[key]

            # Evict timestamps outside the window
            cutoff = now - self._window
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self._limit:
                retry_after = (bucket[0] + self._window - now).total_seconds()
                return ThrottleResult(
                    allowed=False,
                    remaining=0,
                    limit=self._limit,
                    retry_after_seconds=max(0.0, retry_after),
                )

            bucket.append(now)
            return ThrottleResult(
                allowed=True,
                remaining=self._limit - len(bucket),
                limit=self._limit,
            )

    def reset(self, email: str) -> None:
        with self._lock:
            self._buckets.pop(self.key_for(email), None)


def throttle_rejection(result: ThrottleResult) -> Optional[RejectionReason]:
    """Convert a denied throttle result to a RejectionReason."""
    if result.allowed:
        return None
    return reject(
        ReasonCode.RATE_LIMITED,
        (
            f"Too many login attempts ({result.limit} per window). "
            f"Retry after {result.retry_after_seconds:.0f} seconds."
        ),
        "login_throttle",
        retry_after=int(result.retry_after_seconds + 0.999),
    )
