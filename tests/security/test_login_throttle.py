"""
Tests for LoginThrottle — sliding window per normalized email.
"""

from datetime import datetime, timezone

import pytest

from core.security.login_throttle import (
    DEFAULT_MAX_ATTEMPTS,
    LoginThrottle,
    throttle_rejection,
)
from core.time.clock import FixedClock


T0 = datetime(2026, 2, 14, 9, 0, tzinfo=timezone.utc)


class TestLoginThrottle:
    def test_allows_up_to_limit(self):
        throttle = LoginThrottle(FixedClock(T0))
        results = [throttle.check("grace@eastgate.rw") for _ in range(DEFAULT_MAX_ATTEMPTS)]
        assert all(r.allowed for r in results)
        assert results[-1].remaining == 0

    def test_blocks_over_limit(self):
        throttle = LoginThrottle(FixedClock(T0), max_attempts=2)
        throttle.check("grace@eastgate.rw")
        throttle.check("grace@eastgate.rw")
        result = throttle.check("grace@eastgate.rw")
        assert not result.allowed
        assert result.retry_after_seconds == 60

    def test_key_is_normalized(self):
        throttle = LoginThrottle(FixedClock(T0), max_attempts=1)
        throttle.check("grace@eastgate.rw")
        assert not throttle.check("  GRACE@EastGate.rw ").allowed

    def test_keys_are_independent(self):
        throttle = LoginThrottle(FixedClock(T0), max_attempts=1)
        throttle.check("grace@eastgate.rw")
        assert throttle.check("diane@eastgate.rw").allowed

    def test_window_slides(self):
        clock = FixedClock(T0)
        throttle = LoginThrottle(clock, max_attempts=1, window_seconds=60)
        throttle.check("grace@eastgate.rw")
        clock.advance(30)
        assert not throttle.check("grace@eastgate.rw").allowed
        clock.advance(30)
        assert throttle.check("grace@eastgate.rw").allowed

    def test_reset_clears_key(self):
        throttle = LoginThrottle(FixedClock(T0), max_attempts=1)
        throttle.check("grace@eastgate.rw")
        throttle.reset("Grace@eastgate.rw")
        assert throttle.check("grace@eastgate.rw").allowed

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            LoginThrottle(FixedClock(T0), max_attempts=0)


class TestThrottleRejection:
    def test_allowed_is_none(self):
        throttle = LoginThrottle(FixedClock(T0))
        assert throttle_rejection(throttle.check("a@b.rw")) is None

    def test_denied_is_rate_limited(self):
        throttle = LoginThrottle(FixedClock(T0), max_attempts=1)
        throttle.check("a@b.rw")
        reason = throttle_rejection(throttle.check("a@b.rw"))
        assert reason.code == "RATE_LIMITED"
        assert reason.message_params["retry_after"] == 60
