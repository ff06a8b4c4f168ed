"""
EastGate Core Security — Public API
=====================================
Branch isolation and login throttling.
"""

from core.security.branch_isolation import (
    can_touch_branch,
    effective_branch,
    resolve_target_branch,
    scope_records,
)
from core.security.login_throttle import (
    LoginThrottle,
    ThrottleResult,
    throttle_rejection,
)

__all__ = [
    # Branch isolation
    "can_touch_branch",
    "effective_branch",
    "resolve_target_branch",
    "scope_records",
    # Login throttling
    "LoginThrottle",
    "ThrottleResult",
    "throttle_rejection",
]
