"""
EastGate Bootstrap — System Errors
====================================
Programming-invariant violations. These are never business outcomes:
if one is raised, the operation aborts before any state changes and
the error propagates to the top.
"""


class InvariantViolation(Exception):
    """
    Raised when an internal invariant is observed broken at runtime.

    - No fallback
    - No warning-only mode
    - Message names the invariant
    """

    def __init__(self, invariant: str, detail: str):
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"EASTGATE INVARIANT VIOLATION — {invariant}: {detail}")


class SystemBootstrapError(InvariantViolation):
    """
    Raised when seed data or a persisted state document violates a
    startup invariant. The system must refuse to start.
    """

    def __init__(self, invariant: str, detail: str):
        Exception.__init__(self, f"EASTGATE BOOTSTRAP FAILURE — {invariant}: {detail}")
        self.invariant = invariant
        self.detail = detail
