"""
EastGate Bootstrap — System Self-Defense
==========================================
Ensures EastGate never starts from inconsistent seed data or a
corrupted state document.

Only the error types are re-exported here; import seed/invariant
helpers from their modules directly.
"""

from core.bootstrap.errors import InvariantViolation, SystemBootstrapError

__all__ = [
    "InvariantViolation",
    "SystemBootstrapError",
]
