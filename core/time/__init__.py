"""
EastGate Core Time — Public API
=================================
Explicit clock protocol.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    epoch_millis,
    iso_timestamp,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "epoch_millis",
    "iso_timestamp",
]
