"""
EastGate Mutations — Stay Credit & Loyalty
============================================
A completed stay earns one point per 10 currency units spent.
Tiers are recomputed from the running point total.
"""

from __future__ import annotations

from typing import Any

from core.store.models import Guest, LoyaltyTier

POINTS_PER_CURRENCY_UNIT = 10

TIER_THRESHOLDS = (
    (15000, LoyaltyTier.PLATINUM),
    (5000, LoyaltyTier.GOLD),
    (1000, LoyaltyTier.SILVER),
)


def tier_for_points(points: int) -> LoyaltyTier:
    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            return tier
    return LoyaltyTier.NONE


def stay_credit(guest: Guest, amount: float, visit_date: str) -> dict[str, Any]:
    """Patch for `guest` after a completed stay worth `amount`."""
    points = guest.loyalty_points + int(amount) // POINTS_PER_CURRENCY_UNIT
    return {
        "total_stays": guest.total_stays + 1,
        "total_spent": guest.total_spent + amount,
        "loyalty_points": points,
        "loyalty_tier": tier_for_points(points),
        "last_visit": visit_date,
    }
