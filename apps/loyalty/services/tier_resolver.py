"""
Tier resolution from lifetime points.
"""
from apps.common.constants import TIER_ORDER, DEFAULT_TIER
from apps.common.exceptions import InvalidArgument


def tier_rank(tier) -> int:
    """Rank of a tier, bronze being 0"""
    try:
        return TIER_ORDER.index(tier)
    except ValueError:
        raise InvalidArgument(f"Unknown tier: {tier}")


def resolve_tier(lifetime_points, thresholds) -> str:
    """
    Highest tier whose threshold is at or below ``lifetime_points``.

    Tiers are checked from platinum down, so when two thresholds are equal the
    higher tier wins. Tiers missing from the table are skipped; with no match
    the customer is bronze.
    """
    if isinstance(lifetime_points, bool) or not isinstance(lifetime_points, int):
        raise InvalidArgument("lifetime_points must be an integer")
    if lifetime_points < 0:
        raise InvalidArgument("lifetime_points must not be negative")

    for tier in reversed(TIER_ORDER):
        threshold = thresholds.get(tier)
        if threshold is None:
            continue
        if int(threshold) <= lifetime_points:
            return tier
    return DEFAULT_TIER


def next_tier(current_tier, lifetime_points, thresholds):
    """
    The next tier above ``current_tier`` with a threshold the customer has not
    reached yet, as ``(tier, points_needed)``, or ``(None, 0)`` at the top.
    """
    for tier in TIER_ORDER[tier_rank(current_tier) + 1:]:
        threshold = thresholds.get(tier)
        if threshold is None:
            continue
        if int(threshold) > lifetime_points:
            return tier, int(threshold) - lifetime_points
    return None, 0
