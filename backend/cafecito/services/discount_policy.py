# Overview: Loyalty discount tiers by historical purchase count.

"""
Tiered discount (step function on purchases_count):

    0        ->  0%
    1 .. 3   ->  5%
    4 .. 7   -> 10%
    8 +      -> 15%

Boundaries at 3/4 and 7/8 are inclusive on the lower tier.
"""

from __future__ import annotations


# (minimum purchases, percent), highest tier first
DISCOUNT_TIERS: tuple[tuple[int, int], ...] = (
    (8, 15),
    (4, 10),
    (1, 5),
)


def percent(purchases_count: int) -> int:
    """Return the discount percent for a customer with this many past purchases."""
    for minimum, tier_percent in DISCOUNT_TIERS:
        if purchases_count >= minimum:
            return tier_percent
    return 0
