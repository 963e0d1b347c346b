"""
Loyalty tier names shared by customers, loyalty configuration and the tier resolver.
"""

BRONZE = 'bronze'
SILVER = 'silver'
GOLD = 'gold'
PLATINUM = 'platinum'

# Lowest rank first
TIER_ORDER = (BRONZE, SILVER, GOLD, PLATINUM)

TIER_CHOICES = [
    (BRONZE, 'Bronze'),
    (SILVER, 'Silver'),
    (GOLD, 'Gold'),
    (PLATINUM, 'Platinum'),
]

DEFAULT_TIER = BRONZE
