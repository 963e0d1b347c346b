"""
Immutable snapshot of a shop's loyalty configuration.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Dict, Optional

from django.utils import timezone


@dataclass(frozen=True)
class LoyaltyRules:
    """Plain-data view of a LoyaltyConfig consumed by the points engine"""
    is_enabled: bool = True
    points_per_unit: int = 1
    redemption_value: int = 100
    points_expiry_days: Optional[int] = None
    tier_thresholds: Dict[str, int] = field(default_factory=dict)
    tier_multipliers: Dict[str, Decimal] = field(default_factory=dict)
    special_rules: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config) -> 'LoyaltyRules':
        return cls(
            is_enabled=config.is_enabled,
            points_per_unit=int(config.points_per_unit),
            redemption_value=int(config.redemption_value),
            points_expiry_days=config.points_expiry_days,
            tier_thresholds={tier: int(value) for tier, value in (config.tier_thresholds or {}).items()},
            # str() first so float JSON values such as 1.1 stay exact
            tier_multipliers={
                tier: Decimal(str(value)) for tier, value in (config.tier_multipliers or {}).items()
            },
            special_rules=dict(config.special_rules or {}),
        )

    def multiplier_for(self, tier) -> Decimal:
        return self.tier_multipliers.get(tier, Decimal('1'))

    def expiry_date(self, now=None):
        """Expiry for points earned at ``now``, or None when points never expire"""
        if not self.points_expiry_days:
            return None
        return (now or timezone.now()) + timedelta(days=self.points_expiry_days)
