"""
Loyalty services module.
"""
from .points_calculator import (
    POINTS_UNIT_AMOUNT, earned_points, apply_tier_multiplier, redemption_value, preview_earn,
)
from .tier_resolver import resolve_tier, tier_rank, next_tier
from .rules import LoyaltyRules
from .config_service import LoyaltyConfigService
from .notification_service import LoyaltyNotificationService, SmsGateway
from .ledger_service import PointsLedgerService, RedemptionResult, EarnResult, AdjustmentResult

__all__ = [
    'POINTS_UNIT_AMOUNT',
    'earned_points',
    'apply_tier_multiplier',
    'redemption_value',
    'preview_earn',
    'resolve_tier',
    'tier_rank',
    'next_tier',
    'LoyaltyRules',
    'LoyaltyConfigService',
    'LoyaltyNotificationService',
    'SmsGateway',
    'PointsLedgerService',
    'RedemptionResult',
    'EarnResult',
    'AdjustmentResult',
]
