"""
Common validators module.
"""
from .points_validators import (
    validate_points_amount, validate_non_negative_points, validate_tier_thresholds,
    validate_tier_multipliers, validate_special_rules
)
from .price_validators import validate_quantity, validate_amount
from .customer_validators import normalize_mobile, validate_mobile

__all__ = [
    'validate_points_amount',
    'validate_non_negative_points',
    'validate_tier_thresholds',
    'validate_tier_multipliers',
    'validate_special_rules',
    'validate_quantity',
    'validate_amount',
    'normalize_mobile',
    'validate_mobile',
]
