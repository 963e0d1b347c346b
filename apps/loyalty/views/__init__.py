"""
Loyalty views module.
"""
from .config_views import LoyaltyConfigView, preview_points, recompute_tiers
from .ledger_views import CustomerLoyaltyView, adjust_customer_points

__all__ = [
    'LoyaltyConfigView',
    'preview_points',
    'recompute_tiers',
    'CustomerLoyaltyView',
    'adjust_customer_points',
]
