"""
Loyalty models module.
"""
from .config import LoyaltyConfig
from .point_transaction import PointTransaction

__all__ = [
    'LoyaltyConfig',
    'PointTransaction',
]
