"""
Loyalty serializers module.
"""
from .config_serializers import LoyaltyConfigSerializer, PreviewPointsSerializer
from .ledger_serializers import (
    PointTransactionSerializer, LoyaltySummarySerializer, PointsAdjustmentSerializer,
)

__all__ = [
    'LoyaltyConfigSerializer',
    'PreviewPointsSerializer',
    'PointTransactionSerializer',
    'LoyaltySummarySerializer',
    'PointsAdjustmentSerializer',
]
