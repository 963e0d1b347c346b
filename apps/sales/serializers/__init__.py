"""
Sales serializers module.
"""
from .sale_serializers import (
    SaleItemSerializer,
    SaleListSerializer,
    SaleDetailSerializer,
    SaleCreateSerializer,
)
from .stats_serializers import (
    DashboardStatsSerializer,
    SalesAnalyticsSerializer,
    InventoryStatsSerializer,
)

__all__ = [
    'SaleItemSerializer',
    'SaleListSerializer',
    'SaleDetailSerializer',
    'SaleCreateSerializer',
    'DashboardStatsSerializer',
    'SalesAnalyticsSerializer',
    'InventoryStatsSerializer',
]
