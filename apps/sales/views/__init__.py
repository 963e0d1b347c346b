"""
Sales views module.
"""
from .sale_views import SaleListCreateView, SaleDetailView
from .stats_views import dashboard_stats, sales_analytics, inventory_stats

__all__ = [
    'SaleListCreateView',
    'SaleDetailView',
    'dashboard_stats',
    'sales_analytics',
    'inventory_stats',
]
