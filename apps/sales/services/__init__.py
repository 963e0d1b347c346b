"""
Sales services module.
"""
from .sale_service import SaleService, SaleState
from .stats_service import StatsService

__all__ = [
    'SaleService',
    'SaleState',
    'StatsService',
]
