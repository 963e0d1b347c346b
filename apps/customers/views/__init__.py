"""
Customer views module.
"""
from .customer_views import CustomerListCreateView, CustomerByMobileView, CustomerDetailView

__all__ = [
    'CustomerListCreateView',
    'CustomerByMobileView',
    'CustomerDetailView',
]
