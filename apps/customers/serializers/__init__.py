"""
Customers serializers module.
"""
from .customer_serializers import (
    CustomerListSerializer,
    CustomerDetailSerializer,
    CustomerCreateSerializer,
    CustomerUpdateSerializer,
)

__all__ = [
    'CustomerListSerializer',
    'CustomerDetailSerializer',
    'CustomerCreateSerializer',
    'CustomerUpdateSerializer',
]
