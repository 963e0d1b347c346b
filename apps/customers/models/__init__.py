"""
Customers models module.
"""
from .customer import Customer

__all__ = [
    'Customer',
]
