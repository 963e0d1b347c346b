"""
Common models module.
"""
from .shop import Shop

__all__ = [
    'Shop',
]
