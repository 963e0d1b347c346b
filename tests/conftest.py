"""
Test configuration for the POS loyalty server.
"""
import os

import django
import pytest
from decimal import Decimal


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pos_server.test_settings')
    django.setup()


@pytest.fixture
def shop():
    from tests.factories import ShopFactory
    return ShopFactory()


@pytest.fixture
def loyalty_config(shop):
    """Default program: 1 point per 1000, 100 per point redeemed, 0/1000/5000/20000 thresholds."""
    from tests.factories import LoyaltyConfigFactory
    return LoyaltyConfigFactory(shop=shop)


@pytest.fixture
def customer(shop):
    from tests.factories import CustomerFactory
    return CustomerFactory(shop=shop)


@pytest.fixture
def product(shop):
    from tests.factories import ProductFactory
    return ProductFactory(shop=shop, price=Decimal('1000.00'), stock_quantity=10)


@pytest.fixture
def staff_user():
    from tests.factories import UserFactory
    return UserFactory()


@pytest.fixture
def api_client(staff_user):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
