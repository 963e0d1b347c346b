"""
Shop model: the tenant every product, customer, sale and ledger entry belongs to.
"""
from django.db import models

from ..exceptions import ShopNotFound


class Shop(models.Model):
    """
    A retail shop. Tenant identification happens upstream; the core receives a
    shop id that has already been validated and scopes every query by it.
    """
    name = models.CharField(max_length=200, help_text="Shop name")
    phone = models.CharField(max_length=32, blank=True, default='', help_text="Shop phone number")
    address = models.CharField(max_length=500, blank=True, default='', help_text="Shop address")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shops'
        ordering = ['id']

    def __str__(self):
        return f"{self.name} (id: {self.id})"

    @classmethod
    def get_active(cls, shop_id):
        """Get an active shop by id or raise ShopNotFound"""
        shop = cls.objects.filter(id=shop_id, is_active=True).first()
        if shop is None:
            raise ShopNotFound(f"Shop {shop_id} not found")
        return shop
