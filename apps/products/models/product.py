from django.db import models


class Product(models.Model):
    """Sellable product. Stock is only decremented by the sale coordinator."""
    shop = models.ForeignKey('common.Shop', on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=12, decimal_places=2)
    stock_quantity = models.IntegerField(default=0, help_text="Units on hand")
    low_stock_threshold = models.PositiveIntegerField(default=5, help_text="Reported as low stock at or below this level")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['id']
        indexes = [
            models.Index(fields=['shop', 'is_active']),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(stock_quantity__gte=0), name='product_stock_non_negative'),
            models.CheckConstraint(condition=models.Q(price__gte=0), name='product_price_non_negative'),
        ]

    def __str__(self):
        return f"{self.name} (id: {self.id})"
