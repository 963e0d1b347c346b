from django.db import models


class SaleItem(models.Model):
    """Sale line item. Price is the product's price at the moment of sale."""
    sale = models.ForeignKey('Sale', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('products.Product', on_delete=models.PROTECT, related_name='sale_items')
    quantity = models.PositiveIntegerField()
    price_at_sale = models.DecimalField(max_digits=12, decimal_places=2)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, help_text="price_at_sale * quantity")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transaction_items'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name='sale_item_quantity_positive'),
        ]

    def __str__(self):
        return f"SaleItem {self.id} - product {self.product_id} x {self.quantity}"
