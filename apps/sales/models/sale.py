from decimal import Decimal

from django.db import models
from django.utils import timezone


class Sale(models.Model):
    """
    A recorded sale. Stored in the ``transactions`` table; named Sale to keep
    it apart from database transactions.
    """
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'

    STATUS_CHOICES = [
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
        (REFUNDED, 'Refunded'),
    ]

    shop = models.ForeignKey('common.Shop', on_delete=models.CASCADE, related_name='sales')
    customer = models.ForeignKey(
        'customers.Customer', on_delete=models.PROTECT, null=True, blank=True, related_name='sales',
        help_text="Empty for anonymous sales",
    )

    subtotal_amount = models.DecimalField(max_digits=14, decimal_places=2, help_text="Sum of line subtotals")
    discount_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'), help_text="Points redemption discount"
    )
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, help_text="Charged amount after discount")
    points_earned = models.PositiveIntegerField(default=0)
    points_redeemed = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=COMPLETED)
    notes = models.TextField(blank=True, default='')

    transaction_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        ordering = ['-transaction_date', '-id']
        indexes = [
            models.Index(fields=['shop', '-transaction_date']),
            models.Index(fields=['customer']),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(total_amount__gte=0), name='sale_total_non_negative'),
            models.CheckConstraint(condition=models.Q(discount_amount__gte=0), name='sale_discount_non_negative'),
        ]

    def __str__(self):
        return f"Sale {self.id} - {self.total_amount} ({self.status})"
