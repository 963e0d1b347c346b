from django.db import models


class PointTransaction(models.Model):
    """
    Ledger entry for a single change to a customer's points balance.
    Entries are append-only; they are never updated after creation.
    """
    EARNED = 'earned'
    REDEEMED = 'redeemed'
    EXPIRED = 'expired'
    ADJUSTMENT = 'adjustment'

    ENTRY_TYPES = [
        (EARNED, 'Earned'),
        (REDEEMED, 'Redeemed'),
        (EXPIRED, 'Expired'),
        (ADJUSTMENT, 'Adjustment'),
    ]

    shop = models.ForeignKey('common.Shop', on_delete=models.CASCADE, related_name='point_transactions')
    customer = models.ForeignKey('customers.Customer', on_delete=models.CASCADE, related_name='point_transactions')
    sale = models.ForeignKey(
        'sales.Sale', on_delete=models.PROTECT, null=True, blank=True, related_name='point_transactions',
        help_text="Empty for manual adjustments",
    )
    entry_type = models.CharField(max_length=20, choices=ENTRY_TYPES)
    points = models.IntegerField(help_text="Positive for earned, negative for redeemed or expired")
    balance_after = models.IntegerField(help_text="Available points after this entry")
    description = models.CharField(max_length=255, blank=True, default='')
    expiry_date = models.DateTimeField(null=True, blank=True)
    is_expired = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'point_transactions'
        ordering = ['-created_at', '-id']
        verbose_name = 'Point Transaction'
        verbose_name_plural = 'Point Transactions'
        indexes = [
            models.Index(fields=['shop', 'customer', '-created_at']),
            models.Index(fields=['entry_type', 'is_expired']),
        ]

    def __str__(self):
        sign = '+' if self.points > 0 else ''
        return f"{self.customer_id}: {sign}{self.points} points ({self.entry_type})"

    def save(self, *args, **kwargs):
        if self.pk is not None and not kwargs.get('force_insert'):
            raise ValueError("Ledger entries are immutable")
        super().save(*args, **kwargs)
