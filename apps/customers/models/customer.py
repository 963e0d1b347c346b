from decimal import Decimal

from django.db import models

from apps.common.constants import TIER_CHOICES, DEFAULT_TIER


class Customer(models.Model):
    """
    Loyalty club member of a shop.

    Balances, tier and total spent are maintained only by the points ledger;
    profile fields are edited through the customer service.
    """
    shop = models.ForeignKey('common.Shop', on_delete=models.CASCADE, related_name='customers')

    # Identity
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True, default='')
    mobile_number = models.CharField(max_length=32, help_text="Normalized mobile number, unique per shop")
    email = models.EmailField(blank=True, default='')
    birth_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')

    # Loyalty state
    total_points = models.IntegerField(default=0, help_text="Lifetime points, drives tier")
    available_points = models.IntegerField(default=0, help_text="Spendable balance")
    tier = models.CharField(max_length=20, choices=TIER_CHOICES, default=DEFAULT_TIER)
    total_spent = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at', '-id']
        unique_together = [('shop', 'mobile_number')]
        indexes = [
            models.Index(fields=['shop', 'is_active']),
            models.Index(fields=['shop', 'tier']),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(available_points__gte=0), name='customer_available_points_non_negative'),
            models.CheckConstraint(condition=models.Q(total_points__gte=0), name='customer_total_points_non_negative'),
            models.CheckConstraint(condition=models.Q(total_spent__gte=0), name='customer_total_spent_non_negative'),
        ]

    def __str__(self):
        return f"{self.full_name} - {self.available_points} points"

    @property
    def full_name(self):
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name
