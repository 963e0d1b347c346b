from django.db import models

from apps.common.constants import BRONZE, SILVER, GOLD, PLATINUM


def default_tier_thresholds():
    return {BRONZE: 0, SILVER: 1000, GOLD: 5000, PLATINUM: 20000}


def default_tier_multipliers():
    return {BRONZE: '1', SILVER: '1.1', GOLD: '1.2', PLATINUM: '1.5'}


def default_special_rules():
    return {'birthday': 500, 'welcome': 200, 'referral': 300}


class LoyaltyConfig(models.Model):
    """
    Per-shop loyalty program configuration.

    Read-only input to the points ledger; edited through LoyaltyConfigService,
    which validates the threshold and multiplier tables on write.
    """
    shop = models.OneToOneField('common.Shop', on_delete=models.CASCADE, related_name='loyalty_config')
    is_enabled = models.BooleanField(default=True, help_text="Gates all point computation")
    points_per_unit = models.PositiveIntegerField(default=1, help_text="Points earned per 1000 currency units spent")
    redemption_value = models.PositiveIntegerField(default=100, help_text="Currency units discounted per point redeemed")
    points_expiry_days = models.PositiveIntegerField(null=True, blank=True, help_text="Empty means points never expire")
    tier_thresholds = models.JSONField(default=default_tier_thresholds)
    tier_multipliers = models.JSONField(default=default_tier_multipliers)
    special_rules = models.JSONField(default=default_special_rules, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_configs'
        verbose_name = 'Loyalty Config'
        verbose_name_plural = 'Loyalty Configs'
        constraints = [
            models.CheckConstraint(condition=models.Q(redemption_value__gte=1), name='loyalty_redemption_value_positive'),
        ]

    def __str__(self):
        state = 'enabled' if self.is_enabled else 'disabled'
        return f"Loyalty config for shop {self.shop_id} ({state})"
