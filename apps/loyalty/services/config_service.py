"""
Loyalty configuration service: per-shop config lifecycle and tier recomputation.
"""
import logging

from django.db import transaction

from apps.common.exceptions import ValidationError
from apps.common.validators import (
    validate_non_negative_points, validate_tier_thresholds,
    validate_tier_multipliers, validate_special_rules,
)
from apps.customers.models import Customer
from ..models import LoyaltyConfig
from .rules import LoyaltyRules
from .tier_resolver import resolve_tier

logger = logging.getLogger(__name__)


def _validate_enabled(value):
    if not isinstance(value, bool):
        raise ValidationError("is_enabled must be true or false.")
    return value


def _validate_redemption_value(value):
    value = validate_non_negative_points(value, field='redemption_value')
    if value < 1:
        raise ValidationError("redemption_value must be at least 1.")
    return value


def _validate_expiry_days(value):
    if value is None:
        return None
    value = validate_non_negative_points(value, field='points_expiry_days')
    if value < 1:
        raise ValidationError("points_expiry_days must be at least 1, or null for no expiry.")
    return value


class LoyaltyConfigService:
    """Service for reading and updating a shop's loyalty configuration"""

    FIELD_VALIDATORS = {
        'is_enabled': _validate_enabled,
        'points_per_unit': lambda value: validate_non_negative_points(value, field='points_per_unit'),
        'redemption_value': _validate_redemption_value,
        'points_expiry_days': _validate_expiry_days,
        'tier_thresholds': validate_tier_thresholds,
        'tier_multipliers': validate_tier_multipliers,
        'special_rules': validate_special_rules,
    }

    @staticmethod
    def get_config(shop, lock=False) -> LoyaltyConfig:
        """Get the shop's config, creating it with the default program on first access"""
        config, created = LoyaltyConfig.objects.get_or_create(shop=shop)
        if created:
            logger.info(f"Created default loyalty config for shop {shop.id}")
        if lock:
            config = LoyaltyConfig.objects.select_for_update().get(pk=config.pk)
        return config

    @staticmethod
    def get_rules(shop) -> LoyaltyRules:
        return LoyaltyRules.from_config(LoyaltyConfigService.get_config(shop))

    @staticmethod
    def validate_fields(fields):
        """Validate a partial update. Unknown fields are rejected."""
        if not isinstance(fields, dict):
            raise ValidationError("Loyalty config update must be an object.")
        unknown = set(fields) - set(LoyaltyConfigService.FIELD_VALIDATORS)
        if unknown:
            raise ValidationError(f"Unknown loyalty config fields: {', '.join(sorted(unknown))}.")
        return {
            name: LoyaltyConfigService.FIELD_VALIDATORS[name](value)
            for name, value in fields.items()
        }

    @staticmethod
    @transaction.atomic
    def update_config(shop, fields) -> LoyaltyConfig:
        cleaned = LoyaltyConfigService.validate_fields(fields)
        config = LoyaltyConfigService.get_config(shop, lock=True)
        if not cleaned:
            return config

        for name, value in cleaned.items():
            setattr(config, name, value)
        config.save(update_fields=list(cleaned) + ['updated_at'])
        logger.info(f"Updated loyalty config for shop {shop.id}: {', '.join(sorted(cleaned))}")
        return config

    @staticmethod
    @transaction.atomic
    def recompute_customer_tiers(shop) -> int:
        """
        Re-resolve the tier of every active customer in the shop against the
        current thresholds. Returns the number of customers whose tier changed.
        """
        thresholds = LoyaltyConfigService.get_rules(shop).tier_thresholds
        changed = []
        customers = Customer.objects.select_for_update().filter(shop=shop, is_active=True).order_by('pk')
        for customer in customers:
            tier = resolve_tier(customer.total_points, thresholds)
            if tier != customer.tier:
                logger.info(f"Customer {customer.id} tier {customer.tier} -> {tier}")
                customer.tier = tier
                changed.append(customer)
        if changed:
            Customer.objects.bulk_update(changed, ['tier'])
        logger.info(f"Recomputed tiers for shop {shop.id}: {len(changed)} changed")
        return len(changed)
