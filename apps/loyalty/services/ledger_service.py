"""
Points ledger engine.

Every change to a customer's points goes through this service: it appends a
ledger entry, updates the customer's aggregate balances and keeps the tier
equal to resolve_tier(total_points) after each change.

The mutating operations (redeem, earn, manual_adjust) expect a customer row
locked with select_for_update inside an open transaction.atomic() block.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction

from apps.common.constants import DEFAULT_TIER
from apps.common.exceptions import (
    InsufficientPoints, ProgramDisabled, ValidationError, persistence_error,
)
from apps.common.validators import validate_amount, validate_points_amount
from apps.customers.services import CustomerService
from ..models import PointTransaction
from .config_service import LoyaltyConfigService
from .notification_service import LoyaltyNotificationService
from .points_calculator import preview_earn, redemption_value
from .tier_resolver import next_tier, resolve_tier

logger = logging.getLogger(__name__)


@dataclass
class RedemptionResult:
    entry: PointTransaction
    points: int
    discount_amount: Decimal


@dataclass
class EarnResult:
    entry: Optional[PointTransaction]
    points_earned: int
    tier_changed: bool
    new_tier: str


@dataclass
class AdjustmentResult:
    entry: PointTransaction
    available_points: int
    total_points: int
    tier_changed: bool
    new_tier: str


class PointsLedgerService:
    """Service for points ledger operations"""

    @staticmethod
    def recompute_tier(customer, rules):
        """
        Set customer.tier from total_points. Returns True when it changed.
        The caller saves the customer.
        """
        new_tier = resolve_tier(customer.total_points, rules.tier_thresholds)
        if new_tier == customer.tier:
            return False
        logger.info(f"Customer {customer.id} tier changed: {customer.tier} -> {new_tier}")
        customer.tier = new_tier
        return True

    @staticmethod
    def redeem(customer, points_to_redeem, rules, sale=None) -> RedemptionResult:
        """Spend available points for a currency discount. Tier and lifetime points are untouched."""
        if not rules.is_enabled:
            raise ProgramDisabled()
        points_to_redeem = validate_points_amount(points_to_redeem, field='points_to_redeem')
        if points_to_redeem > customer.available_points:
            raise InsufficientPoints(customer.available_points, points_to_redeem)

        discount_amount = redemption_value(points_to_redeem, rules.redemption_value)
        customer.available_points -= points_to_redeem
        customer.save(update_fields=['available_points', 'updated_at'])

        entry = PointTransaction.objects.create(
            shop_id=customer.shop_id,
            customer=customer,
            sale=sale,
            entry_type=PointTransaction.REDEEMED,
            points=-points_to_redeem,
            balance_after=customer.available_points,
            description=f"Redeemed {points_to_redeem} points for {discount_amount} discount",
        )
        logger.info(
            f"Customer {customer.id} redeemed {points_to_redeem} points, "
            f"balance {customer.available_points}"
        )
        LoyaltyNotificationService.notify_points_redeemed(customer, points_to_redeem, discount_amount)
        return RedemptionResult(entry=entry, points=points_to_redeem, discount_amount=discount_amount)

    @staticmethod
    def earn(customer, sale_amount, rules, sale=None) -> EarnResult:
        """
        Award points for a completed sale of ``sale_amount`` (the charged total).
        A no-op when the program is disabled.
        """
        sale_amount = validate_amount(sale_amount, field='sale_amount')
        if not rules.is_enabled:
            return EarnResult(entry=None, points_earned=0, tier_changed=False, new_tier=customer.tier)

        points_earned = preview_earn(sale_amount, customer.tier, rules)
        customer.total_points += points_earned
        customer.available_points += points_earned
        customer.total_spent += sale_amount
        tier_changed = PointsLedgerService.recompute_tier(customer, rules)
        customer.save(update_fields=['total_points', 'available_points', 'total_spent', 'tier', 'updated_at'])

        entry = PointTransaction.objects.create(
            shop_id=customer.shop_id,
            customer=customer,
            sale=sale,
            entry_type=PointTransaction.EARNED,
            points=points_earned,
            balance_after=customer.available_points,
            description=f"Earned {points_earned} points from purchase of {sale_amount}",
            expiry_date=rules.expiry_date(),
        )
        logger.info(f"Customer {customer.id} earned {points_earned} points, balance {customer.available_points}")
        LoyaltyNotificationService.notify_points_earned(customer, points_earned, tier_changed)
        return EarnResult(entry=entry, points_earned=points_earned, tier_changed=tier_changed, new_tier=customer.tier)

    @staticmethod
    def manual_adjust(customer, delta_points, description, rules) -> AdjustmentResult:
        """
        Apply a signed correction. Positive deltas also raise lifetime points;
        negative deltas only reduce the available balance.
        """
        if isinstance(delta_points, bool) or not isinstance(delta_points, int):
            raise ValidationError("points must be an integer.")
        if delta_points == 0:
            raise ValidationError("points adjustment must not be zero.")
        if delta_points < 0 and customer.available_points + delta_points < 0:
            raise InsufficientPoints(customer.available_points, -delta_points)

        if delta_points > 0:
            customer.total_points += delta_points
        customer.available_points += delta_points
        tier_changed = PointsLedgerService.recompute_tier(customer, rules)
        customer.save(update_fields=['total_points', 'available_points', 'tier', 'updated_at'])

        entry = PointTransaction.objects.create(
            shop_id=customer.shop_id,
            customer=customer,
            entry_type=PointTransaction.ADJUSTMENT,
            points=delta_points,
            balance_after=customer.available_points,
            description=description or 'Manual adjustment',
        )
        logger.info(f"Customer {customer.id} adjusted by {delta_points} points, balance {customer.available_points}")
        return AdjustmentResult(
            entry=entry,
            available_points=customer.available_points,
            total_points=customer.total_points,
            tier_changed=tier_changed,
            new_tier=customer.tier,
        )

    @staticmethod
    def adjust_points(shop, customer_id, delta_points, description='') -> AdjustmentResult:
        """Manual adjustment as its own atomic unit"""
        try:
            with transaction.atomic():
                rules = LoyaltyConfigService.get_rules(shop)
                customer = CustomerService.lock_customer(shop, customer_id)
                return PointsLedgerService.manual_adjust(customer, delta_points, description, rules)
        except DatabaseError as exc:
            raise persistence_error(exc) from exc

    @staticmethod
    def preview_points(shop, amount, customer_id=None) -> int:
        """
        Points a sale of ``amount`` would earn, without persisting anything.
        Anonymous previews use the bronze multiplier.
        """
        amount = validate_amount(amount)
        tier = DEFAULT_TIER
        if customer_id is not None:
            tier = CustomerService.get_customer(shop, customer_id).tier
        return preview_earn(amount, tier, LoyaltyConfigService.get_rules(shop))

    @staticmethod
    def get_loyalty_summary(shop, customer_id):
        """Balances, tier progress and the most recent ledger entries of a customer"""
        customer = CustomerService.get_customer(shop, customer_id)
        rules = LoyaltyConfigService.get_rules(shop)
        upcoming_tier, points_needed = next_tier(customer.tier, customer.total_points, rules.tier_thresholds)
        entries = (
            PointTransaction.objects.filter(shop=shop, customer=customer)
            .order_by('-created_at', '-id')[:settings.LOYALTY_HISTORY_LIMIT]
        )
        return {
            'customer': customer,
            'program_enabled': rules.is_enabled,
            'total_points': customer.total_points,
            'available_points': customer.available_points,
            'tier': customer.tier,
            'tier_multiplier': rules.multiplier_for(customer.tier),
            'next_tier': upcoming_tier,
            'points_to_next_tier': points_needed,
            'total_spent': customer.total_spent,
            'redemption_value': rules.redemption_value,
            'entries': list(entries),
        }
