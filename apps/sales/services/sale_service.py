"""
Sale coordinator.

Records a sale as one atomic unit: stock check and decrement, the sale and its
line items, points redemption and earning. Any failure rolls all of it back.
"""
import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import DatabaseError, transaction
from django.utils.dateparse import parse_date

from apps.common.exceptions import (
    BusinessError, InsufficientStock, ProductNotFound, SaleNotFound, ValidationError,
    persistence_error,
)
from apps.common.validators import validate_non_negative_points, validate_quantity
from apps.customers.services import CustomerService
from apps.loyalty.services import LoyaltyConfigService, PointsLedgerService
from apps.products.models import Product
from ..models import Sale, SaleItem

logger = logging.getLogger(__name__)


class SaleState:
    PENDING = 'pending'
    ITEMS_VALIDATED = 'items_validated'
    STOCK_RESERVED = 'stock_reserved'
    LEDGER_APPLIED = 'ledger_applied'
    COMMITTED = 'committed'
    ROLLED_BACK = 'rolled_back'


class SaleAttempt:
    """Tracks and logs the progress of one sale"""

    def __init__(self, shop):
        self.shop = shop
        self.state = SaleState.PENDING
        self.sale = None

    def advance(self, state):
        logger.debug(f"Sale in shop {self.shop.id}: {self.state} -> {state}")
        self.state = state


class SaleService:
    """Service class for recording and querying sales"""

    @staticmethod
    def normalize_items(items) -> Dict[int, int]:
        """
        Validate sale lines and merge duplicates into {product_id: quantity}.
        Any price sent by the caller is ignored.
        """
        if not items:
            raise ValidationError("Sale must contain at least one item.")

        lines = OrderedDict()
        for item in items:
            if not isinstance(item, dict) or 'product_id' not in item:
                raise ValidationError("Each item must have product_id and quantity.")
            product_id = item['product_id']
            if isinstance(product_id, bool) or not isinstance(product_id, int):
                raise ValidationError("product_id must be an integer.")
            quantity = validate_quantity(item.get('quantity'))
            lines[product_id] = lines.get(product_id, 0) + quantity
        return lines

    @staticmethod
    def _lock_products(shop, product_ids) -> Dict[int, Product]:
        # Primary-key order so concurrent sales take row locks in the same order
        products = {
            product.id: product
            for product in Product.objects.select_for_update()
            .filter(shop=shop, id__in=product_ids, is_active=True)
            .order_by('pk')
        }
        for product_id in product_ids:
            if product_id not in products:
                raise ProductNotFound(f"Product {product_id} not found", product_id=product_id)
        return products

    @staticmethod
    def record_sale(shop, items: List[Dict], customer_id: Optional[int] = None,
                    points_to_redeem=0, notes: str = '') -> Sale:
        """
        Record a completed sale.

        Raises:
            ValidationError, ProductNotFound, CustomerNotFound, InsufficientStock,
            InsufficientPoints, ProgramDisabled: nothing was persisted
            PersistenceFailure, PersistenceTimeout: the commit failed and was rolled back
        """
        lines = SaleService.normalize_items(items)
        points_to_redeem = validate_non_negative_points(points_to_redeem or 0, field='points_to_redeem')
        if points_to_redeem and customer_id is None:
            raise ValidationError("Points can only be redeemed for a registered customer.")

        attempt = SaleAttempt(shop)
        try:
            with transaction.atomic():
                SaleService._apply(attempt, lines, customer_id, points_to_redeem, notes or '')
        except BusinessError as exc:
            logger.warning(f"Sale in shop {shop.id} rolled back at {attempt.state}: {exc}")
            attempt.advance(SaleState.ROLLED_BACK)
            raise
        except DatabaseError as exc:
            logger.error(f"Sale in shop {shop.id} rolled back at {attempt.state}: {exc}", exc_info=True)
            attempt.advance(SaleState.ROLLED_BACK)
            raise persistence_error(exc) from exc

        attempt.advance(SaleState.COMMITTED)
        sale = attempt.sale
        logger.info(
            f"Sale {sale.id} committed in shop {shop.id}: total {sale.total_amount}, "
            f"earned {sale.points_earned}, redeemed {sale.points_redeemed}"
        )
        return sale

    @staticmethod
    def _apply(attempt, lines, customer_id, points_to_redeem, notes):
        shop = attempt.shop
        products = SaleService._lock_products(shop, list(lines))
        for product_id, quantity in lines.items():
            available = products[product_id].stock_quantity
            if quantity > available:
                raise InsufficientStock(product_id, available, quantity)
        attempt.advance(SaleState.ITEMS_VALIDATED)

        for product_id, quantity in lines.items():
            product = products[product_id]
            product.stock_quantity -= quantity
            product.save(update_fields=['stock_quantity', 'updated_at'])
        attempt.advance(SaleState.STOCK_RESERVED)

        customer = None
        if customer_id is not None:
            customer = CustomerService.lock_customer(shop, customer_id)

        subtotal_amount = sum(
            (products[product_id].price * quantity for product_id, quantity in lines.items()),
            Decimal('0.00'),
        )
        sale = Sale.objects.create(
            shop=shop,
            customer=customer,
            subtotal_amount=subtotal_amount,
            total_amount=subtotal_amount,
            notes=notes,
        )
        SaleItem.objects.bulk_create([
            SaleItem(
                sale=sale,
                product=products[product_id],
                quantity=quantity,
                price_at_sale=products[product_id].price,
                subtotal=products[product_id].price * quantity,
            )
            for product_id, quantity in lines.items()
        ])

        if customer is not None:
            rules = LoyaltyConfigService.get_rules(shop)
            if points_to_redeem:
                redemption = PointsLedgerService.redeem(customer, points_to_redeem, rules, sale=sale)
                if redemption.discount_amount > subtotal_amount:
                    raise ValidationError(
                        f"Redemption discount {redemption.discount_amount} exceeds sale subtotal {subtotal_amount}.",
                        discount_amount=str(redemption.discount_amount),
                        subtotal_amount=str(subtotal_amount),
                    )
                sale.discount_amount = redemption.discount_amount
                sale.points_redeemed = redemption.points
                sale.total_amount = subtotal_amount - redemption.discount_amount

            earned = PointsLedgerService.earn(customer, sale.total_amount, rules, sale=sale)
            sale.points_earned = earned.points_earned
            sale.save(update_fields=[
                'discount_amount', 'points_redeemed', 'total_amount', 'points_earned', 'updated_at',
            ])
        attempt.advance(SaleState.LEDGER_APPLIED)
        attempt.sale = sale

    @staticmethod
    def _parse_date(value, field):
        if value in (None, ''):
            return None
        if isinstance(value, date):
            return value
        try:
            parsed = parse_date(str(value))
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationError(f"{field} must be a date in YYYY-MM-DD format.")
        return parsed

    @staticmethod
    def list_sales(shop, start_date=None, end_date=None, customer_id=None):
        start_date = SaleService._parse_date(start_date, 'start_date')
        end_date = SaleService._parse_date(end_date, 'end_date')
        queryset = Sale.objects.filter(shop=shop).select_related('customer').prefetch_related('items__product')
        if start_date:
            queryset = queryset.filter(transaction_date__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(transaction_date__date__lte=end_date)
        if customer_id not in (None, ''):
            try:
                customer_id = int(customer_id)
            except (TypeError, ValueError):
                raise ValidationError("customer_id must be an integer.")
            queryset = queryset.filter(customer_id=customer_id)
        return queryset.order_by('-transaction_date', '-id')

    @staticmethod
    def get_sale(shop, sale_id) -> Sale:
        sale = (
            Sale.objects.filter(shop=shop, id=sale_id)
            .select_related('customer')
            .prefetch_related('items__product', 'point_transactions')
            .first()
        )
        if sale is None:
            raise SaleNotFound(f"Sale {sale_id} not found")
        return sale
