"""
Shop dashboard, sales analytics and inventory statistics.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from apps.common.exceptions import ValidationError
from apps.customers.models import Customer
from apps.products.models import Product
from ..models import Sale, SaleItem
from .sale_service import SaleService

# period -> (default length in days, bucket)
ANALYTICS_PERIODS = {
    'week': (7, 'day'),
    'month': (30, 'day'),
    'quarter': (90, 'month'),
    'year': (365, 'month'),
}

TOP_PRODUCTS_LIMIT = 5
RECENT_SALES_LIMIT = 5
LOW_STOCK_LIMIT = 10


def _start_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.min))


class StatsService:
    """Read-only aggregates over a shop's sales, customers and products"""

    @staticmethod
    def _revenue_since(shop, since):
        total = Sale.objects.filter(
            shop=shop, status=Sale.COMPLETED, transaction_date__gte=since,
        ).aggregate(total=Sum('total_amount'))['total']
        return total or Decimal('0.00')

    @staticmethod
    def dashboard_stats(shop, now=None):
        """
        Revenue for today, this week (from Sunday) and this month, record counts,
        this month's best sellers and the latest sales.
        """
        today = timezone.localdate(now or timezone.now())
        start_of_today = _start_of_day(today)
        start_of_week = _start_of_day(today - timedelta(days=(today.weekday() + 1) % 7))
        start_of_month = _start_of_day(today.replace(day=1))

        completed = Sale.objects.filter(shop=shop, status=Sale.COMPLETED)
        top_products = (
            SaleItem.objects.filter(
                sale__shop=shop, sale__status=Sale.COMPLETED, sale__transaction_date__gte=start_of_month,
            )
            .values('product_id', 'product__name')
            .annotate(quantity=Sum('quantity'), sales=Sum('subtotal'))
            .order_by('-quantity', 'product_id')[:TOP_PRODUCTS_LIMIT]
        )
        recent_sales = (
            Sale.objects.filter(shop=shop)
            .select_related('customer')
            .prefetch_related('items')
            .order_by('-transaction_date', '-id')[:RECENT_SALES_LIMIT]
        )

        return {
            'sales': {
                'daily': StatsService._revenue_since(shop, start_of_today),
                'weekly': StatsService._revenue_since(shop, start_of_week),
                'monthly': StatsService._revenue_since(shop, start_of_month),
            },
            'counts': {
                'products': Product.objects.filter(shop=shop, is_active=True).count(),
                'customers': Customer.objects.filter(shop=shop, is_active=True).count(),
                'transactions': completed.count(),
            },
            'top_products': [
                {
                    'product_id': row['product_id'],
                    'name': row['product__name'],
                    'quantity': row['quantity'] or 0,
                    'sales': row['sales'] or Decimal('0.00'),
                }
                for row in top_products
            ],
            'recent_sales': list(recent_sales),
        }

    @staticmethod
    def sales_analytics(shop, period='month', start_date=None, end_date=None):
        """
        Completed-sale revenue and counts per day (week, month) or per month
        (quarter, year). Explicit dates override the period's default window.
        """
        period = period or 'month'
        if period not in ANALYTICS_PERIODS:
            raise ValidationError(
                f"period must be one of: {', '.join(ANALYTICS_PERIODS)}.", period=period,
            )
        days, bucket = ANALYTICS_PERIODS[period]

        end_date = SaleService._parse_date(end_date, 'end_date') or timezone.localdate()
        start_date = SaleService._parse_date(start_date, 'start_date') or end_date - timedelta(days=days)
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date.")

        trunc = TruncDate if bucket == 'day' else TruncMonth
        rows = (
            Sale.objects.filter(
                shop=shop,
                status=Sale.COMPLETED,
                transaction_date__date__gte=start_date,
                transaction_date__date__lte=end_date,
            )
            .annotate(bucket=trunc('transaction_date'))
            .values('bucket')
            .annotate(total=Sum('total_amount'), count=Count('id'))
            .order_by('bucket')
        )
        date_format = '%Y-%m-%d' if bucket == 'day' else '%Y-%m'

        return {
            'period': period,
            'start_date': start_date,
            'end_date': end_date,
            'sales': [
                {
                    'date': row['bucket'].strftime(date_format),
                    'total': row['total'] or Decimal('0.00'),
                    'count': row['count'],
                }
                for row in rows
            ],
        }

    @staticmethod
    def inventory_stats(shop):
        """Low and out-of-stock products and the value of stock on hand"""
        active = Product.objects.filter(shop=shop, is_active=True)
        low_stock = (
            active.filter(stock_quantity__lte=F('low_stock_threshold'))
            .order_by('stock_quantity', '-updated_at', 'id')[:LOW_STOCK_LIMIT]
        )
        inventory_value = active.aggregate(
            value=Sum(ExpressionWrapper(
                F('stock_quantity') * F('price'),
                output_field=DecimalField(max_digits=20, decimal_places=2),
            ))
        )['value']

        return {
            'low_stock_products': list(low_stock),
            'out_of_stock_count': active.filter(stock_quantity=0).count(),
            'inventory_value': inventory_value or Decimal('0.00'),
        }
