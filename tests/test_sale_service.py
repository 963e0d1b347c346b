"""
Tests for the sale coordinator.
"""
import threading
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, OperationalError, connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature

from apps.common.constants import BRONZE, SILVER
from apps.common.exceptions import (
    CustomerNotFound, InsufficientPoints, InsufficientStock, PersistenceFailure,
    PersistenceTimeout, ProductNotFound, ProgramDisabled, SaleNotFound, ValidationError,
)
from apps.loyalty.models import PointTransaction
from apps.loyalty.services import PointsLedgerService
from apps.products.models import Product
from apps.sales.models import Sale, SaleItem
from apps.sales.services import SaleService
from tests.factories import CustomerFactory, LoyaltyConfigFactory, ProductFactory, ShopFactory


class SaleTestMixin:

    def setUp(self):
        self.shop = ShopFactory()
        self.config = LoyaltyConfigFactory(shop=self.shop)
        self.product = ProductFactory(shop=self.shop, price=Decimal('2500.00'), stock_quantity=2)
        self.other_product = ProductFactory(shop=self.shop, price=Decimal('1000.00'), stock_quantity=5)

    def assert_nothing_persisted(self):
        self.product.refresh_from_db()
        self.other_product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 2)
        self.assertEqual(self.other_product.stock_quantity, 5)
        self.assertEqual(Sale.objects.count(), 0)
        self.assertEqual(SaleItem.objects.count(), 0)
        self.assertEqual(PointTransaction.objects.count(), 0)


class RecordSaleStockTest(SaleTestMixin, TestCase):

    def test_sale_can_take_stock_to_zero(self):
        sale = SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 2}])

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)
        self.assertEqual(sale.status, Sale.COMPLETED)
        self.assertEqual(sale.total_amount, Decimal('5000.00'))
        item = sale.items.get()
        self.assertEqual(item.quantity, 2)
        self.assertEqual(item.price_at_sale, Decimal('2500.00'))
        self.assertEqual(item.subtotal, Decimal('5000.00'))

    def test_second_sale_refused_when_stock_exhausted(self):
        SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 2}])

        with self.assertRaises(InsufficientStock) as ctx:
            SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 1}])

        self.assertEqual(ctx.exception.available, 0)
        self.assertEqual(ctx.exception.requested, 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)
        self.assertEqual(Sale.objects.count(), 1)

    def test_insufficient_stock_on_one_line_rolls_back_all_lines(self):
        with self.assertRaises(InsufficientStock) as ctx:
            SaleService.record_sale(self.shop, [
                {'product_id': self.other_product.id, 'quantity': 3},
                {'product_id': self.product.id, 'quantity': 3},
            ])
        self.assertEqual(ctx.exception.product_id, self.product.id)
        self.assert_nothing_persisted()

    def test_duplicate_lines_are_merged_before_stock_check(self):
        with self.assertRaises(InsufficientStock):
            SaleService.record_sale(self.shop, [
                {'product_id': self.product.id, 'quantity': 1},
                {'product_id': self.product.id, 'quantity': 2},
            ])
        self.assert_nothing_persisted()

        sale = SaleService.record_sale(self.shop, [
            {'product_id': self.other_product.id, 'quantity': 2},
            {'product_id': self.other_product.id, 'quantity': 3},
        ])
        self.assertEqual(sale.items.count(), 1)
        self.assertEqual(sale.items.get().quantity, 5)

    def test_stock_decrease_matches_quantities_sold(self):
        SaleService.record_sale(self.shop, [
            {'product_id': self.product.id, 'quantity': 1},
            {'product_id': self.other_product.id, 'quantity': 4},
        ])
        self.product.refresh_from_db()
        self.other_product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)
        self.assertEqual(self.other_product.stock_quantity, 1)

    def test_caller_price_is_ignored(self):
        sale = SaleService.record_sale(self.shop, [
            {'product_id': self.product.id, 'quantity': 1, 'price': '0.01'},
        ])
        self.assertEqual(sale.items.get().price_at_sale, Decimal('2500.00'))
        self.assertEqual(sale.total_amount, Decimal('2500.00'))

    def test_unknown_product(self):
        with self.assertRaises(ProductNotFound):
            SaleService.record_sale(self.shop, [
                {'product_id': self.other_product.id, 'quantity': 1},
                {'product_id': 999999, 'quantity': 1},
            ])
        self.assert_nothing_persisted()

    def test_product_of_another_shop_is_not_found(self):
        foreign = ProductFactory(shop=ShopFactory(), stock_quantity=10)
        with self.assertRaises(ProductNotFound):
            SaleService.record_sale(self.shop, [{'product_id': foreign.id, 'quantity': 1}])
        foreign.refresh_from_db()
        self.assertEqual(foreign.stock_quantity, 10)

    def test_inactive_product_is_not_found(self):
        Product.objects.filter(pk=self.other_product.pk).update(is_active=False)
        with self.assertRaises(ProductNotFound):
            SaleService.record_sale(self.shop, [{'product_id': self.other_product.id, 'quantity': 1}])

    def test_invalid_lines(self):
        for items in (
            [],
            [{'quantity': 1}],
            [{'product_id': self.product.id, 'quantity': 0}],
            [{'product_id': self.product.id, 'quantity': -1}],
            [{'product_id': self.product.id, 'quantity': 1.5}],
            [{'product_id': str(self.product.id), 'quantity': 1}],
        ):
            with self.subTest(items=items):
                with self.assertRaises(ValidationError):
                    SaleService.record_sale(self.shop, items)
        self.assert_nothing_persisted()


class RecordSaleLoyaltyTest(SaleTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.customer = CustomerFactory(shop=self.shop, total_points=995, available_points=300)

    def test_anonymous_sale_earns_nothing(self):
        sale = SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 2}])
        self.assertIsNone(sale.customer)
        self.assertEqual(sale.points_earned, 0)
        self.assertEqual(PointTransaction.objects.count(), 0)

    def test_customer_earns_on_sale(self):
        sale = SaleService.record_sale(
            self.shop, [{'product_id': self.product.id, 'quantity': 2}], customer_id=self.customer.id,
        )

        self.assertEqual(sale.points_earned, 5)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.total_points, 1000)
        self.assertEqual(self.customer.available_points, 305)
        self.assertEqual(self.customer.tier, SILVER)
        self.assertEqual(self.customer.total_spent, Decimal('5000.00'))
        entry = PointTransaction.objects.get(customer=self.customer)
        self.assertEqual(entry.sale_id, sale.id)

    def test_redeem_then_earn_on_discounted_total(self):
        product = ProductFactory(shop=self.shop, price=Decimal('50000.00'), stock_quantity=1)

        sale = SaleService.record_sale(
            self.shop, [{'product_id': product.id, 'quantity': 1}],
            customer_id=self.customer.id, points_to_redeem=300, notes='counter 2',
        )

        self.assertEqual(sale.subtotal_amount, Decimal('50000.00'))
        self.assertEqual(sale.discount_amount, Decimal('30000'))
        self.assertEqual(sale.total_amount, Decimal('20000.00'))
        self.assertEqual(sale.points_redeemed, 300)
        self.assertEqual(sale.points_earned, 20)
        self.assertEqual(sale.notes, 'counter 2')
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.available_points, 20)
        self.assertEqual(self.customer.total_points, 1015)
        types = list(
            PointTransaction.objects.filter(sale=sale).order_by('id').values_list('entry_type', flat=True)
        )
        self.assertEqual(types, [PointTransaction.REDEEMED, PointTransaction.EARNED])

    def test_insufficient_points_rolls_back_sale(self):
        with self.assertRaises(InsufficientPoints):
            SaleService.record_sale(
                self.shop, [{'product_id': self.product.id, 'quantity': 2}],
                customer_id=self.customer.id, points_to_redeem=301,
            )
        self.assert_nothing_persisted()
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.available_points, 300)

    def test_discount_larger_than_subtotal_rolls_back(self):
        with self.assertRaises(ValidationError):
            SaleService.record_sale(
                self.shop, [{'product_id': self.other_product.id, 'quantity': 1}],
                customer_id=self.customer.id, points_to_redeem=100,
            )
        self.assert_nothing_persisted()
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.available_points, 300)

    def test_redemption_with_disabled_program_rolls_back(self):
        self.config.is_enabled = False
        self.config.save()
        with self.assertRaises(ProgramDisabled):
            SaleService.record_sale(
                self.shop, [{'product_id': self.product.id, 'quantity': 2}],
                customer_id=self.customer.id, points_to_redeem=10,
            )
        self.assert_nothing_persisted()

    def test_disabled_program_sale_without_redemption(self):
        self.config.is_enabled = False
        self.config.save()
        sale = SaleService.record_sale(
            self.shop, [{'product_id': self.product.id, 'quantity': 2}], customer_id=self.customer.id,
        )
        self.assertEqual(sale.points_earned, 0)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.total_points, 995)

    def test_redemption_requires_customer(self):
        with self.assertRaises(ValidationError):
            SaleService.record_sale(
                self.shop, [{'product_id': self.product.id, 'quantity': 1}], points_to_redeem=10,
            )

    def test_unknown_customer_rolls_back_stock(self):
        with self.assertRaises(CustomerNotFound):
            SaleService.record_sale(
                self.shop, [{'product_id': self.product.id, 'quantity': 1}], customer_id=999999,
            )
        self.assert_nothing_persisted()

    def test_customer_of_another_shop_is_not_found(self):
        foreign = CustomerFactory(shop=ShopFactory())
        with self.assertRaises(CustomerNotFound):
            SaleService.record_sale(
                self.shop, [{'product_id': self.product.id, 'quantity': 1}], customer_id=foreign.id,
            )
        self.assert_nothing_persisted()


class RecordSalePersistenceTest(SaleTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.customer = CustomerFactory(shop=self.shop, total_points=0, available_points=0, tier=BRONZE)

    def test_database_error_becomes_persistence_failure(self):
        with mock.patch.object(SaleItem.objects, 'bulk_create', side_effect=DatabaseError('connection lost')):
            with self.assertRaises(PersistenceFailure) as ctx:
                SaleService.record_sale(
                    self.shop, [{'product_id': self.product.id, 'quantity': 1}], customer_id=self.customer.id,
                )
        self.assertNotIsInstance(ctx.exception, PersistenceTimeout)
        self.assert_nothing_persisted()

    def test_lock_timeout_becomes_persistence_timeout(self):
        with mock.patch(
            'apps.loyalty.services.ledger_service.PointTransaction.objects.create',
            side_effect=OperationalError('database is locked'),
        ):
            with self.assertRaises(PersistenceTimeout):
                SaleService.record_sale(
                    self.shop, [{'product_id': self.product.id, 'quantity': 1}], customer_id=self.customer.id,
                )
        self.assert_nothing_persisted()
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.total_points, 0)


class SaleQueryTest(SaleTestMixin, TestCase):

    def test_get_sale(self):
        sale = SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 1}])
        self.assertEqual(SaleService.get_sale(self.shop, sale.id).pk, sale.pk)

    def test_get_sale_of_another_shop(self):
        sale = SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 1}])
        with self.assertRaises(SaleNotFound):
            SaleService.get_sale(ShopFactory(), sale.id)

    def test_list_sales_newest_first(self):
        first = SaleService.record_sale(self.shop, [{'product_id': self.product.id, 'quantity': 1}])
        second = SaleService.record_sale(self.shop, [{'product_id': self.other_product.id, 'quantity': 1}])
        self.assertEqual(list(SaleService.list_sales(self.shop)), [second, first])

    def test_list_sales_date_filter_validation(self):
        with self.assertRaises(ValidationError):
            SaleService.list_sales(self.shop, start_date='yesterday')


class ConcurrentSaleTest(TransactionTestCase):
    """Sales and adjustments racing on separate connections"""

    LOSING_ERRORS = (InsufficientStock, InsufficientPoints, PersistenceTimeout)

    def setUp(self):
        self.shop = ShopFactory()
        LoyaltyConfigFactory(shop=self.shop)
        self.product = ProductFactory(shop=self.shop, price=Decimal('10000.00'), stock_quantity=1)
        self.customer = CustomerFactory(shop=self.shop)
        PointsLedgerService.adjust_points(self.shop, self.customer.id, 100, 'opening balance')

    def race(self, *calls):
        outcomes = [None] * len(calls)
        barrier = threading.Barrier(len(calls))

        def run(index, call):
            barrier.wait()
            try:
                call()
                outcomes[index] = 'ok'
            except self.LOSING_ERRORS as exc:
                outcomes[index] = exc
            except Exception as exc:
                outcomes[index] = ('unexpected', exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=run, args=(i, call)) for i, call in enumerate(calls)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def sell(self, points_to_redeem=0):
        return lambda: SaleService.record_sale(
            self.shop, [{'product_id': self.product.id, 'quantity': 1}],
            customer_id=self.customer.id, points_to_redeem=points_to_redeem,
        )

    def test_sales_and_adjustment_on_same_customer(self):
        outcomes = self.race(
            self.sell(points_to_redeem=60),
            self.sell(points_to_redeem=60),
            lambda: PointsLedgerService.adjust_points(self.shop, self.customer.id, -60, 'correction'),
        )

        for outcome in outcomes:
            self.assertTrue(
                outcome == 'ok' or isinstance(outcome, self.LOSING_ERRORS),
                f"unexpected outcome {outcome!r}",
            )
        sold = outcomes[:2].count('ok')
        self.assertLessEqual(sold, 1)
        self.assertLessEqual(outcomes.count('ok'), 1)

        self.product.refresh_from_db()
        self.customer.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1 - sold)
        self.assertEqual(Sale.objects.count(), sold)
        self.assertGreaterEqual(self.customer.available_points, 0)
        ledger_sum = sum(PointTransaction.objects.filter(customer=self.customer).values_list('points', flat=True))
        self.assertEqual(ledger_sum, self.customer.available_points)

    def test_concurrent_sales_never_oversell(self):
        Product.objects.filter(pk=self.product.pk).update(stock_quantity=2)
        outcomes = self.race(self.sell(), self.sell(), self.sell())

        for outcome in outcomes:
            self.assertTrue(
                outcome == 'ok' or isinstance(outcome, self.LOSING_ERRORS),
                f"unexpected outcome {outcome!r}",
            )
        sold = outcomes.count('ok')
        self.assertLessEqual(sold, 2)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 2 - sold)
        self.assertEqual(Sale.objects.count(), sold)

    @skipUnlessDBFeature('has_select_for_update')
    def test_row_locks_serialize_sales(self):
        # With row locks the third sale waits and then sees the empty shelf
        Product.objects.filter(pk=self.product.pk).update(stock_quantity=2)
        outcomes = self.race(self.sell(), self.sell(), self.sell())

        self.assertEqual(outcomes.count('ok'), 2)
        self.assertTrue(all(isinstance(o, InsufficientStock) for o in outcomes if o != 'ok'))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)
