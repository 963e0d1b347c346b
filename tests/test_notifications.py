"""
Tests for loyalty notifications.
Delivery happens after commit and can never fail a sale.
"""
from decimal import Decimal
from unittest import mock

import requests
from django.test import TestCase, override_settings

from apps.common.exceptions import InsufficientStock
from apps.loyalty.services import LoyaltyNotificationService, LoyaltyRules, PointsLedgerService
from apps.sales.models import Sale
from apps.sales.services import SaleService
from tests.factories import CustomerFactory, LoyaltyConfigFactory, ProductFactory, ShopFactory


class DeliverTest(TestCase):

    @override_settings(LOYALTY_SMS_ENABLED=False)
    def test_disabled_sms_only_logs(self):
        with mock.patch('apps.loyalty.services.notification_service.requests.post') as post:
            self.assertFalse(LoyaltyNotificationService.deliver('09120000000', 'hello'))
        post.assert_not_called()

    @override_settings(LOYALTY_SMS_ENABLED=True, SMS_GATEWAY_URL='https://sms.example.com/send',
                       SMS_GATEWAY_API_KEY='secret')
    def test_enabled_sms_posts_to_gateway(self):
        with mock.patch('apps.loyalty.services.notification_service.requests.post') as post:
            self.assertTrue(LoyaltyNotificationService.deliver('09120000000', 'hello'))
        post.assert_called_once()
        args, kwargs = post.call_args
        self.assertEqual(args[0], 'https://sms.example.com/send')
        self.assertEqual(kwargs['json'], {'to': '09120000000', 'message': 'hello'})
        self.assertEqual(kwargs['headers'], {'Authorization': 'Bearer secret'})

    @override_settings(LOYALTY_SMS_ENABLED=True, SMS_GATEWAY_URL='https://sms.example.com/send')
    def test_gateway_failure_is_swallowed(self):
        with mock.patch(
            'apps.loyalty.services.notification_service.requests.post',
            side_effect=requests.ConnectionError('gateway down'),
        ):
            with self.assertLogs('apps.loyalty.services.notification_service', level='ERROR'):
                self.assertFalse(LoyaltyNotificationService.deliver('09120000000', 'hello'))

    def test_messages(self):
        self.assertEqual(
            LoyaltyNotificationService.points_earned_message(5, 105),
            "You earned 5 points. Balance: 105 points.",
        )
        self.assertIn('Silver', LoyaltyNotificationService.points_earned_message(5, 1005, 'silver'))


class SaleNotificationTest(TestCase):

    def setUp(self):
        self.shop = ShopFactory()
        LoyaltyConfigFactory(shop=self.shop)
        self.product = ProductFactory(shop=self.shop, price=Decimal('6000.00'), stock_quantity=3)
        self.customer = CustomerFactory(shop=self.shop, total_points=995, available_points=995)

    def test_notifications_sent_after_commit(self):
        with mock.patch.object(LoyaltyNotificationService, 'deliver') as deliver:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                SaleService.record_sale(
                    self.shop, [{'product_id': self.product.id, 'quantity': 1}],
                    customer_id=self.customer.id, points_to_redeem=10,
                )
                deliver.assert_not_called()

        self.assertEqual(len(callbacks), 2)
        self.assertEqual(deliver.call_count, 2)
        earned_message = deliver.call_args_list[1][0][1]
        self.assertIn('You earned 5 points', earned_message)

    def test_no_notification_for_rolled_back_sale(self):
        with mock.patch.object(LoyaltyNotificationService, 'deliver') as deliver:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with self.assertRaises(InsufficientStock):
                    SaleService.record_sale(
                        self.shop, [{'product_id': self.product.id, 'quantity': 5}],
                        customer_id=self.customer.id,
                    )
        self.assertEqual(callbacks, [])
        deliver.assert_not_called()

    @override_settings(LOYALTY_SMS_ENABLED=True, SMS_GATEWAY_URL='https://sms.example.com/send')
    def test_gateway_failure_does_not_affect_sale(self):
        with mock.patch(
            'apps.loyalty.services.notification_service.requests.post',
            side_effect=requests.Timeout('slow gateway'),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                sale = SaleService.record_sale(
                    self.shop, [{'product_id': self.product.id, 'quantity': 1}],
                    customer_id=self.customer.id,
                )
        self.assertTrue(Sale.objects.filter(pk=sale.pk).exists())
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.total_points, 1001)


class LedgerNotificationTest(TestCase):

    def setUp(self):
        self.shop = ShopFactory()
        self.rules = LoyaltyRules.from_config(LoyaltyConfigFactory(shop=self.shop))
        self.customer = CustomerFactory(shop=self.shop, total_points=500, available_points=500)

    def test_redeem_schedules_redemption_message(self):
        with mock.patch.object(LoyaltyNotificationService, 'deliver') as deliver:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                PointsLedgerService.redeem(self.customer, 20, self.rules)

        self.assertEqual(len(callbacks), 1)
        mobile, message = deliver.call_args[0]
        self.assertEqual(mobile, self.customer.mobile_number)
        self.assertEqual(
            message,
            "You redeemed 20 points for a discount of 2000. Balance: 480 points.",
        )
