"""
Customer notifications for loyalty events.

Delivery is fire-and-forget: callers schedule it with transaction.on_commit
and a failed send is logged and dropped.
"""
import logging

import requests
from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)


class SmsGateway:
    """Minimal HTTP SMS gateway client"""

    def __init__(self):
        self.url = settings.SMS_GATEWAY_URL
        self.api_key = settings.SMS_GATEWAY_API_KEY
        self.timeout = settings.SMS_GATEWAY_TIMEOUT

    def send(self, mobile_number, message):
        response = requests.post(
            self.url,
            json={'to': mobile_number, 'message': message},
            headers={'Authorization': f'Bearer {self.api_key}'} if self.api_key else {},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response


class LoyaltyNotificationService:
    """Builds and sends loyalty messages"""

    @staticmethod
    def deliver(mobile_number, message):
        """Send one message. Never raises."""
        if not settings.LOYALTY_SMS_ENABLED or not settings.SMS_GATEWAY_URL:
            logger.info(f"SMS disabled, not sending to {mobile_number}: {message}")
            return False
        try:
            SmsGateway().send(mobile_number, message)
        except Exception:
            logger.exception(f"Failed to send SMS to {mobile_number}")
            return False
        logger.info(f"SMS sent to {mobile_number}")
        return True

    @staticmethod
    def points_earned_message(points, available_points, new_tier=None):
        message = f"You earned {points} points. Balance: {available_points} points."
        if new_tier:
            message += f" Congratulations, you are now {new_tier.title()}!"
        return message

    @staticmethod
    def points_redeemed_message(points, discount_amount, available_points):
        return (
            f"You redeemed {points} points for a discount of {discount_amount}. "
            f"Balance: {available_points} points."
        )

    @staticmethod
    def schedule(mobile_number, message):
        """Queue a message to be sent once the surrounding transaction commits"""
        transaction.on_commit(lambda: LoyaltyNotificationService.deliver(mobile_number, message))

    @staticmethod
    def notify_points_earned(customer, points, tier_changed=False):
        if points <= 0 and not tier_changed:
            return
        message = LoyaltyNotificationService.points_earned_message(
            points, customer.available_points, customer.tier if tier_changed else None
        )
        LoyaltyNotificationService.schedule(customer.mobile_number, message)

    @staticmethod
    def notify_points_redeemed(customer, points, discount_amount):
        message = LoyaltyNotificationService.points_redeemed_message(
            points, discount_amount, customer.available_points
        )
        LoyaltyNotificationService.schedule(customer.mobile_number, message)
