"""
Customer service for registration, lookup and profile maintenance.

Loyalty balances are never written here; see apps.loyalty.services.ledger_service.
"""
import logging
from typing import Dict, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q

from apps.common.constants import DEFAULT_TIER
from apps.common.exceptions import CustomerNotFound, ValidationError
from apps.common.validators import validate_mobile
from ..models import Customer

logger = logging.getLogger(__name__)


class CustomerService:
    """Service class for customer profile operations"""

    PROFILE_FIELDS = (
        'first_name', 'last_name', 'mobile_number', 'email', 'birth_date', 'notes', 'is_active',
    )

    @staticmethod
    def get_customer(shop, customer_id, active_only: bool = True) -> Customer:
        """Get a customer of the shop or raise CustomerNotFound"""
        queryset = Customer.objects.filter(shop=shop, id=customer_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        customer = queryset.first()
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found")
        return customer

    @staticmethod
    def lock_customer(shop, customer_id) -> Customer:
        """
        Read an active customer row for update. Must be called inside
        transaction.atomic(); the lock is held until that block exits.
        """
        customer = (
            Customer.objects.select_for_update()
            .filter(shop=shop, id=customer_id, is_active=True)
            .first()
        )
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found")
        return customer

    @staticmethod
    def list_customers(shop, search: Optional[str] = None):
        queryset = Customer.objects.filter(shop=shop, is_active=True)
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(mobile_number__icontains=search)
            )
        return queryset.order_by('-created_at', '-id')

    @staticmethod
    def get_customer_by_mobile(shop, mobile: str) -> Customer:
        mobile_number = validate_mobile(mobile)
        customer = Customer.objects.filter(shop=shop, mobile_number=mobile_number, is_active=True).first()
        if customer is None:
            raise CustomerNotFound(f"No customer with mobile number {mobile_number}")
        return customer

    @staticmethod
    def register_customer(shop, data: Dict) -> Customer:
        """Register a new loyalty member. New members start at bronze with no points."""
        first_name = (data.get('first_name') or '').strip()
        if not first_name:
            raise ValidationError("First name is required.")
        mobile_number = validate_mobile(data.get('mobile_number'))

        if Customer.objects.filter(shop=shop, mobile_number=mobile_number).exists():
            raise ValidationError(
                "Customer with this mobile number already exists.",
                mobile_number=mobile_number,
            )

        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    shop=shop,
                    first_name=first_name,
                    last_name=(data.get('last_name') or '').strip(),
                    mobile_number=mobile_number,
                    email=data.get('email') or '',
                    birth_date=data.get('birth_date'),
                    notes=data.get('notes') or '',
                    total_points=0,
                    available_points=0,
                    tier=DEFAULT_TIER,
                )
        except IntegrityError:
            # Lost a race against a concurrent registration of the same number
            raise ValidationError(
                "Customer with this mobile number already exists.",
                mobile_number=mobile_number,
            )

        logger.info(f"Registered customer {customer.id} in shop {shop.id}")
        return customer

    @staticmethod
    @transaction.atomic
    def update_profile(shop, customer_id, data: Dict) -> Customer:
        """Update profile fields only; balances and tier are not writable here"""
        customer = (
            Customer.objects.select_for_update()
            .filter(shop=shop, id=customer_id)
            .first()
        )
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found")

        unknown = set(data) - set(CustomerService.PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}.")

        changed = []
        if 'mobile_number' in data:
            mobile_number = validate_mobile(data['mobile_number'])
            if mobile_number != customer.mobile_number:
                in_use = Customer.objects.filter(
                    shop=shop, mobile_number=mobile_number
                ).exclude(pk=customer.pk).exists()
                if in_use:
                    raise ValidationError("Mobile number already in use by another customer.")
                customer.mobile_number = mobile_number
                changed.append('mobile_number')

        if 'first_name' in data:
            first_name = (data['first_name'] or '').strip()
            if not first_name:
                raise ValidationError("First name is required.")
            customer.first_name = first_name
            changed.append('first_name')

        for field in ('last_name', 'email', 'notes'):
            if field in data:
                setattr(customer, field, data[field] or '')
                changed.append(field)

        if 'birth_date' in data:
            customer.birth_date = data['birth_date']
            changed.append('birth_date')

        if 'is_active' in data:
            customer.is_active = bool(data['is_active'])
            changed.append('is_active')

        if changed:
            try:
                with transaction.atomic():
                    customer.save(update_fields=changed + ['updated_at'])
            except IntegrityError:
                # Another customer took the number after the check above
                raise ValidationError(
                    "Mobile number already in use by another customer.",
                    mobile_number=customer.mobile_number,
                )
        return customer

    @staticmethod
    def deactivate_customer(shop, customer_id) -> Customer:
        """Soft-deactivate a customer; customers are never deleted"""
        customer = CustomerService.update_profile(shop, customer_id, {'is_active': False})
        logger.info(f"Deactivated customer {customer.id} in shop {shop.id}")
        return customer
