"""
Customer serializers for list, detail, registration, and update operations.
"""
from rest_framework import serializers

from apps.common.validators import normalize_mobile
from ..models import Customer


class CustomerListSerializer(serializers.ModelSerializer):
    """
    Serializer for customer list view - minimal fields for list display.
    Used for: GET /api/shops/{shop_id}/customers/
    """
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'full_name', 'mobile_number', 'tier', 'available_points', 'created_at']
        read_only_fields = fields


class CustomerDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for customer detail view.
    Balances and tier are owned by the points ledger and are always read-only.
    """
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            'id', 'shop', 'first_name', 'last_name', 'full_name', 'mobile_number', 'email',
            'birth_date', 'notes', 'total_points', 'available_points', 'tier', 'total_spent',
            'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CustomerCreateSerializer(serializers.Serializer):
    """
    Input for customer registration.
    Used for: POST /api/shops/{shop_id}/customers/
    """
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    mobile_number = serializers.CharField(max_length=20)
    email = serializers.EmailField(required=False, allow_blank=True)
    birth_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_mobile_number(self, value):
        return normalize_mobile(value)


class CustomerUpdateSerializer(serializers.Serializer):
    """
    Partial profile update.
    Used for: PUT /api/shops/{shop_id}/customers/{id}/
    """
    first_name = serializers.CharField(max_length=100, required=False)
    last_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    mobile_number = serializers.CharField(max_length=20, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    birth_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
