"""
Sale serializers for recording and displaying sales.
"""
from rest_framework import serializers

from apps.loyalty.serializers import PointTransactionSerializer
from ..models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = SaleItem
        fields = ['id', 'product', 'product_name', 'quantity', 'price_at_sale', 'subtotal']
        read_only_fields = fields


class SaleListSerializer(serializers.ModelSerializer):
    """
    Serializer for sale list view.
    Used for: GET /api/shops/{shop_id}/sales/
    """
    customer_name = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            'id', 'customer', 'customer_name', 'total_amount', 'points_earned', 'points_redeemed',
            'status', 'item_count', 'transaction_date',
        ]
        read_only_fields = fields

    def get_customer_name(self, obj):
        return obj.customer.full_name if obj.customer else None

    def get_item_count(self, obj):
        return len(obj.items.all())


class SaleDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for sale detail view, with line items and the ledger entries the sale produced.
    Used for: GET /api/shops/{shop_id}/sales/{id}/ and the POST response
    """
    items = SaleItemSerializer(many=True, read_only=True)
    point_transactions = PointTransactionSerializer(many=True, read_only=True)
    customer_available_points = serializers.SerializerMethodField()
    customer_tier = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            'id', 'shop', 'customer', 'subtotal_amount', 'discount_amount', 'total_amount',
            'points_earned', 'points_redeemed', 'status', 'notes', 'transaction_date',
            'items', 'point_transactions', 'customer_available_points', 'customer_tier', 'created_at',
        ]
        read_only_fields = fields

    def get_customer_available_points(self, obj):
        return obj.customer.available_points if obj.customer else None

    def get_customer_tier(self, obj):
        return obj.customer.tier if obj.customer else None


class SaleLineSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class SaleCreateSerializer(serializers.Serializer):
    """
    Input for POST /api/shops/{shop_id}/sales/
    Line prices are always taken from the product.
    """
    items = SaleLineSerializer(many=True, allow_empty=False)
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    points_to_redeem = serializers.IntegerField(required=False, min_value=0, default=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
