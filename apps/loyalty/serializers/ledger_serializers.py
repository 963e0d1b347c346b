"""
Points ledger serializers for history, summary and manual adjustment.
"""
from rest_framework import serializers

from apps.customers.serializers import CustomerDetailSerializer
from ..models import PointTransaction


class PointTransactionSerializer(serializers.ModelSerializer):
    entry_type_display = serializers.CharField(source='get_entry_type_display', read_only=True)

    class Meta:
        model = PointTransaction
        fields = [
            'id', 'entry_type', 'entry_type_display', 'points', 'balance_after', 'description',
            'sale', 'expiry_date', 'is_expired', 'created_at',
        ]
        read_only_fields = fields


class LoyaltySummarySerializer(serializers.Serializer):
    """
    Output of PointsLedgerService.get_loyalty_summary.
    Used for: GET /api/shops/{shop_id}/customers/{id}/loyalty/
    """
    customer = CustomerDetailSerializer()
    program_enabled = serializers.BooleanField()
    total_points = serializers.IntegerField()
    available_points = serializers.IntegerField()
    tier = serializers.CharField()
    # Exact multiplier the engine applies, e.g. "1.125"
    tier_multiplier = serializers.CharField()
    next_tier = serializers.CharField(allow_null=True)
    points_to_next_tier = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    redemption_value = serializers.IntegerField()
    entries = PointTransactionSerializer(many=True)


class PointsAdjustmentSerializer(serializers.Serializer):
    """Input for POST /api/shops/{shop_id}/customers/{id}/points/"""
    points = serializers.IntegerField()
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def validate_points(self, value):
        if value == 0:
            raise serializers.ValidationError("Points adjustment must not be zero.")
        return value
