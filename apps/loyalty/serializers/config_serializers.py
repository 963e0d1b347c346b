"""
Loyalty config serializers.
"""
from rest_framework import serializers

from ..models import LoyaltyConfig


class LoyaltyConfigSerializer(serializers.ModelSerializer):
    """
    Loyalty config output.
    Used for: GET/PUT /api/shops/{shop_id}/loyalty/config/
    Updates are validated by LoyaltyConfigService, not here.
    """

    class Meta:
        model = LoyaltyConfig
        fields = [
            'id', 'shop', 'is_enabled', 'points_per_unit', 'redemption_value', 'points_expiry_days',
            'tier_thresholds', 'tier_multipliers', 'special_rules', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PreviewPointsSerializer(serializers.Serializer):
    """Input for POST /api/shops/{shop_id}/loyalty/preview-points/"""
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    customer_id = serializers.IntegerField(required=False, allow_null=True)
