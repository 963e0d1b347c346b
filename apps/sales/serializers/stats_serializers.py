"""
Serializers for the shop statistics endpoints.
"""
from rest_framework import serializers

from apps.products.models import Product
from .sale_serializers import SaleListSerializer


def _money():
    return serializers.DecimalField(max_digits=None, decimal_places=2)


class SalesTotalsSerializer(serializers.Serializer):
    daily = _money()
    weekly = _money()
    monthly = _money()


class RecordCountsSerializer(serializers.Serializer):
    products = serializers.IntegerField()
    customers = serializers.IntegerField()
    transactions = serializers.IntegerField()


class TopProductSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    sales = _money()


class DashboardStatsSerializer(serializers.Serializer):
    """
    Output of StatsService.dashboard_stats.
    Used for: GET /api/shops/{shop_id}/stats/
    """
    sales = SalesTotalsSerializer()
    counts = RecordCountsSerializer()
    top_products = TopProductSerializer(many=True)
    recent_sales = SaleListSerializer(many=True)


class SalesBucketSerializer(serializers.Serializer):
    date = serializers.CharField()
    total = _money()
    count = serializers.IntegerField()


class SalesAnalyticsSerializer(serializers.Serializer):
    """Used for: GET /api/shops/{shop_id}/stats/sales/"""
    period = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    sales = SalesBucketSerializer(many=True)


class LowStockProductSerializer(serializers.ModelSerializer):

    class Meta:
        model = Product
        fields = ['id', 'name', 'price', 'stock_quantity', 'low_stock_threshold', 'updated_at']
        read_only_fields = fields


class InventoryStatsSerializer(serializers.Serializer):
    """Used for: GET /api/shops/{shop_id}/stats/inventory/"""
    low_stock_products = LowStockProductSerializer(many=True)
    out_of_stock_count = serializers.IntegerField()
    inventory_value = _money()
