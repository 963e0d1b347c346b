"""
Shop statistics views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.models import Shop
from apps.common.utils import success_response
from ..serializers import DashboardStatsSerializer, InventoryStatsSerializer, SalesAnalyticsSerializer
from ..services import StatsService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request, shop_id):
    """GET /api/shops/{shop_id}/stats/"""
    shop = Shop.get_active(shop_id)
    stats = StatsService.dashboard_stats(shop)
    return success_response(DashboardStatsSerializer(stats).data, 'Dashboard stats retrieved successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_analytics(request, shop_id):
    """GET /api/shops/{shop_id}/stats/sales/?period=week|month|quarter|year&start_date=&end_date="""
    shop = Shop.get_active(shop_id)
    stats = StatsService.sales_analytics(
        shop,
        period=request.query_params.get('period', 'month'),
        start_date=request.query_params.get('start_date'),
        end_date=request.query_params.get('end_date'),
    )
    return success_response(SalesAnalyticsSerializer(stats).data, 'Sales analytics retrieved successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_stats(request, shop_id):
    """GET /api/shops/{shop_id}/stats/inventory/"""
    shop = Shop.get_active(shop_id)
    stats = StatsService.inventory_stats(shop)
    return success_response(InventoryStatsSerializer(stats).data, 'Inventory stats retrieved successfully')
