"""
Sale recording and query views.
"""
import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.models import Shop
from apps.common.utils import success_response, paginated_response
from ..serializers import SaleCreateSerializer, SaleDetailSerializer, SaleListSerializer
from ..services import SaleService

logger = logging.getLogger(__name__)


class SaleListCreateView(APIView):
    """
    GET /api/shops/{shop_id}/sales/ - List sales (?start_date=&end_date=&customer_id=)
    POST /api/shops/{shop_id}/sales/ - Record a sale
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        queryset = SaleService.list_sales(
            shop,
            start_date=request.query_params.get('start_date'),
            end_date=request.query_params.get('end_date'),
            customer_id=request.query_params.get('customer_id'),
        )
        return paginated_response(queryset, SaleListSerializer, request, 'Sale list retrieved successfully')

    def post(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        logger.info(f"Recording sale in shop {shop.id} with {len(data['items'])} line(s)")

        sale = SaleService.record_sale(
            shop,
            [dict(item) for item in data['items']],
            customer_id=data.get('customer_id'),
            points_to_redeem=data['points_to_redeem'],
            notes=data['notes'],
        )
        sale = SaleService.get_sale(shop, sale.id)
        return success_response(SaleDetailSerializer(sale).data, 'Sale recorded successfully', status.HTTP_201_CREATED)


class SaleDetailView(APIView):
    """GET /api/shops/{shop_id}/sales/{sale_id}/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id, sale_id):
        shop = Shop.get_active(shop_id)
        sale = SaleService.get_sale(shop, sale_id)
        return success_response(SaleDetailSerializer(sale).data, 'Sale retrieved successfully')
