"""
Loyalty configuration views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.models import Shop
from apps.common.utils import success_response
from ..serializers import LoyaltyConfigSerializer, PreviewPointsSerializer
from ..services import LoyaltyConfigService, PointsLedgerService


class LoyaltyConfigView(APIView):
    """
    GET /api/shops/{shop_id}/loyalty/config/ - Current config (created with defaults on first read)
    PUT /api/shops/{shop_id}/loyalty/config/ - Partial update
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        config = LoyaltyConfigService.get_config(shop)
        return success_response(LoyaltyConfigSerializer(config).data, 'Loyalty config retrieved successfully')

    def put(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        config = LoyaltyConfigService.update_config(shop, dict(request.data.items()))
        return success_response(LoyaltyConfigSerializer(config).data, 'Loyalty config updated successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def preview_points(request, shop_id):
    """Points a sale would earn; 0 when the program is disabled"""
    shop = Shop.get_active(shop_id)
    serializer = PreviewPointsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    points = PointsLedgerService.preview_points(
        shop,
        serializer.validated_data['amount'],
        serializer.validated_data.get('customer_id'),
    )
    return success_response({'points': points}, 'Points preview calculated')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recompute_tiers(request, shop_id):
    """Re-resolve every customer's tier after thresholds change"""
    shop = Shop.get_active(shop_id)
    changed = LoyaltyConfigService.recompute_customer_tiers(shop)
    return success_response({'changed': changed}, 'Customer tiers recomputed')
