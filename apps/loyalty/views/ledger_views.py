"""
Customer loyalty summary and manual points adjustment views.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.models import Shop
from apps.common.utils import success_response
from ..serializers import LoyaltySummarySerializer, PointsAdjustmentSerializer
from ..services import PointsLedgerService


class CustomerLoyaltyView(APIView):
    """GET /api/shops/{shop_id}/customers/{customer_id}/loyalty/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id, customer_id):
        shop = Shop.get_active(shop_id)
        summary = PointsLedgerService.get_loyalty_summary(shop, customer_id)
        return success_response(LoyaltySummarySerializer(summary).data, 'Loyalty summary retrieved successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def adjust_customer_points(request, shop_id, customer_id):
    """Apply a signed manual correction to a customer's points"""
    shop = Shop.get_active(shop_id)
    serializer = PointsAdjustmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = PointsLedgerService.adjust_points(
        shop,
        customer_id,
        serializer.validated_data['points'],
        serializer.validated_data['description'],
    )
    return success_response({
        'entry_id': result.entry.id,
        'available_points': result.available_points,
        'total_points': result.total_points,
        'tier': result.new_tier,
        'tier_changed': result.tier_changed,
    }, 'Points adjusted successfully', status.HTTP_201_CREATED)
