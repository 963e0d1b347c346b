"""
Customer registration, lookup and profile views.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.models import Shop
from apps.common.utils import success_response, paginated_response
from ..serializers import (
    CustomerListSerializer, CustomerDetailSerializer,
    CustomerCreateSerializer, CustomerUpdateSerializer,
)
from ..services import CustomerService


class CustomerListCreateView(APIView):
    """
    GET /api/shops/{shop_id}/customers/ - List active customers (?search=)
    POST /api/shops/{shop_id}/customers/ - Register a customer
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        queryset = CustomerService.list_customers(shop, request.query_params.get('search'))
        return paginated_response(queryset, CustomerListSerializer, request, 'Customer list retrieved successfully')

    def post(self, request, shop_id):
        shop = Shop.get_active(shop_id)
        serializer = CustomerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = CustomerService.register_customer(shop, serializer.validated_data)
        return success_response(
            CustomerDetailSerializer(customer).data,
            'Customer registered successfully',
            status.HTTP_201_CREATED,
        )


class CustomerByMobileView(APIView):
    """GET /api/shops/{shop_id}/customers/mobile/{mobile}/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id, mobile):
        shop = Shop.get_active(shop_id)
        customer = CustomerService.get_customer_by_mobile(shop, mobile)
        return success_response(CustomerDetailSerializer(customer).data, 'Customer retrieved successfully')


class CustomerDetailView(APIView):
    """
    GET /api/shops/{shop_id}/customers/{id}/ - Customer detail
    PUT /api/shops/{shop_id}/customers/{id}/ - Partial profile update
    DELETE /api/shops/{shop_id}/customers/{id}/ - Deactivate
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, shop_id, customer_id):
        shop = Shop.get_active(shop_id)
        customer = CustomerService.get_customer(shop, customer_id)
        return success_response(CustomerDetailSerializer(customer).data, 'Customer retrieved successfully')

    def put(self, request, shop_id, customer_id):
        shop = Shop.get_active(shop_id)
        serializer = CustomerUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        customer = CustomerService.update_profile(shop, customer_id, serializer.validated_data)
        return success_response(CustomerDetailSerializer(customer).data, 'Customer updated successfully')

    def delete(self, request, shop_id, customer_id):
        shop = Shop.get_active(shop_id)
        customer = CustomerService.deactivate_customer(shop, customer_id)
        return success_response(CustomerDetailSerializer(customer).data, 'Customer deactivated successfully')
