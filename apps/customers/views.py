from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.invoices.serializers import InvoiceListSerializer
from .serializers import (
    CustomerSerializer,
    CustomerDetailSerializer,
    CustomerStatsSerializer,
    CustomerStatsFilterSerializer,
)
from .services import (
    CustomerNotFoundError,
    get_customer_by_id,
    get_customer_invoices,
    get_customer_stats,
    list_customers,
)


class CustomerPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CustomerViewSet(viewsets.ViewSet):
    """
    Read-only customer directory for staff.

    list: All customers, newest first
    retrieve: One customer with their invoices
    """

    permission_classes = [IsAuthenticated, IsAdminUser]
    pagination_class = CustomerPagination
    lookup_value_regex = r'\d+'

    def _get_customer(self, pk):
        try:
            return get_customer_by_id(customer_id=pk)
        except CustomerNotFoundError as e:
            raise NotFound(str(e))

    @extend_schema(responses={200: CustomerSerializer(many=True)}, tags=['customers'])
    def list(self, request):
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(list_customers(), request, view=self)
        return paginator.get_paginated_response(CustomerSerializer(page, many=True).data)

    @extend_schema(responses={200: CustomerDetailSerializer}, tags=['customers'])
    def retrieve(self, request, pk=None):
        customer = self._get_customer(pk)
        invoices = get_customer_invoices(customer_id=customer.id)
        serializer = CustomerDetailSerializer(customer, context={'invoices': invoices})
        return Response(serializer.data)

    @extend_schema(responses={200: InvoiceListSerializer(many=True)}, tags=['customers'])
    @action(detail=True, methods=['get'])
    def invoices(self, request, pk=None):
        """
        Non-deleted invoices of a customer.

        GET /api/customers/{id}/invoices/
        """
        customer = self._get_customer(pk)
        invoices = get_customer_invoices(customer_id=customer.id)
        return Response(InvoiceListSerializer(invoices, many=True).data)

    @extend_schema(
        parameters=[CustomerStatsFilterSerializer],
        responses={200: CustomerStatsSerializer(many=True)},
        tags=['customers'],
    )
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Orders and spend per customer, biggest spenders first.

        GET /api/customers/stats/?start_date=2025-04-01
        """
        filter_serializer = CustomerStatsFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        customers = get_customer_stats(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
        return Response(CustomerStatsSerializer(customers, many=True).data)
