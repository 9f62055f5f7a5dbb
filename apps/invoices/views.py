from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.store_settings.services import get_invoice_config
from .exceptions import InvoiceNotFound, InvoiceNumberConflict
from .serializers import (
    InvoiceSerializer,
    InvoiceListSerializer,
    LineItemCalculationSerializer,
    NextInvoiceNumberSerializer,
    PaymentSummarySerializer,
    SalesStatsSerializer,
    # Input serializers
    InvoiceCreateSerializer,
    InvoiceUpdateSerializer,
    InvoiceFilterSerializer,
    LineItemCalculationInputSerializer,
)
from .services import (
    InvoiceValidationError,
    InvoiceNotFoundError,
    InvoiceNumberConflictError,
    calculate_line_item,
    create_invoice,
    get_invoice_by_id,
    get_payment_summary,
    get_sales_stats,
    list_invoices,
    peek_next_invoice_number,
    soft_delete_invoice,
    update_invoice,
    validate_line_item_input,
)


def _raise_api_error(error):
    """Translate an invoice service error into the matching DRF exception."""
    if isinstance(error, InvoiceNotFoundError):
        raise InvoiceNotFound(str(error))
    if isinstance(error, InvoiceNumberConflictError):
        raise InvoiceNumberConflict()
    raise ValidationError({'detail': str(error)})


class InvoicePagination(PageNumberPagination):
    """Custom pagination for invoices."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class InvoiceViewSet(viewsets.ViewSet):
    """
    ViewSet for invoices.

    list: Invoices newest first (filterable by date range)
    create: Create an invoice, allocating its number
    retrieve: Get one invoice with its items
    update / partial_update: Edit an invoice (GST mode stays as created)
    destroy: Soft-delete an invoice
    """

    permission_classes = [IsAuthenticated]
    pagination_class = InvoicePagination
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        """Sales statistics are staff only."""
        if self.action == 'stats':
            return [IsAuthenticated(), IsAdminUser()]
        return super().get_permissions()

    def _filter_params(self, request):
        filter_serializer = InvoiceFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return filter_serializer.validated_data

    @extend_schema(
        parameters=[InvoiceFilterSerializer],
        responses={200: InvoiceListSerializer(many=True)},
        tags=['invoices'],
    )
    def list(self, request):
        params = self._filter_params(request)
        queryset = list_invoices(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            include_deleted=params.get('include_deleted', False),
        )

        paginator = self.pagination_class()
        page = paginator.paginate_queryset(queryset, request, view=self)
        serializer = InvoiceListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @extend_schema(
        request=InvoiceCreateSerializer,
        responses={201: InvoiceSerializer},
        tags=['invoices'],
    )
    def create(self, request):
        serializer = InvoiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = create_invoice(**serializer.validated_data)
        except (InvoiceValidationError, InvoiceNumberConflictError) as e:
            _raise_api_error(e)

        invoice = get_invoice_by_id(invoice_id=invoice.id)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter('include_deleted', bool, description='Also find soft-deleted invoices'),
        ],
        responses={200: InvoiceSerializer},
        tags=['invoices'],
    )
    def retrieve(self, request, pk=None):
        params = self._filter_params(request)
        try:
            invoice = get_invoice_by_id(
                invoice_id=pk,
                include_deleted=params.get('include_deleted', False),
            )
        except InvoiceNotFoundError as e:
            _raise_api_error(e)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        request=InvoiceUpdateSerializer,
        responses={200: InvoiceSerializer},
        tags=['invoices'],
    )
    def update(self, request, pk=None):
        """
        Edit an invoice.

        PUT and PATCH behave the same: only fields present in the body change.
        A gst_mode in the body is ignored.
        """
        serializer = InvoiceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = update_invoice(invoice_id=pk, **serializer.validated_data)
        except (InvoiceValidationError, InvoiceNotFoundError) as e:
            _raise_api_error(e)

        invoice = get_invoice_by_id(invoice_id=invoice.id)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        request=InvoiceUpdateSerializer,
        responses={200: InvoiceSerializer},
        tags=['invoices'],
    )
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={204: None}, tags=['invoices'])
    def destroy(self, request, pk=None):
        try:
            soft_delete_invoice(invoice_id=pk)
        except InvoiceNotFoundError as e:
            _raise_api_error(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: NextInvoiceNumberSerializer}, tags=['invoices'])
    @action(detail=False, methods=['get'], url_path='next-number')
    def next_number(self, request):
        """
        Preview the next invoice number (nothing is reserved).

        GET /api/invoices/next-number/
        """
        config = get_invoice_config()
        invoice_number = peek_next_invoice_number(series_start=config.series_start)
        return Response({'invoice_number': invoice_number})

    @extend_schema(
        parameters=[InvoiceFilterSerializer],
        responses={200: PaymentSummarySerializer},
        tags=['invoices'],
    )
    @action(detail=False, methods=['get'], url_path='payment-summary')
    def payment_summary(self, request):
        """
        Cash and card totals of non-deleted invoices.

        GET /api/invoices/payment-summary/?start_date=2025-04-01&end_date=2025-04-30
        """
        params = self._filter_params(request)
        summary = get_payment_summary(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
        return Response(PaymentSummarySerializer(summary).data)

    @extend_schema(responses={200: SalesStatsSerializer}, tags=['invoices'])
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Sales for today, the last 7 days and this month.

        GET /api/invoices/stats/
        """
        return Response(SalesStatsSerializer(get_sales_stats()).data)

    @extend_schema(
        request=LineItemCalculationInputSerializer,
        responses={200: LineItemCalculationSerializer},
        tags=['invoices'],
    )
    @action(detail=False, methods=['post'])
    def calculate(self, request):
        """
        Compute the GST breakup of one line without saving anything.

        POST /api/invoices/calculate/
        Body: {"rate": "100.00", "quantity": 2, "gst_percentage": "18", "gst_mode": "inclusive"}
        """
        serializer = LineItemCalculationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = calculate_line_item(*validate_line_item_input(
                data['rate'],
                data['quantity'],
                data['gst_percentage'],
                data['gst_mode'],
            ))
        except InvoiceValidationError as e:
            _raise_api_error(e)

        return Response(LineItemCalculationSerializer(result).data)
