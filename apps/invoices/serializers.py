from decimal import Decimal
from rest_framework import serializers
from .models import Invoice, InvoiceItem, InvoiceType, PaymentMode, GstMode


# =============================================================================
# Input Serializers
# =============================================================================

class InvoiceFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for invoice listing.

    Query Parameters:
        start_date (date): Invoices created on or after this date
        end_date (date): Invoices created on or before this date
        include_deleted (bool): Also return soft-deleted invoices
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    include_deleted = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


class LineItemInputSerializer(serializers.Serializer):
    """One line item as entered on the invoice form."""

    item_name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    hsn_code = serializers.CharField(max_length=20)
    rate = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
    quantity = serializers.IntegerField(min_value=1)
    gst_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('100')
    )


class InvoiceCreateSerializer(serializers.Serializer):
    """
    Validate input for creating an invoice.

    gst_mode may be omitted; the shop default for the payment mode is used.
    cash_amount / card_amount only matter for Cash+Card.
    """

    invoice_type = serializers.ChoiceField(choices=InvoiceType.choices, default=InvoiceType.B2C)
    customer_name = serializers.CharField(max_length=200)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    customer_gst = serializers.CharField(max_length=15, required=False, allow_blank=True, default='')
    payment_mode = serializers.ChoiceField(choices=PaymentMode.choices)
    gst_mode = serializers.ChoiceField(choices=GstMode.choices, required=False, allow_null=True)
    items = LineItemInputSerializer(many=True, allow_empty=False)
    cash_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    card_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


class InvoiceUpdateSerializer(serializers.Serializer):
    """
    Validate input for editing an invoice.

    Every field is optional. gst_mode is accepted so clients can send the
    whole form back, but it never changes the stored mode.
    """

    customer_name = serializers.CharField(max_length=200, required=False)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    customer_gst = serializers.CharField(max_length=15, required=False, allow_blank=True)
    payment_mode = serializers.ChoiceField(choices=PaymentMode.choices, required=False)
    gst_mode = serializers.ChoiceField(choices=GstMode.choices, required=False, allow_null=True)
    items = LineItemInputSerializer(many=True, allow_empty=False, required=False)
    cash_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    card_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


class LineItemCalculationInputSerializer(serializers.Serializer):
    """Validate input for a stateless line-item calculation."""

    rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))
    quantity = serializers.IntegerField(min_value=1)
    gst_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('100')
    )
    gst_mode = serializers.ChoiceField(choices=GstMode.choices)


# =============================================================================
# Output Serializers
# =============================================================================

class InvoiceItemSerializer(serializers.ModelSerializer):
    """Serializer for stored invoice lines."""

    class Meta:
        model = InvoiceItem
        fields = [
            'id',
            'item_name',
            'description',
            'hsn_code',
            'rate',
            'quantity',
            'gst_percentage',
            'taxable_value',
            'gst_amount',
            'cgst_percentage',
            'cgst_amount',
            'sgst_percentage',
            'sgst_amount',
            'total',
        ]
        read_only_fields = fields


class InvoiceListSerializer(serializers.ModelSerializer):
    """Lightweight invoice serializer for list views."""

    class Meta:
        model = Invoice
        fields = [
            'id',
            'invoice_number',
            'invoice_type',
            'customer_name',
            'customer_phone',
            'payment_mode',
            'gst_mode',
            'subtotal',
            'gst_amount',
            'grand_total',
            'cash_amount',
            'card_amount',
            'is_edited',
            'deleted_at',
            'created_at',
        ]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """Full invoice with line items."""

    items = InvoiceItemSerializer(many=True, read_only=True)
    customer_code = serializers.CharField(source='customer.customer_code', read_only=True, default=None)

    class Meta:
        model = Invoice
        fields = [
            'id',
            'invoice_number',
            'invoice_type',
            'customer',
            'customer_code',
            'customer_name',
            'customer_phone',
            'customer_gst',
            'payment_mode',
            'gst_mode',
            'subtotal',
            'gst_amount',
            'grand_total',
            'cash_amount',
            'card_amount',
            'is_edited',
            'deleted_at',
            'created_at',
            'updated_at',
            'items',
        ]
        read_only_fields = fields


class LineItemCalculationSerializer(serializers.Serializer):
    taxable_value = serializers.DecimalField(max_digits=12, decimal_places=2)
    gst_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    cgst_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    sgst_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class NextInvoiceNumberSerializer(serializers.Serializer):
    invoice_number = serializers.CharField()


class PaymentSummarySerializer(serializers.Serializer):
    """Serializer for cash reconciliation totals."""

    cash_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    card_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoice_count = serializers.IntegerField()


class SalesStatsSerializer(serializers.Serializer):
    today_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    week_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
