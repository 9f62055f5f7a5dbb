from rest_framework import serializers
from apps.invoices.serializers import InvoiceListSerializer
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Serializer for Customer model."""

    class Meta:
        model = Customer
        fields = ['id', 'customer_code', 'name', 'phone', 'created_at']
        read_only_fields = fields


class CustomerStatsSerializer(serializers.ModelSerializer):
    """Customer with order count and spend over non-deleted invoices."""

    total_orders = serializers.IntegerField(read_only=True)
    total_spend = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'customer_code', 'name', 'phone', 'total_orders', 'total_spend']
        read_only_fields = fields


class CustomerDetailSerializer(CustomerSerializer):
    """Customer with their non-deleted invoices."""

    invoices = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['invoices']
        read_only_fields = fields

    def get_invoices(self, obj):
        return InvoiceListSerializer(self.context.get('invoices', []), many=True).data


class CustomerStatsFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for customer statistics.

    Query Parameters:
        start_date (date): Count invoices created on or after this date
        end_date (date): Count invoices created on or before this date
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs
