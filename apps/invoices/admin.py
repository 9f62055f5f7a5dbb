from django.contrib import admin
from .models import Invoice, InvoiceItem, InvoiceSequence


class InvoiceItemInline(admin.TabularInline):
    """Invoice lines, read-only: they are computed by the invoice service."""
    model = InvoiceItem
    extra = 0
    fields = [
        'item_name',
        'hsn_code',
        'rate',
        'quantity',
        'gst_percentage',
        'taxable_value',
        'cgst_amount',
        'sgst_amount',
        'total',
    ]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Admin interface for invoices.

    Amounts and numbers are read-only; edits must go through the API so
    totals are recomputed. Soft-deleted invoices are listed too.
    """

    list_display = [
        'invoice_number',
        'customer_name',
        'payment_mode',
        'gst_mode',
        'grand_total',
        'is_edited',
        'deleted_at',
        'created_at',
    ]
    list_filter = ['payment_mode', 'gst_mode', 'invoice_type', 'is_edited', 'created_at']
    search_fields = ['invoice_number', 'customer_name', 'customer_phone']
    readonly_fields = [
        'invoice_number',
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
    ]
    inlines = [InvoiceItemInline]
    date_hierarchy = 'created_at'

    def get_queryset(self, request):
        return Invoice.all_objects.select_related('customer')


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(admin.ModelAdmin):
    list_display = ['financial_year', 'last_number', 'updated_at']
    readonly_fields = ['updated_at']
