from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone
from decimal import Decimal


class InvoiceType(models.TextChoices):
    B2C = 'B2C', 'Business to consumer'
    B2B = 'B2B', 'Business to business'


class PaymentMode(models.TextChoices):
    CASH = 'Cash', 'Cash'
    ONLINE = 'Online', 'Online'
    CASH_CARD = 'Cash+Card', 'Cash + Card'


class GstMode(models.TextChoices):
    INCLUSIVE = 'inclusive', 'Inclusive (rate contains GST)'
    EXCLUSIVE = 'exclusive', 'Exclusive (GST added on top)'


class InvoiceQuerySet(models.QuerySet):

    def active(self):
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)


class ActiveInvoiceManager(models.Manager.from_queryset(InvoiceQuerySet)):
    """Default manager: soft-deleted invoices are invisible."""

    def get_queryset(self):
        return super().get_queryset().active()


class Invoice(models.Model):
    """Sales invoice header with aggregated GST totals and payment split."""

    invoice_number = models.CharField(max_length=32, unique=True)
    invoice_type = models.CharField(
        max_length=3,
        choices=InvoiceType.choices,
        default=InvoiceType.B2C
    )

    # Customer snapshot (customer record is optional, name is not)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices'
    )
    customer_name = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=20, blank=True)
    customer_gst = models.CharField(max_length=15, blank=True)  # B2B only

    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices)
    # Fixed at creation, never changed by edits
    gst_mode = models.CharField(
        max_length=10,
        choices=GstMode.choices,
        default=GstMode.INCLUSIVE
    )

    # Totals
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    gst_amount = models.DecimalField(max_digits=12, decimal_places=2)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2)

    # Payment split, always sums to grand_total
    cash_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    card_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    is_edited = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveInvoiceManager()
    all_objects = InvoiceQuerySet.as_manager()

    class Meta:
        db_table = 'invoices'
        base_manager_name = 'all_objects'
        indexes = [
            models.Index(fields=['created_at'], name='invoices_created_2b6d1e_idx'),
            models.Index(fields=['deleted_at', 'created_at'], name='invoices_deleted_8c41a7_idx'),
            models.Index(fields=['payment_mode'], name='invoices_payment_5e0f93_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.invoice_number} - {self.customer_name} ({self.grand_total})"

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def mark_deleted(self):
        """Soft-delete: keep the row for audit, hide it everywhere else."""
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])


class InvoiceItem(models.Model):
    """One priced line on an invoice, stored with its computed tax breakup."""

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='items'
    )

    item_name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    hsn_code = models.CharField(max_length=20)

    # Inputs
    rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    gst_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )

    # Computed breakup
    taxable_value = models.DecimalField(max_digits=12, decimal_places=2)
    gst_amount = models.DecimalField(max_digits=12, decimal_places=2)
    cgst_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    cgst_amount = models.DecimalField(max_digits=12, decimal_places=2)
    sgst_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    sgst_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'invoice_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.item_name} x{self.quantity} @ {self.rate}"


class InvoiceSequence(models.Model):
    """
    Per-financial-year invoice counter.

    The row is locked with SELECT ... FOR UPDATE while a number is allocated,
    so concurrent invoice creation is serialized on it.
    """

    financial_year = models.CharField(max_length=8, unique=True)  # e.g. '25-26'
    last_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoice_sequences'

    def __str__(self):
        return f"FY{self.financial_year}: {self.last_number}"
