"""Invoice management service - create, edit, soft-delete and lookup."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.customers.services import get_or_create_customer
from apps.invoices.models import (
    GstMode,
    Invoice,
    InvoiceItem,
    InvoiceType,
    PaymentMode,
)
from apps.store_settings.services import InvoiceConfig, get_invoice_config
from .exceptions import (
    InvoiceValidationError,
    InvoiceNotFoundError,
    InvoiceNumberConflictError,
)
from .gst_calculation import (
    TWO,
    calculate_line_item,
    round_money,
    round_to_rupee,
    validate_line_item_input,
)
from .numbering import allocate_invoice_number
from .payment_split import normalize_payment_split

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    gst_amount: Decimal
    grand_total: Decimal


def build_line_items(items, gst_mode: str) -> list:
    """
    Validate raw line items and compute their GST breakup.

    Each item is a mapping with ``item_name``, ``hsn_code``, ``rate``,
    ``quantity``, ``gst_percentage`` and an optional ``description``. Any
    client-side computed amounts in the mapping are ignored.

    Returns:
        list[dict]: Field values ready for ``InvoiceItem(**values)``

    Raises:
        InvoiceValidationError: If there are no items or a name/HSN is missing
        ComputationPreconditionError: If rate, quantity or GST % is invalid
    """
    if not items:
        raise InvoiceValidationError("At least one line item is required")

    lines = []
    for position, item in enumerate(items, start=1):
        item_name = str(item.get('item_name') or '').strip()
        hsn_code = str(item.get('hsn_code') or '').strip()
        if not item_name:
            raise InvoiceValidationError(f"Item {position}: item_name is required")
        if not hsn_code:
            raise InvoiceValidationError(f"Item {position}: hsn_code is required")

        rate, quantity, gst_percentage, mode = validate_line_item_input(
            item.get('rate'),
            item.get('quantity'),
            item.get('gst_percentage'),
            gst_mode,
        )
        calc = calculate_line_item(rate, quantity, gst_percentage, mode)
        half_rate = round_money(gst_percentage / TWO)

        lines.append({
            'item_name': item_name,
            'description': str(item.get('description') or ''),
            'hsn_code': hsn_code,
            'rate': round_money(rate),
            'quantity': quantity,
            'gst_percentage': round_money(gst_percentage),
            'taxable_value': calc.taxable_value,
            'gst_amount': calc.gst_amount,
            'cgst_percentage': half_rate,
            'cgst_amount': calc.cgst_amount,
            'sgst_percentage': half_rate,
            'sgst_amount': calc.sgst_amount,
            'total': calc.total,
        })

    return lines


def compute_invoice_totals(lines) -> InvoiceTotals:
    """
    Aggregate computed lines into invoice totals.

    subtotal is the sum of taxable values, gst_amount the sum of CGST + SGST,
    and grand_total their sum rounded to the nearest rupee.
    """
    subtotal = sum((line['taxable_value'] for line in lines), Decimal('0.00'))
    gst_amount = sum(
        (line['cgst_amount'] + line['sgst_amount'] for line in lines),
        Decimal('0.00'),
    )
    return InvoiceTotals(
        subtotal=round_money(subtotal),
        gst_amount=round_money(gst_amount),
        grand_total=round_money(round_to_rupee(subtotal + gst_amount)),
    )


def resolve_gst_mode(payment_mode: str, gst_mode: Optional[str], config: InvoiceConfig) -> str:
    """
    GST mode for a new invoice: the requested one, else the shop default for
    the payment mode (Online uses the online default, everything else cash).
    """
    if gst_mode:
        if gst_mode not in GstMode.values:
            raise InvoiceValidationError(
                f"gst_mode must be one of: {', '.join(GstMode.values)}"
            )
        return gst_mode
    if payment_mode == PaymentMode.ONLINE:
        return config.online_gst_mode
    return config.cash_gst_mode


def _validate_header(*, invoice_type=None, customer_name=None, payment_mode=None):
    if invoice_type is not None and invoice_type not in InvoiceType.values:
        raise InvoiceValidationError(
            f"invoice_type must be one of: {', '.join(InvoiceType.values)}"
        )
    if customer_name is not None and not str(customer_name).strip():
        raise InvoiceValidationError("customer_name is required")
    if payment_mode is not None and payment_mode not in PaymentMode.values:
        raise InvoiceValidationError(
            f"payment_mode must be one of: {', '.join(PaymentMode.values)}"
        )


def _link_customer(name: str, phone: str):
    if name and phone:
        return get_or_create_customer(name=name, phone=phone)
    return None


def create_invoice(
    *,
    customer_name: str,
    payment_mode: str,
    items: list,
    invoice_type: str = InvoiceType.B2C,
    customer_phone: str = '',
    customer_gst: str = '',
    gst_mode: Optional[str] = None,
    cash_amount: Optional[Decimal] = None,
    card_amount: Optional[Decimal] = None,
    config: Optional[InvoiceConfig] = None,
    today: Optional[date] = None,
) -> Invoice:
    """
    Create an invoice with its line items.

    This operation:
    1. Validates required fields (customer name, payment mode, items)
    2. Resolves the GST mode (payload value or shop default)
    3. Recomputes every line and the invoice totals
    4. Rounds the grand total to rupees and normalizes the payment split
    5. Allocates the invoice number and saves invoice + items atomically

    A number collision rolls the attempt back and allocates again, up to
    ``INVOICE_NUMBER_MAX_ATTEMPTS`` times. Other integrity errors propagate unchanged.

    Args:
        customer_name: Name printed on the invoice (required)
        payment_mode: Cash, Online or Cash+Card
        items: Line item mappings, see ``build_line_items``
        invoice_type: B2C or B2B
        customer_phone: Optional; with a name it links a Customer record
        customer_gst: Buyer GSTIN for B2B invoices
        gst_mode: inclusive/exclusive; defaults from ``config``
        cash_amount: Requested cash part for Cash+Card
        card_amount: Requested card part for Cash+Card
        config: Shop defaults; read from the settings store when omitted
        today: Date deciding the financial year of the number

    Returns:
        Created Invoice instance

    Raises:
        InvoiceValidationError: If required fields are missing or invalid
        ComputationPreconditionError: If a line item cannot be calculated
        InvoiceNumberConflictError: If every numbering attempt collided
    """
    _validate_header(
        invoice_type=invoice_type,
        customer_name=customer_name if customer_name is not None else '',
        payment_mode=payment_mode,
    )
    if not payment_mode:
        raise InvoiceValidationError("payment_mode is required")

    config = config or get_invoice_config()
    customer_name = customer_name.strip()
    customer_phone = (customer_phone or '').strip()
    gst_mode = resolve_gst_mode(payment_mode, gst_mode, config)

    lines = build_line_items(items, gst_mode)
    totals = compute_invoice_totals(lines)
    split = normalize_payment_split(payment_mode, totals.grand_total, cash_amount, card_amount)

    max_attempts = max(1, getattr(settings, 'INVOICE_NUMBER_MAX_ATTEMPTS', 3))
    conflict = None

    for attempt in range(1, max_attempts + 1):
        try:
            with transaction.atomic():
                customer = _link_customer(customer_name, customer_phone)
                invoice_number = allocate_invoice_number(
                    series_start=config.series_start,
                    today=today,
                )
                try:
                    with transaction.atomic():
                        invoice = Invoice.objects.create(
                            invoice_number=invoice_number,
                            invoice_type=invoice_type,
                            customer=customer,
                            customer_name=customer_name,
                            customer_phone=customer_phone,
                            customer_gst=(customer_gst or '').strip(),
                            payment_mode=payment_mode,
                            gst_mode=gst_mode,
                            subtotal=totals.subtotal,
                            gst_amount=totals.gst_amount,
                            grand_total=totals.grand_total,
                            cash_amount=split.cash,
                            card_amount=split.card,
                        )
                except IntegrityError:
                    # Only a duplicate number is worth another attempt
                    if Invoice.all_objects.filter(invoice_number=invoice_number).exists():
                        raise InvoiceNumberConflictError(invoice_number)
                    raise

                InvoiceItem.objects.bulk_create(
                    [InvoiceItem(invoice=invoice, **line) for line in lines]
                )
        except InvoiceNumberConflictError as e:
            conflict = e
            logger.warning(
                "Invoice number conflict on attempt %d/%d: %s",
                attempt, max_attempts, e
            )
            continue

        logger.info(
            "Created invoice %s (%s, %s) total=%s",
            invoice.invoice_number, payment_mode, gst_mode, invoice.grand_total
        )
        return invoice

    raise conflict


def get_invoice_by_id(*, invoice_id: int, include_deleted: bool = False) -> Invoice:
    """
    Retrieve an invoice with its items.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist (or is deleted and
            ``include_deleted`` is False)
    """
    manager = Invoice.all_objects if include_deleted else Invoice.objects
    try:
        return manager.prefetch_related('items').get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError("Invoice not found")


def list_invoices(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    include_deleted: bool = False
) -> QuerySet:
    """Invoices newest first, optionally within a created-at date range."""
    queryset = Invoice.all_objects.all() if include_deleted else Invoice.objects.all()
    if start_date:
        queryset = queryset.filter(created_at__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__date__lte=end_date)
    return queryset.order_by('-created_at')


@transaction.atomic
def update_invoice(
    *,
    invoice_id: int,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    customer_gst: Optional[str] = None,
    payment_mode: Optional[str] = None,
    items: Optional[list] = None,
    cash_amount: Optional[Decimal] = None,
    card_amount: Optional[Decimal] = None,
    gst_mode: Optional[str] = None,
) -> Invoice:
    """
    Edit an existing invoice.

    The GST mode chosen at creation is kept: any ``gst_mode`` passed here is
    discarded. When ``items`` is given, all existing items are replaced and
    totals are recomputed under the original GST mode. The payment split is
    always re-normalized against the (possibly new) grand total; amounts not
    passed fall back to the stored ones.

    Args:
        invoice_id: ID of the invoice to edit
        items: Replacement line items, must not be empty if given
        gst_mode: Accepted for payload compatibility, ignored

    Returns:
        Updated Invoice instance (is_edited=True)

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or is deleted
        InvoiceValidationError: If a changed field is invalid
        ComputationPreconditionError: If a line item cannot be calculated
    """
    try:
        invoice = Invoice.objects.select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError("Invoice not found")

    if gst_mode is not None and gst_mode != invoice.gst_mode:
        logger.info(
            "Ignoring gst_mode change %s -> %s on invoice %s",
            invoice.gst_mode, gst_mode, invoice.invoice_number
        )

    _validate_header(customer_name=customer_name, payment_mode=payment_mode)

    if customer_name is not None:
        invoice.customer_name = customer_name.strip()
    if customer_phone is not None:
        invoice.customer_phone = customer_phone.strip()
    if customer_gst is not None:
        invoice.customer_gst = customer_gst.strip()
    if payment_mode:
        invoice.payment_mode = payment_mode
    if customer_name is not None or customer_phone is not None:
        invoice.customer = _link_customer(invoice.customer_name, invoice.customer_phone)

    if items is not None:
        lines = build_line_items(items, invoice.gst_mode)
        totals = compute_invoice_totals(lines)
        invoice.subtotal = totals.subtotal
        invoice.gst_amount = totals.gst_amount
        invoice.grand_total = totals.grand_total

        invoice.items.all().delete()
        InvoiceItem.objects.bulk_create(
            [InvoiceItem(invoice=invoice, **line) for line in lines]
        )

    split = normalize_payment_split(
        invoice.payment_mode,
        invoice.grand_total,
        cash_amount if cash_amount is not None else invoice.cash_amount,
        card_amount if card_amount is not None else invoice.card_amount,
    )
    invoice.cash_amount = split.cash
    invoice.card_amount = split.card
    invoice.is_edited = True
    invoice.save()

    logger.info("Edited invoice %s total=%s", invoice.invoice_number, invoice.grand_total)
    return invoice


@transaction.atomic
def soft_delete_invoice(*, invoice_id: int) -> Invoice:
    """
    Soft-delete an invoice.

    The row is kept for audit but disappears from default queries and every
    statistic. A deleted invoice cannot be deleted or edited again.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or is already deleted
    """
    try:
        invoice = Invoice.objects.select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError("Invoice not found")

    invoice.mark_deleted()
    logger.info("Soft-deleted invoice %s", invoice.invoice_number)
    return invoice
