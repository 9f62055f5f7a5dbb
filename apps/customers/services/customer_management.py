"""Customer management service - lookup, creation and spend statistics."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import transaction, IntegrityError
from django.db.models import Count, DecimalField, Q, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from apps.customers.models import Customer
from apps.invoices.models import Invoice
from .exceptions import CustomerServiceError, CustomerNotFoundError

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 3


def _next_customer_code(offset: int = 0) -> str:
    return f"CUST-{Customer.objects.count() + 1 + offset:04d}"


def get_or_create_customer(*, name: str, phone: str) -> Customer:
    """
    Return the customer with this name and phone, creating one if needed.

    New customers get the next CUST-0001 style code. A code or name/phone
    collision with a concurrent request is retried a few times.

    Raises:
        CustomerServiceError: If name or phone is blank, or no free code
            could be claimed
    """
    name = (name or '').strip()
    phone = (phone or '').strip()
    if not name or not phone:
        raise CustomerServiceError("Customer name and phone are required")

    existing = Customer.objects.filter(name=name, phone=phone).first()
    if existing:
        return existing

    for attempt in range(MAX_CODE_ATTEMPTS):
        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    customer_code=_next_customer_code(attempt),
                    name=name,
                    phone=phone,
                )
        except IntegrityError:
            existing = Customer.objects.filter(name=name, phone=phone).first()
            if existing:
                return existing
            continue
        logger.info("Created customer %s for %s", customer.customer_code, name)
        return customer

    raise CustomerServiceError("Could not allocate a customer code")


def get_customer_by_id(*, customer_id: int) -> Customer:
    """
    Raises:
        CustomerNotFoundError: If customer doesn't exist
    """
    try:
        return Customer.objects.get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError("Customer not found")


def list_customers() -> QuerySet:
    return Customer.objects.all()


def get_customer_invoices(*, customer_id: int) -> QuerySet:
    """Non-deleted invoices of a customer, newest first."""
    customer = get_customer_by_id(customer_id=customer_id)
    return Invoice.objects.filter(customer=customer).order_by('-created_at')


def get_customer_stats(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> QuerySet:
    """
    Customers annotated with ``total_orders`` and ``total_spend``.

    Only non-deleted invoices inside the optional date range count. Customers
    without matching invoices are included with zero totals.

    Returns:
        QuerySet of Customer ordered by total_spend descending
    """
    invoice_filter = Q(invoices__deleted_at__isnull=True)
    if start_date:
        invoice_filter &= Q(invoices__created_at__date__gte=start_date)
    if end_date:
        invoice_filter &= Q(invoices__created_at__date__lte=end_date)

    return Customer.objects.annotate(
        total_orders=Count('invoices', filter=invoice_filter),
        total_spend=Coalesce(
            Sum('invoices__grand_total', filter=invoice_filter),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        ),
    ).order_by('-total_spend', 'customer_code')
