"""
Invoice statistics - payment summary and sales totals.

Soft-deleted invoices never count: every query here starts from the default
``Invoice.objects`` manager, which hides them.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.invoices.models import Invoice


def _money_sum(field, since=None):
    return Coalesce(
        Sum(field, filter=Q(created_at__gte=since) if since else None),
        Value(Decimal('0.00')),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def get_payment_summary(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> dict:
    """
    Cash and card totals for the daily cash reconciliation.

    Args:
        start_date: First invoice date to include (inclusive)
        end_date: Last invoice date to include (inclusive)

    Returns:
        dict: A dictionary containing:
            - cash_total (Decimal): Sum of cash parts
            - card_total (Decimal): Sum of card/online parts
            - total_sales (Decimal): cash_total + card_total
            - invoice_count (int): Number of invoices counted
    """
    queryset = Invoice.objects.all()
    if start_date:
        queryset = queryset.filter(created_at__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__date__lte=end_date)

    totals = queryset.aggregate(
        cash_total=_money_sum('cash_amount'),
        card_total=_money_sum('card_amount'),
        invoice_count=Count('id'),
    )

    cash_total = Decimal(totals['cash_total']).quantize(Decimal('0.01'))
    card_total = Decimal(totals['card_total']).quantize(Decimal('0.01'))

    return {
        'cash_total': cash_total,
        'card_total': card_total,
        'total_sales': cash_total + card_total,
        'invoice_count': totals['invoice_count'],
    }


def get_sales_stats(*, now: Optional[datetime] = None) -> dict:
    """
    Grand-total sales for today, the last 7 days and the current month.

    Day and month boundaries are taken in the shop's local time zone.
    """
    now = timezone.localtime(now or timezone.now())
    today_start = timezone.make_aware(datetime.combine(now.date(), time.min))
    week_start = now - timedelta(days=7)
    month_start = timezone.make_aware(datetime.combine(now.date().replace(day=1), time.min))

    totals = Invoice.objects.aggregate(
        today_sales=_money_sum('grand_total', since=today_start),
        week_sales=_money_sum('grand_total', since=week_start),
        month_sales=_money_sum('grand_total', since=month_start),
    )

    return {key: Decimal(value).quantize(Decimal('0.01')) for key, value in totals.items()}
