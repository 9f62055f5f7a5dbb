"""
Invoice numbering by Indian financial year.

Numbers look like ``FY25-26/001``: the financial year (April 1 to March 31)
followed by a zero-padded sequence that restarts every year.

Allocation goes through one ``InvoiceSequence`` row per financial year, locked
with ``SELECT ... FOR UPDATE`` for the rest of the surrounding transaction.
The unique constraint on ``Invoice.invoice_number`` stays as the last line of
defence; a collision there surfaces as ``InvoiceNumberConflictError`` and the
caller allocates again.
"""

import logging
from datetime import date
from typing import Optional

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.invoices.models import Invoice, InvoiceSequence
from .exceptions import InvoiceNumberConflictError

logger = logging.getLogger(__name__)

APRIL = 4


def financial_year_for(day: date) -> tuple:
    """Return (start_year, end_year) of the financial year containing ``day``."""
    if day.month >= APRIL:
        return day.year, day.year + 1
    return day.year - 1, day.year


def financial_year_label(day: date) -> str:
    """'25-26' style label for the financial year containing ``day``."""
    start, end = financial_year_for(day)
    return f"{start % 100:02d}-{end % 100:02d}"


def invoice_number_prefix(day: date) -> str:
    return f"FY{financial_year_label(day)}/"


def format_invoice_number(day: date, sequence: int) -> str:
    return f"{invoice_number_prefix(day)}{sequence:03d}"


def _seed_value(prefix: str, series_start: int) -> int:
    """
    Counter value for a financial year seen for the first time.

    Invoices already carrying the prefix (soft-deleted ones too) are counted
    so numbering continues after them.
    """
    existing = Invoice.all_objects.filter(invoice_number__startswith=prefix).count()
    return series_start - 1 + existing


def _skip_taken(day: date, candidate: int) -> int:
    while Invoice.all_objects.filter(
        invoice_number=format_invoice_number(day, candidate)
    ).exists():
        candidate += 1
    return candidate


def allocate_invoice_number(*, series_start: int = 1, today: Optional[date] = None) -> str:
    """
    Reserve the next invoice number of the current financial year.

    Must run inside ``transaction.atomic()``: the counter row stays locked
    until the caller's transaction commits, and rolling back releases the
    number again.

    Args:
        series_start: First sequence number of a financial year
        today: Date that decides the financial year (defaults to local today)

    Returns:
        The reserved invoice number, e.g. 'FY25-26/007'

    Raises:
        InvoiceNumberConflictError: If another transaction created the
            year's counter row at the same moment
    """
    today = today or timezone.localdate()
    label = financial_year_label(today)
    prefix = invoice_number_prefix(today)

    try:
        sequence = InvoiceSequence.objects.select_for_update().get(financial_year=label)
    except InvoiceSequence.DoesNotExist:
        seed = _seed_value(prefix, series_start)
        try:
            with transaction.atomic():
                sequence = InvoiceSequence.objects.create(
                    financial_year=label,
                    last_number=seed,
                )
        except IntegrityError:
            raise InvoiceNumberConflictError(
                prefix,
                f"Counter for FY{label} was created concurrently"
            )
        logger.info("Started invoice counter for FY%s at %d", label, seed)

    next_number = _skip_taken(today, max(sequence.last_number + 1, series_start))

    sequence.last_number = next_number
    sequence.save(update_fields=['last_number', 'updated_at'])

    return format_invoice_number(today, next_number)


def peek_next_invoice_number(*, series_start: int = 1, today: Optional[date] = None) -> str:
    """
    Preview the number the next invoice will most likely get.

    Nothing is reserved, so a concurrent invoice may still take it.
    """
    today = today or timezone.localdate()
    label = financial_year_label(today)

    sequence = InvoiceSequence.objects.filter(financial_year=label).first()
    if sequence is None:
        last_number = _seed_value(invoice_number_prefix(today), series_start)
    else:
        last_number = sequence.last_number

    return format_invoice_number(
        today,
        _skip_taken(today, max(last_number + 1, series_start)),
    )
