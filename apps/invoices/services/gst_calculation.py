"""
GST Calculation Module
======================

Line-item GST arithmetic for Indian intra-state sales.

A quoted rate is either GST *inclusive* (the price already contains tax) or
GST *exclusive* (tax is added on top). In both cases the GST is split equally
into CGST (central) and SGST (state).

All arithmetic is done in ``Decimal`` and rounded to paise exactly once, at the
end, with ``ROUND_HALF_UP``. Rounding intermediate values would let line totals
drift away from the quoted amount.

Example:
    Inclusive pricing::

        >>> calc = calculate_line_item(Decimal('100'), 2, Decimal('18'), 'inclusive')
        >>> calc.taxable_value, calc.gst_amount, calc.total
        (Decimal('169.49'), Decimal('30.51'), Decimal('200.00'))

    Exclusive pricing::

        >>> calc = calculate_line_item(Decimal('100'), 2, Decimal('18'), 'exclusive')
        >>> calc.taxable_value, calc.gst_amount, calc.total
        (Decimal('200.00'), Decimal('36.00'), Decimal('236.00'))
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from apps.invoices.models import GstMode
from .exceptions import ComputationPreconditionError


TWO_PLACES = Decimal('0.01')
WHOLE_RUPEE = Decimal('1')
HUNDRED = Decimal('100')
TWO = Decimal('2')


@dataclass(frozen=True)
class LineItemCalculation:
    """Computed tax breakup of a single invoice line."""

    taxable_value: Decimal
    gst_amount: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    total: Decimal


def round_money(value) -> Decimal:
    """Round to paise (2 places), half away from zero."""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_to_rupee(value) -> Decimal:
    """Round to the nearest whole rupee, half away from zero."""
    return Decimal(value).quantize(WHOLE_RUPEE, rounding=ROUND_HALF_UP)


def to_decimal(value, field_name='value') -> Decimal:
    """
    Convert user input (str, int, float, Decimal) to a finite Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary expansion.

    Raises:
        ComputationPreconditionError: If the value is missing, not numeric,
            NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        raise ComputationPreconditionError(f"{field_name} is required")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ComputationPreconditionError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ComputationPreconditionError(f"{field_name} must be a finite number")
    return result


def _has_sub_paisa(value: Decimal) -> bool:
    return value.normalize().as_tuple().exponent < -2


def validate_line_item_input(rate, quantity, gst_percentage, mode):
    """
    Check calculator preconditions and normalize the inputs.

    Args:
        rate: Per-unit price, >= 0, at most 2 decimal places
        quantity: Whole number of units, > 0
        gst_percentage: Combined GST rate in percent, 0-100, at most 2 decimal places
        mode: 'inclusive' or 'exclusive'

    Returns:
        tuple: (rate: Decimal, quantity: int, gst_percentage: Decimal, mode: str)

    Raises:
        ComputationPreconditionError: If any input is outside its domain
    """
    rate = to_decimal(rate, 'rate')
    if rate < 0:
        raise ComputationPreconditionError("rate cannot be negative")
    if _has_sub_paisa(rate):
        raise ComputationPreconditionError("rate cannot have more than 2 decimal places")

    qty = to_decimal(quantity, 'quantity')
    if qty != qty.to_integral_value():
        raise ComputationPreconditionError("quantity must be a whole number")
    if qty <= 0:
        raise ComputationPreconditionError("quantity must be greater than zero")

    gst_percentage = to_decimal(gst_percentage, 'gst_percentage')
    if not (0 <= gst_percentage <= 100):
        raise ComputationPreconditionError("gst_percentage must be between 0 and 100")
    if _has_sub_paisa(gst_percentage):
        raise ComputationPreconditionError("gst_percentage cannot have more than 2 decimal places")

    if mode not in GstMode.values:
        raise ComputationPreconditionError(
            f"gst mode must be one of: {', '.join(GstMode.values)}"
        )

    return rate, int(qty), gst_percentage, mode


def calculate_line_item(rate: Decimal, quantity: int, gst_percentage: Decimal, mode: str) -> LineItemCalculation:
    """
    Compute taxable value, GST, CGST/SGST and total for one line.

    Inputs are assumed valid (see ``validate_line_item_input``); this function
    has no error paths of its own.

    Inclusive:
        base = rate * qty; gst = base * pct / (100 + pct);
        taxable = base - gst; total = base
    Exclusive:
        taxable = rate * qty; gst = taxable * pct / 100; total = taxable + gst

    CGST and SGST are each half of the unrounded GST, rounded independently,
    so their sum can differ from ``gst_amount`` by one paisa.
    """
    rate = Decimal(rate)
    gst_percentage = Decimal(gst_percentage)

    if mode == GstMode.INCLUSIVE:
        base = rate * quantity
        gst_amount = base * gst_percentage / (HUNDRED + gst_percentage)
        taxable_value = base - gst_amount
        total = base
    else:
        taxable_value = rate * quantity
        gst_amount = taxable_value * gst_percentage / HUNDRED
        total = taxable_value + gst_amount

    half = gst_amount / TWO

    return LineItemCalculation(
        taxable_value=round_money(taxable_value),
        gst_amount=round_money(gst_amount),
        cgst_amount=round_money(half),
        sgst_amount=round_money(half),
        total=round_money(total),
    )
