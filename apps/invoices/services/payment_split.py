"""
Payment split normalization.

Every invoice records how its rounded grand total was paid: cash, card/online,
or both. The two amounts must always add up to the grand total exactly, since
the daily cash-drawer reconciliation sums them directly.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.invoices.models import PaymentMode
from .gst_calculation import round_money, to_decimal


# Largest gap between a requested Cash+Card split and the total that is
# still treated as the cashier's intent.
SPLIT_TOLERANCE = Decimal('0.50')
ZERO = Decimal('0.00')


@dataclass(frozen=True)
class PaymentSplit:
    cash: Decimal
    card: Decimal


def _requested(value) -> Decimal:
    if value is None or value == '':
        return ZERO
    return to_decimal(value, 'payment amount')


def normalize_payment_split(
    payment_mode: str,
    rounded_grand_total,
    requested_cash: Optional[Decimal] = None,
    requested_card: Optional[Decimal] = None,
) -> PaymentSplit:
    """
    Reconcile cash/card amounts against the rounded grand total.

    Rules:
        Cash: everything is cash.
        Online: everything is card.
        Cash+Card: if the requested amounts add up to within 0.50 of the
            total, the requested cash is kept (clamped to [0, total]) and
            card becomes the remainder. A zero or far-off request puts the
            whole total on cash.
        Unknown mode: with no split requested the total goes to cash,
            otherwise it is handled like Cash+Card.

    Args:
        payment_mode: 'Cash', 'Online' or 'Cash+Card'
        rounded_grand_total: Invoice grand total, already rounded to rupees
        requested_cash: Cash amount entered at the counter (optional)
        requested_card: Card amount entered at the counter (optional)

    Returns:
        PaymentSplit whose cash + card equals the grand total, both >= 0

    Raises:
        ComputationPreconditionError: If a requested amount is not numeric
    """
    total = round_money(to_decimal(rounded_grand_total, 'grand total'))

    if payment_mode == PaymentMode.CASH:
        return PaymentSplit(cash=total, card=ZERO)

    if payment_mode == PaymentMode.ONLINE:
        return PaymentSplit(cash=ZERO, card=total)

    cash = _requested(requested_cash)
    card = _requested(requested_card)
    combined = cash + card

    if combined == 0 or abs(total - combined) > SPLIT_TOLERANCE:
        return PaymentSplit(cash=total, card=ZERO)

    cash = round_money(min(max(cash, ZERO), max(total, ZERO)))
    card = total - cash
    if card < 0:
        card = ZERO

    return PaymentSplit(cash=cash, card=card)
