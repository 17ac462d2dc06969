# raffle_service/services/pricing.py
"""
Purchase pricing.

All money is Decimal. Rounding is half-up to two places, applied once to the
discount and once to the final amount.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

REFERRAL_DISCOUNT_RATE = Decimal("0.12")
CENTS = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    total: Decimal


def calculate_price(quantity: int, unit_price, has_referral: bool) -> PriceBreakdown:
    """
    Price `quantity` tickets at `unit_price`, with the referral discount when
    a valid referral code applies.
    """
    if quantity < 1:
        raise ValueError("quantity must be at least 1")

    subtotal = Decimal(quantity) * Decimal(str(unit_price))
    discount = round2(subtotal * REFERRAL_DISCOUNT_RATE) if has_referral else Decimal("0.00")
    total = round2(subtotal - discount)

    return PriceBreakdown(subtotal=subtotal, discount=discount, total=total)
