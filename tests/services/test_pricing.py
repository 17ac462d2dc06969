"""
Tests for purchase pricing.

Verifies that calculate_price correctly:
- Multiplies quantity by the unit price
- Applies the 12% referral discount only when a referral applies
- Rounds half-up to cents, once for the discount and once for the total
"""

import pytest
from decimal import Decimal

from raffle_service.services.pricing import (
    REFERRAL_DISCOUNT_RATE,
    PriceBreakdown,
    calculate_price,
    round2,
)


class TestCalculatePrice:
    """Tests for the pricing engine."""

    def test_no_referral(self):
        """2 x 25.00 = 50.00, no discount."""
        result = calculate_price(2, Decimal("25.00"), has_referral=False)

        assert result == PriceBreakdown(
            subtotal=Decimal("50.00"), discount=Decimal("0.00"), total=Decimal("50.00")
        )

    def test_with_referral(self):
        """2 x 25.00 with referral: discount 6.00, total 44.00."""
        result = calculate_price(2, Decimal("25.00"), has_referral=True)

        assert result.subtotal == Decimal("50.00")
        assert result.discount == Decimal("6.00")
        assert result.total == Decimal("44.00")

    def test_discount_rounds_half_up(self):
        """1 x 0.125 -> subtotal 0.125, discount 0.015 -> 0.02, total 0.11."""
        result = calculate_price(1, Decimal("0.125"), has_referral=True)

        assert result.discount == Decimal("0.02")
        assert result.total == Decimal("0.11")

    def test_float_unit_price_is_exact(self):
        """Floats go through str() so 19.99 stays 19.99."""
        result = calculate_price(3, 19.99, has_referral=False)

        assert result.total == Decimal("59.97")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValueError):
            calculate_price(0, Decimal("25.00"), has_referral=False)

    def test_rate(self):
        assert REFERRAL_DISCOUNT_RATE == Decimal("0.12")

    def test_round2(self):
        assert round2(Decimal("2.345")) == Decimal("2.35")
        assert round2(Decimal("2.344")) == Decimal("2.34")
