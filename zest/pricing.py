"""Checkout price computation: VAT, tiered delivery fee and totals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from zest.config import (
    DELIVERY_FEE_LARGE_ORDER,
    DELIVERY_FEE_MEDIUM_ORDER,
    DELIVERY_FEE_SMALL_ORDER,
    DELIVERY_HIGH_EDGE,
    DELIVERY_LOW_EDGE,
    LOYALTY_POINT_VALUE,
    VAT_RATE,
)

Number = int | float | str | Decimal

_CENTS = Decimal("0.01")


def as_decimal(value: Number) -> Decimal:
    """Convert a price-like value without float artifacts (``99.99`` stays ``99.99``)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize(value: Number) -> Decimal:
    """Round to cents, half up."""
    return as_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _checked_subtotal(subtotal: Number) -> Decimal:
    amount = as_decimal(subtotal)
    if amount < 0:
        raise ValueError("subtotal must not be negative")
    return amount


def vat(subtotal: Number) -> Decimal:
    """Flat VAT on the subtotal."""
    return quantize(_checked_subtotal(subtotal) * VAT_RATE)


def delivery_fee(subtotal: Number) -> Decimal:
    """Tiered delivery fee; both tier edges belong to the middle tier."""
    amount = _checked_subtotal(subtotal)
    if amount < DELIVERY_LOW_EDGE:
        return DELIVERY_FEE_SMALL_ORDER
    if amount <= DELIVERY_HIGH_EDGE:
        return DELIVERY_FEE_MEDIUM_ORDER
    return DELIVERY_FEE_LARGE_ORDER


def total(subtotal: Number) -> Decimal:
    """Subtotal plus VAT plus delivery."""
    amount = _checked_subtotal(subtotal)
    return quantize(amount + vat(amount) + delivery_fee(amount))


def loyalty_points_for(amount: Number) -> int:
    """One loyalty point per full ten currency units spent."""
    spent = as_decimal(amount)
    if spent <= 0:
        return 0
    return int((spent / LOYALTY_POINT_VALUE).to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class PriceBreakdown:
    """Checkout figures shown to the customer."""

    subtotal: Decimal
    vat: Decimal
    delivery: Decimal
    total: Decimal

    @classmethod
    def from_subtotal(cls, subtotal: Number) -> "PriceBreakdown":
        amount = quantize(_checked_subtotal(subtotal))
        return cls(
            subtotal=amount,
            vat=vat(amount),
            delivery=delivery_fee(amount),
            total=total(amount),
        )
