# Overview: Pure pricing of a reserved cart; line totals, subtotal, discount and total.

"""
Pricing rules (authoritative)

- All amounts are integer cents.
- Each displayed figure is rounded on its own, right after the step that
  produces it (line total, subtotal, discount amount, total); rounding is
  never deferred to the end.
- Rounding is half away from zero (2.5 cents -> 3, -2.5 cents -> -3).
- Invariants: sum(line_totals) == subtotal, subtotal - discount == total.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    quantity: int
    unit_price_cents: int


@dataclass(frozen=True)
class PriceBreakdown:
    line_totals: tuple[int, ...]
    subtotal_cents: int
    discount_percent: int
    discount_amount_cents: int
    total_cents: int


def round_cents(value) -> int:
    """Round an amount expressed in cents to a whole cent, half away from zero."""
    # Decimal ROUND_HALF_UP rounds ties away from zero, including negatives
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price_lines(lines: Iterable[PricedLine], discount_percent: int) -> PriceBreakdown:
    if not 0 <= discount_percent <= 100:
        raise ValueError("discount_percent must be between 0 and 100")

    line_totals = tuple(round_cents(line.quantity * line.unit_price_cents) for line in lines)
    subtotal = round_cents(sum(line_totals))
    discount_amount = round_cents(Decimal(subtotal) * Decimal(discount_percent) / Decimal(100))
    total = round_cents(subtotal - discount_amount)

    return PriceBreakdown(
        line_totals=line_totals,
        subtotal_cents=subtotal,
        discount_percent=discount_percent,
        discount_amount_cents=discount_amount,
        total_cents=total,
    )


def format_money(cents: int) -> str:
    """125050 -> '1250.50'"""
    return str((Decimal(cents) / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
