# Overview: Printable ticket projection of a sale; derived on demand, never stored.

from __future__ import annotations

from ..models import Sale
from cafecito.time_utils import to_utc_z
from .pricing_service import format_money


def discount_label(discount_percent: int, discount_amount_cents: int) -> str:
    """10, 2000 -> '10% (-$20.00)'"""
    return f"{discount_percent}% (-${format_money(discount_amount_cents)})"


def build_ticket(sale: Sale, *, store_name: str) -> dict:
    return {
        "store_name": store_name,
        "sale_id": sale.sale_id,
        "timestamp": to_utc_z(sale.created_at),
        "items": [
            {
                "name": item.product_name_snapshot,
                "qty": item.quantity,
                "unit_price": format_money(item.unit_price_cents),
                "line_total": format_money(item.line_total_cents),
            }
            for item in sale.items
        ],
        "subtotal": format_money(sale.subtotal_cents),
        "discount": discount_label(sale.discount_percent, sale.discount_amount_cents),
        "total": format_money(sale.total_cents),
        "payment_method": sale.payment_method,
    }
