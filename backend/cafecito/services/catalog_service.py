# Overview: Catalog capability used by the sale engine; lookups and conditional stock updates.

from __future__ import annotations

from sqlalchemy import update

from ..extensions import db
from ..models import Product
from .concurrency import conditional_update


def find_active_by_id(product_id: int) -> Product | None:
    """Return the product when it exists and is active."""
    return (
        db.session.query(Product)
        .filter(Product.id == product_id, Product.is_active.is_(True))
        .first()
    )


def current_stock(product_id: int) -> int:
    """
    Stock available for sale right now (0 when the product is gone or inactive).

    Only used to report "available" in errors; never used to decide a mutation.
    """
    stock = (
        db.session.query(Product.stock)
        .filter(Product.id == product_id, Product.is_active.is_(True))
        .scalar()
    )
    return stock or 0


def conditional_decrement(product_id: int, quantity: int) -> bool:
    """
    stock -= quantity iff the product is active and stock >= quantity.

    Returns False (and changes nothing) when the precondition fails.
    """
    stmt = (
        update(Product)
        .where(
            Product.id == product_id,
            Product.is_active.is_(True),
            Product.stock >= quantity,
        )
        .values(stock=Product.stock - quantity)
    )
    return conditional_update(stmt)


def conditional_increment(product_id: int, quantity: int) -> bool:
    """
    stock += quantity. A pure addition cannot break stock >= 0, so the only
    precondition is that the product row still exists (inactive is fine).
    """
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock=Product.stock + quantity)
    )
    return conditional_update(stmt, retry=False)
