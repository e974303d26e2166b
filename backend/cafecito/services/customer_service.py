# Overview: Customer directory capability; lookups and the purchases_count ledger.

from __future__ import annotations

from sqlalchemy import update

from ..extensions import db
from ..models import Customer
from .concurrency import conditional_update


def find_by_id(customer_id: int) -> Customer | None:
    return db.session.get(Customer, customer_id)


def increment_purchases(customer_id: int) -> bool:
    stmt = (
        update(Customer)
        .where(Customer.id == customer_id)
        .values(purchases_count=Customer.purchases_count + 1)
    )
    return conditional_update(stmt)


def conditional_decrement_purchases(customer_id: int) -> bool:
    """purchases_count -= 1 only if it is > 0."""
    stmt = (
        update(Customer)
        .where(Customer.id == customer_id, Customer.purchases_count > 0)
        .values(purchases_count=Customer.purchases_count - 1)
    )
    return conditional_update(stmt, retry=False)
