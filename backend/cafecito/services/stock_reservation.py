# Overview: Service-layer operations for stock reservation; all-or-nothing decrements with compensation.

"""
Stock Reservation (saga over per-product conditional updates)

================================================================================
PURPOSE: Take stock for every line of a cart, or for none of them
================================================================================

The store only offers single-row atomic updates, so a cart is reserved one
line at a time, in cart order:

    1. conditional_decrement(product, qty)   stock -= qty iff stock >= qty
    2. success -> append the line to the committed ledger, continue
    3. failure -> conditional_increment every committed line (compensation),
                  then raise InsufficientStock for the failing line

Compensation only reverses what THIS reservation committed, so two carts
contending for the same products each undo exactly their own prefix.

Restoration (cancellation) reuses the increment primitive with no pre-check.
Compensating and restoring updates are never retried automatically; a step
that fails is logged and reported back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from flask import current_app

from ..extensions import db
from cafecito.errors import InsufficientStock
from . import catalog_service


@dataclass(frozen=True)
class ReservationLine:
    product_id: int
    quantity: int
    product_name: str = ""


def _increment_each(lines: Iterable[ReservationLine], action: str) -> list[dict]:
    """Apply conditional_increment to every line; return the lines that failed."""
    failures: list[dict] = []
    for line in lines:
        try:
            restored = catalog_service.conditional_increment(line.product_id, line.quantity)
            error = None if restored else "product not found"
        except Exception as exc:
            db.session.rollback()
            restored = False
            error = str(exc)

        if not restored:
            current_app.logger.error(
                "Stock %s failed for product %s (quantity %s): %s",
                action, line.product_id, line.quantity, error,
            )
            failures.append({
                "product_id": line.product_id,
                "product_name": line.product_name,
                "quantity": line.quantity,
                "error": error,
            })
    return failures


def release(committed: list[ReservationLine]) -> list[dict]:
    """
    Compensate a partial or abandoned reservation.

    Returns the lines whose stock could not be given back (empty on success).
    """
    if not committed:
        return []
    current_app.logger.info("Releasing reserved stock for %d line(s)", len(committed))
    return _increment_each(committed, "compensation")


def restore(lines: Iterable[ReservationLine]) -> list[dict]:
    """Give back stock for lines of a canceled sale. Returns failed lines."""
    return _increment_each(lines, "restoration")


def reserve(lines: Iterable[ReservationLine]) -> list[ReservationLine]:
    """
    Reserve stock for every line or for none.

    Returns:
        The committed ledger (one entry per line, in cart order). The caller
        owns it and must pass it to release() if a later step fails.

    Raises:
        InsufficientStock: a line could not be decremented; every earlier
            line was already compensated
        Exception: any failure of the store or driver mid-sequence is
            re-raised after every earlier line was compensated
    """
    committed: list[ReservationLine] = []

    for line in lines:
        try:
            ok = catalog_service.conditional_decrement(line.product_id, line.quantity)
        except Exception:
            db.session.rollback()
            current_app.logger.exception(
                "Stock decrement failed for product %s; compensating", line.product_id
            )
            release(committed)
            raise

        if ok:
            committed.append(line)
            continue

        available = catalog_service.current_stock(line.product_id)
        failures = release(committed)
        error = InsufficientStock(
            product_id=line.product_id,
            product_name=line.product_name,
            requested=line.quantity,
            available=available,
        )
        if failures:
            error.details[0]["compensation_failures"] = failures
        current_app.logger.info(
            "Reservation aborted on product %s: requested %s, available %s",
            line.product_id, line.quantity, available,
        )
        raise error

    return committed
