# Overview: Service-layer operations for sale lifecycle; one-way cancellation with stock restoration.

"""
Sale Lifecycle Service

================================================================================
PURPOSE: Cancel a committed sale and give its stock back
================================================================================

STATE MACHINE:
    completed -> canceled

    completed: initial, only reachable by creating the sale
    canceled:  terminal, applied at most once

CANCEL ORDER (non-negotiable):
1. Look up the sale by folio                     NotFound
2. Already canceled?                             AlreadyCanceled (no mutation)
3. Persist the status transition FIRST           conditional, at most once
4. Restore stock for every item                  failures logged, transition kept
5. purchases_count -= 1 for the customer (> 0)   failure is non-fatal

KNOWN GAP: if step 4 fails for some items the sale stays canceled while part
of its stock is not back. The outcome reports this as a partial restoration
instead of presenting the cancellation as fully successful.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Sale
from cafecito.errors import AlreadyCanceled, NotFound
from cafecito.time_utils import to_utc_z, utcnow
from . import customer_service, sale_repository, stock_reservation
from .stock_reservation import ReservationLine


RESTORATION_COMPLETE = "complete"
RESTORATION_PARTIAL = "partial"


@dataclass
class CancellationOutcome:
    sale: Sale
    restoration_failures: list[dict] = field(default_factory=list)
    # None when the sale had no customer attached
    customer_reversed: bool | None = None

    @property
    def restoration(self) -> str:
        return RESTORATION_PARTIAL if self.restoration_failures else RESTORATION_COMPLETE

    @property
    def warnings(self) -> list[str]:
        warnings = [
            f"Stock for product {failure['product_id']} (quantity {failure['quantity']}) was not restored"
            for failure in self.restoration_failures
        ]
        if self.customer_reversed is False:
            warnings.append(f"purchases_count of customer {self.sale.customer_id} was not decremented")
        return warnings


def _already_canceled(sale: Sale) -> AlreadyCanceled:
    return AlreadyCanceled(
        sale_id=sale.sale_id,
        canceled_at=to_utc_z(sale.canceled_at),
        cancel_reason=sale.cancel_reason,
    )


def _reverse_customer_purchase(customer_id: int) -> bool:
    try:
        reversed_ = customer_service.conditional_decrement_purchases(customer_id)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.warning(
            "Failed to decrement purchases_count for customer %s", customer_id, exc_info=True
        )
        return False
    if not reversed_:
        current_app.logger.warning(
            "purchases_count of customer %s not decremented (missing or already 0)", customer_id
        )
    return reversed_


def cancel_sale(sale_id: str, reason: str = "") -> CancellationOutcome:
    """
    Cancel a completed sale, restore its stock and reverse the customer ledger.

    Raises:
        NotFound: no sale with this folio
        AlreadyCanceled: the sale was canceled before (carries the original
            canceled_at / cancel_reason; nothing is restored again)
    """
    sale = sale_repository.find_by_sale_id(sale_id)
    if sale is None:
        raise NotFound(sale_id)

    if sale.is_canceled:
        raise _already_canceled(sale)

    # Snapshot before the transition commits (commit expires loaded state)
    lines = [
        ReservationLine(
            product_id=item.product_id,
            quantity=item.quantity,
            product_name=item.product_name_snapshot,
        )
        for item in sale.items
    ]
    customer_id = sale.customer_id

    if not sale_repository.mark_canceled(sale_id, canceled_at=utcnow(), reason=reason):
        # Lost a race with another cancellation
        db.session.expire_all()
        current = sale_repository.find_by_sale_id(sale_id)
        if current is None:
            raise NotFound(sale_id)
        raise _already_canceled(current)

    restoration_failures = stock_reservation.restore(lines)
    if restoration_failures:
        current_app.logger.error(
            "Sale %s canceled with partial stock restoration (%d of %d line(s) failed)",
            sale_id, len(restoration_failures), len(lines),
        )

    customer_reversed = None
    if customer_id is not None:
        customer_reversed = _reverse_customer_purchase(customer_id)

    db.session.expire_all()
    sale = sale_repository.find_by_sale_id(sale_id)
    current_app.logger.info("Sale %s canceled", sale_id)

    return CancellationOutcome(
        sale=sale,
        restoration_failures=restoration_failures,
        customer_reversed=customer_reversed,
    )
