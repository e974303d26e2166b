# Overview: Service-layer operations for sales; turns a validated cart into a committed sale.

"""
Create-sale flow (saga)

    validate cart                 pre-mutation, nothing touched
    resolve customer + products   pre-mutation, ReferenceNotFound
    reserve stock                 mutates products, compensates itself on failure
    price                         pure
    persist sale                  compensates the whole reservation on failure
    customer purchases_count += 1 best-effort, after the sale exists

Any error raised after the reservation succeeded releases the reserved stock
before it propagates: the caller never sees stock taken without a sale.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Sale, SaleItem, SALE_STATUS_COMPLETED
from cafecito.errors import DuplicateIdentifier, NotFound, PersistenceConflict, ReferenceNotFound
from cafecito.validation import SaleRequest, validate_sale_request
from . import catalog_service, customer_service, discount_policy, sale_repository, stock_reservation
from .identifier_service import build_sale_id
from .pricing_service import PricedLine, price_lines
from .stock_reservation import ReservationLine


def _resolve_products(request: SaleRequest) -> dict[int, tuple[str, int]]:
    """Snapshot (name, price_cents) of every active product in the cart."""
    snapshots: dict[int, tuple[str, int]] = {}
    for item in request.items:
        if item.product_id in snapshots:
            continue
        product = catalog_service.find_active_by_id(item.product_id)
        if product is None:
            raise ReferenceNotFound(
                "product", item.product_id, "Product does not exist or is inactive",
            )
        snapshots[item.product_id] = (product.name, product.price_cents)
    return snapshots


def _record_purchase(customer_id: int) -> None:
    try:
        if not customer_service.increment_purchases(customer_id):
            current_app.logger.warning(
                "Customer %s vanished before purchases_count could be incremented", customer_id
            )
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.warning(
            "Failed to increment purchases_count for customer %s", customer_id, exc_info=True
        )


def create_sale(payload) -> Sale:
    """
    Create a committed sale from a cart payload (or an already validated SaleRequest).

    Raises:
        ValidationFailed, ReferenceNotFound: before anything is mutated
        InsufficientStock: after releasing every line reserved so far
        PersistenceConflict: the generated sale_id already existed; stock released
    """
    request = payload if isinstance(payload, SaleRequest) else validate_sale_request(payload)

    purchases_count = 0
    if request.customer_id is not None:
        customer = customer_service.find_by_id(request.customer_id)
        if customer is None:
            raise ReferenceNotFound("customer", request.customer_id)
        purchases_count = customer.purchases_count

    snapshots = _resolve_products(request)
    lines = [
        ReservationLine(
            product_id=item.product_id,
            quantity=item.quantity,
            product_name=snapshots[item.product_id][0],
        )
        for item in request.items
    ]

    committed = stock_reservation.reserve(lines)

    try:
        discount_percent = discount_policy.percent(purchases_count) if request.customer_id is not None else 0
        breakdown = price_lines(
            (
                PricedLine(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price_cents=snapshots[item.product_id][1],
                )
                for item in request.items
            ),
            discount_percent,
        )

        config = current_app.config
        sale = Sale(
            sale_id=build_sale_id(
                config["SALE_ID_PREFIX"],
                suffix_digits=config["SALE_ID_SUFFIX_DIGITS"],
            ),
            customer_id=request.customer_id,
            payment_method=request.payment_method,
            subtotal_cents=breakdown.subtotal_cents,
            discount_percent=breakdown.discount_percent,
            discount_amount_cents=breakdown.discount_amount_cents,
            total_cents=breakdown.total_cents,
            status=SALE_STATUS_COMPLETED,
            cancel_reason="",
        )
        for position, (item, line_total) in enumerate(zip(request.items, breakdown.line_totals)):
            name, unit_price_cents = snapshots[item.product_id]
            sale.items.append(SaleItem(
                position=position,
                product_id=item.product_id,
                product_name_snapshot=name,
                unit_price_cents=unit_price_cents,
                quantity=item.quantity,
                line_total_cents=line_total,
            ))

        sale = sale_repository.create(sale)
    except DuplicateIdentifier as exc:
        failures = stock_reservation.release(committed)
        details = {"sale_id": exc.sale_id}
        if failures:
            details["compensation_failures"] = failures
        current_app.logger.error("Sale id collision on %s; reserved stock released", exc.sale_id)
        raise PersistenceConflict("Could not allocate a unique sale id", details=details) from exc
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to persist sale; releasing reserved stock")
        stock_reservation.release(committed)
        raise

    folio = sale.sale_id
    if request.customer_id is not None:
        _record_purchase(request.customer_id)

    current_app.logger.info(
        "Sale %s committed: %d line(s), total_cents=%s", folio, len(committed), breakdown.total_cents
    )
    return sale


def get_sale(sale_id: str) -> Sale:
    sale = sale_repository.find_by_sale_id(sale_id)
    if sale is None:
        raise NotFound(sale_id)
    return sale
