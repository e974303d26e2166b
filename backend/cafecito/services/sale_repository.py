# Overview: Sale record store; create, lookup by folio, and the cancellation transition.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Sale, SALE_STATUS_CANCELED, SALE_STATUS_COMPLETED
from cafecito.errors import DuplicateIdentifier
from .concurrency import conditional_update


def _folio_exists(sale_id: str) -> bool:
    return db.session.query(Sale.id).filter_by(sale_id=sale_id).first() is not None


def create(sale: Sale) -> Sale:
    """
    Persist a fully priced sale (with its items) in one transaction.

    Raises:
        DuplicateIdentifier: sale.sale_id is already taken
    """
    db.session.add(sale)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if _folio_exists(sale.sale_id):
            raise DuplicateIdentifier(sale.sale_id)
        raise
    return sale


def find_by_sale_id(sale_id: str) -> Sale | None:
    return db.session.query(Sale).filter_by(sale_id=sale_id).first()


def mark_canceled(sale_id: str, *, canceled_at: datetime, reason: str) -> bool:
    """
    Apply the completed -> canceled transition at most once.

    The status check is part of the UPDATE, so two racing cancellations
    cannot both succeed. Returns False when the sale was not 'completed'.
    """
    stmt = (
        update(Sale)
        .where(Sale.sale_id == sale_id, Sale.status == SALE_STATUS_COMPLETED)
        .values(status=SALE_STATUS_CANCELED, canceled_at=canceled_at, cancel_reason=reason)
    )
    return conditional_update(stmt)
