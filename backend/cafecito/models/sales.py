from __future__ import annotations

from ..extensions import db
from cafecito.time_utils import to_utc_z


SALE_STATUS_COMPLETED = "completed"
SALE_STATUS_CANCELED = "canceled"
PAYMENT_METHODS = ("cash", "card", "transfer")


class Sale(db.Model):
    """
    Committed sale record.

    WHY: A sale is only written after every line has reserved its stock, so a
    row here always means "stock was taken". It is never updated except for
    the one-way completed -> canceled transition, and never deleted.

    MONEY: all amounts in cents. The discount percent is frozen at creation
    and the monetary fields are never recomputed.
    """
    __tablename__ = "sales"
    __table_args__ = (
        # Human-readable folio is the public key of a sale
        db.UniqueConstraint("sale_id", name="uq_sales_sale_id"),
        db.Index("ix_sales_status_created", "status", "created_at"),
        db.CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_sales_discount_percent_range"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Folio (e.g., "CF-20260213-0042")
    sale_id = db.Column(db.String(64), nullable=False)

    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=True, index=True)
    payment_method = db.Column(db.String(16), nullable=False, default="cash")

    subtotal_cents = db.Column(db.Integer, nullable=False)
    discount_percent = db.Column(db.Integer, nullable=False, default=0)
    discount_amount_cents = db.Column(db.Integer, nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False)

    # Lifecycle status
    status = db.Column(db.String(16), nullable=False, default=SALE_STATUS_COMPLETED, index=True)
    canceled_at = db.Column(db.DateTime(timezone=True), nullable=True)
    cancel_reason = db.Column(db.String(255), nullable=False, default="")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    customer = db.relationship("Customer", backref=db.backref("sales", lazy=True))
    items = db.relationship(
        "SaleItem",
        back_populates="sale",
        order_by="SaleItem.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    @property
    def is_canceled(self) -> bool:
        return self.status == SALE_STATUS_CANCELED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_id": self.sale_id,
            "customer_id": self.customer_id,
            "payment_method": self.payment_method,
            "items": [item.to_dict() for item in self.items],
            "subtotal_cents": self.subtotal_cents,
            "discount_percent": self.discount_percent,
            "discount_amount_cents": self.discount_amount_cents,
            "total_cents": self.total_cents,
            "status": self.status,
            "canceled_at": to_utc_z(self.canceled_at) if self.canceled_at else None,
            "cancel_reason": self.cancel_reason,
            "created_at": to_utc_z(self.created_at),
        }


class SaleItem(db.Model):
    """Line item of a sale with name/price snapshots taken at sale time."""
    __tablename__ = "sale_items"
    __table_args__ = (
        db.UniqueConstraint("sale_pk", "position", name="uq_sale_items_sale_position"),
        db.CheckConstraint("quantity >= 1", name="ck_sale_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_pk = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)

    # Cart order (0-based); restoration and display follow it
    position = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    product_name_snapshot = db.Column(db.String(100), nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    line_total_cents = db.Column(db.Integer, nullable=False)

    sale = db.relationship("Sale", back_populates="items")

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name_snapshot,
            "unit_price_cents": self.unit_price_cents,
            "quantity": self.quantity,
            "line_total_cents": self.line_total_cents,
        }
