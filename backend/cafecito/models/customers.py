from __future__ import annotations

from ..extensions import db
from cafecito.time_utils import to_utc_z


class Customer(db.Model):
    """
    Customer master data used for the loyalty discount tier.

    purchases_count is a denormalized counter: +1 when a sale is committed,
    -1 (never below zero) when that sale is canceled.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.CheckConstraint("purchases_count >= 0", name="ck_customers_purchases_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False)

    # Phone number or e-mail, stored lowercase
    contact = db.Column(db.String(120), nullable=False, index=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    purchases_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r} purchases={self.purchases_count}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contact": self.contact,
            "is_active": self.is_active,
            "purchases_count": self.purchases_count,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
