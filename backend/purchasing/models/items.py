from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .audit import AuditMixin


class Item(AuditMixin, db.Model):
    """
    Product/item master data.

    Price and cost are whole currency units, never negative. Purchase order
    details copy them at order time; later edits here do not touch existing
    orders.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
        db.CheckConstraint("cost >= 0", name="ck_items_cost_non_negative"),
        db.Index("ix_items_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(500), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    price = db.Column(db.BigInteger, nullable=False)
    cost = db.Column(db.BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Item id={self.id} name={self.name!r} price={self.price} cost={self.cost}>"

    @property
    def profit_margin(self) -> int:
        if self.price is None or self.cost is None:
            return 0
        return self.price - self.cost

    @property
    def profit_percentage(self) -> float:
        if not self.cost or self.price is None:
            return 0.0
        return (self.price - self.cost) / self.cost * 100

    @property
    def is_profitable(self) -> bool:
        return self.profit_margin > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "cost": self.cost,
            "profitMargin": self.profit_margin,
            "profitPercentage": round(self.profit_percentage, 2),
            "profitable": self.is_profitable,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
            "createdDatetime": to_utc_z(self.created_datetime),
            "updatedDatetime": to_utc_z(self.updated_datetime),
        }
