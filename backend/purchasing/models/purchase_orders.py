from __future__ import annotations

from ..extensions import db
from ..time_utils import format_for_api_local
from .audit import AuditMixin

# Largest values the Integer and BigInteger columns accept
INTEGER_MAX = 2**31 - 1
BIGINT_MAX = 2**63 - 1


class PurchaseOrderHeader(AuditMixin, db.Model):
    """
    Purchase order aggregate root.

    OWNERSHIP: the header exclusively owns its details. Removing a detail
    from `details` deletes the row (delete-orphan); deleting the header
    deletes every detail.

    TOTALS: total_price / total_cost always equal the sum of the owned
    details' line totals as of the last write. The purchase order service
    recomputes them; the database does not.

    order_datetime is a UTC-naive instant. The API shows it as local civil
    time in the configured zone.

    No version column: concurrent updates are last-write-wins.
    """
    __tablename__ = "purchase_order_headers"
    __table_args__ = (
        db.CheckConstraint("total_price >= 0", name="ck_po_headers_total_price_non_negative"),
        db.CheckConstraint("total_cost >= 0", name="ck_po_headers_total_cost_non_negative"),
        db.Index("ix_po_headers_order_datetime", "order_datetime"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_datetime = db.Column(db.DateTime(timezone=True), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    total_price = db.Column(db.BigInteger, nullable=False, default=0)
    total_cost = db.Column(db.BigInteger, nullable=False, default=0)

    details = db.relationship(
        "PurchaseOrderDetail",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderDetail.id",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<PurchaseOrderHeader id={self.id} total_price={self.total_price} total_cost={self.total_cost}>"

    def to_dict(self, *, include_item: bool = False) -> dict:
        return {
            "id": self.id,
            "datetime": format_for_api_local(self.order_datetime),
            "description": self.description,
            "totalPrice": self.total_price,
            "totalCost": self.total_cost,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
            "createdDatetime": format_for_api_local(self.created_datetime),
            "updatedDatetime": format_for_api_local(self.updated_datetime),
            "details": [d.to_dict(include_item=include_item) for d in self.details],
        }


class PurchaseOrderDetail(db.Model):
    """
    One line of a purchase order.

    unit_price / unit_cost are snapshots taken when the line was built
    (item value unless the request overrode it), not live links to Item.
    """
    __tablename__ = "purchase_order_details"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_po_details_quantity_positive"),
        db.CheckConstraint("unit_price >= 0", name="ck_po_details_unit_price_non_negative"),
        db.CheckConstraint("unit_cost >= 0", name="ck_po_details_unit_cost_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    purchase_order_id = db.Column(
        db.Integer,
        db.ForeignKey("purchase_order_headers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Non-owning: many details may point at the same item
    item_id = db.Column(db.Integer, db.ForeignKey("items.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(db.BigInteger, nullable=False)
    unit_price = db.Column(db.BigInteger, nullable=False)

    purchase_order = db.relationship("PurchaseOrderHeader", back_populates="details")
    item = db.relationship("Item")

    @property
    def line_total_cost(self) -> int:
        return self.unit_cost * self.quantity

    @property
    def line_total_price(self) -> int:
        return self.unit_price * self.quantity

    @property
    def line_profit(self) -> int:
        return self.line_total_price - self.line_total_cost

    def to_dict(self, *, include_item: bool = False) -> dict:
        data = {
            "id": self.id,
            "itemId": self.item_id,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "cost": self.unit_cost,
            "lineTotalPrice": self.line_total_price,
            "lineTotalCost": self.line_total_cost,
            "lineProfit": self.line_profit,
        }
        if include_item:
            data["itemName"] = self.item.name if self.item is not None else None
        return data
