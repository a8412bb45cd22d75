# Overview: Service-layer operations for purchase orders; owns the header/detail aggregate.

"""
Purchase Order Service

The purchase order is an aggregate: one header that exclusively owns its
detail lines. This module is the only place that writes either table.

RULES:
- Every detail references an existing Item. All referenced ids are checked
  in one batch BEFORE anything is written; a missing id fails the whole
  request with ResourceNotFoundError naming the missing ids.
- Detail unit price/cost are snapshots: the request value when given
  (zero included), otherwise the item's current price/cost.
- header.total_price = sum(unit_price * quantity) and
  header.total_cost = sum(unit_cost * quantity) over the owned details,
  recomputed every time the details change.
- Update replaces details wholesale (full replace, never a merge). Header
  scalars follow merge semantics: a field left out keeps its value.
- Order datetimes come in as local civil time of the app zone and are
  stored as UTC.
- Each create/update/delete is one transaction.

LIFECYCLE: created -> updated* -> deleted. No status field.

CONCURRENCY: no version column. Two concurrent updates of the same order
are last-write-wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from flask import current_app
from sqlalchemy.orm import selectinload

from ..errors import ResourceNotFoundError, ValidationError
from ..extensions import db
from ..models import BIGINT_MAX, Item, PurchaseOrderDetail, PurchaseOrderHeader
from ..pagination import Page, PageRequest, paginate
from .item_service import get_items_by_ids
from .transaction import atomic
from ..time_utils import to_utc, utcnow


@dataclass(frozen=True)
class DetailRequest:
    """One requested line. None price/cost means "take it from the item"."""
    item_id: int
    quantity: int
    unit_price: Optional[int] = None
    unit_cost: Optional[int] = None


@dataclass(frozen=True)
class OrderTotals:
    total_price: int
    total_cost: int


def calculate_totals(details: Sequence[PurchaseOrderDetail]) -> OrderTotals:
    return OrderTotals(
        total_price=sum(d.line_total_price for d in details),
        total_cost=sum(d.line_total_cost for d in details),
    )


def _resolve_items(requests: Sequence[DetailRequest]) -> dict[int, Item]:
    """Batch-load every referenced item; fail if any id is unknown."""
    item_ids = list(dict.fromkeys(r.item_id for r in requests))
    items = get_items_by_ids(item_ids)

    missing = [item_id for item_id in item_ids if item_id not in items]
    if missing:
        raise ResourceNotFoundError("Items", missing)
    return items


def build_detail(request: DetailRequest, item: Item) -> PurchaseOrderDetail:
    return PurchaseOrderDetail(
        item=item,
        item_id=item.id,
        quantity=request.quantity,
        unit_cost=request.unit_cost if request.unit_cost is not None else item.cost,
        unit_price=request.unit_price if request.unit_price is not None else item.price,
    )


def _check_ranges(details: Sequence[PurchaseOrderDetail]) -> None:
    """Line and order totals must fit the BigInteger columns."""
    errors: dict[str, str] = {}
    for index, detail in enumerate(details):
        if detail.line_total_price > BIGINT_MAX or detail.line_total_cost > BIGINT_MAX:
            errors[f"details[{index}].quantity"] = f"Line total cannot exceed {BIGINT_MAX}"
    if not errors:
        totals = calculate_totals(details)
        if totals.total_price > BIGINT_MAX:
            errors["totalPrice"] = f"Order total price cannot exceed {BIGINT_MAX}"
        if totals.total_cost > BIGINT_MAX:
            errors["totalCost"] = f"Order total cost cannot exceed {BIGINT_MAX}"
    if errors:
        raise ValidationError(field_errors=errors)


def _build_details(requests: Sequence[DetailRequest]) -> list[PurchaseOrderDetail]:
    if not requests:
        raise ValidationError(
            "Purchase order details cannot be empty",
            field_errors={"details": "Purchase order details cannot be empty"},
        )
    items = _resolve_items(requests)
    details = [build_detail(r, items[r.item_id]) for r in requests]
    _check_ranges(details)
    return details


def _apply_totals(po: PurchaseOrderHeader, details: Sequence[PurchaseOrderDetail]) -> None:
    totals = calculate_totals(details)
    po.total_price = totals.total_price
    po.total_cost = totals.total_cost


def _warn_on_client_totals(po: PurchaseOrderHeader, total_price: Optional[int], total_cost: Optional[int]) -> None:
    # Client totals are informational; the computed ones are stored
    if total_price is not None and total_price != po.total_price:
        current_app.logger.warning(
            "Client totalPrice %s differs from computed %s; using computed", total_price, po.total_price
        )
    if total_cost is not None and total_cost != po.total_cost:
        current_app.logger.warning(
            "Client totalCost %s differs from computed %s; using computed", total_cost, po.total_cost
        )


def list_purchase_orders(page_request: PageRequest) -> Page[PurchaseOrderHeader]:
    """
    Newest first (id descending). Details are not joined here; they load
    per header when serialized.
    """
    current_app.logger.debug(
        "Finding all purchase orders page=%s size=%s", page_request.number, page_request.size
    )
    query = db.session.query(PurchaseOrderHeader).order_by(PurchaseOrderHeader.id.desc())
    return paginate(query, page_request)


def get_purchase_order(purchase_order_id: int) -> PurchaseOrderHeader | None:
    """Fetch one order with its details and each detail's item loaded eagerly."""
    current_app.logger.debug("Finding purchase order with id: %s", purchase_order_id)
    return (
        db.session.query(PurchaseOrderHeader)
        .options(selectinload(PurchaseOrderHeader.details).joinedload(PurchaseOrderDetail.item))
        .filter(PurchaseOrderHeader.id == purchase_order_id)
        .first()
    )


def create_purchase_order(
    *,
    order_datetime: datetime,
    details: Sequence[DetailRequest],
    actor: str,
    description: str | None = None,
    total_price: int | None = None,
    total_cost: int | None = None,
) -> PurchaseOrderHeader:
    """
    Create a purchase order with its details in one transaction.

    Args:
        order_datetime: Local civil datetime in the app zone (aware values
            are taken as absolute)
        details: Requested lines (must not be empty)
        actor: Recorded as created_by and updated_by
        description: Optional free text
        total_price / total_cost: Client-side totals, only compared and logged

    Raises:
        ValidationError: If details is empty
        ResourceNotFoundError: If any referenced item does not exist
    """
    current_app.logger.info("Creating new purchase order")

    if order_datetime is None:
        raise ValidationError("Datetime is required", field_errors={"datetime": "Datetime is required"})

    # Validation and item resolution happen before any write
    new_details = _build_details(details)

    po = PurchaseOrderHeader(
        order_datetime=to_utc(order_datetime),
        description=description or None,
    )
    po.details.extend(new_details)
    _apply_totals(po, new_details)
    po.stamp_created(actor, utcnow())
    _warn_on_client_totals(po, total_price, total_cost)

    with atomic() as session:
        session.add(po)

    current_app.logger.info("Purchase order created with id: %s", po.id)
    return po


def update_purchase_order(
    *,
    purchase_order_id: int,
    actor: str,
    order_datetime: datetime | None = None,
    description: str | None = None,
    details: Sequence[DetailRequest] | None = None,
    total_price: int | None = None,
    total_cost: int | None = None,
) -> PurchaseOrderHeader:
    """
    Update a purchase order.

    - order_datetime / description: replaced when given, kept when None
    - details: None keeps the existing lines and totals; a list discards
      every existing line and builds a new set (totals recomputed)

    Raises:
        ResourceNotFoundError: If the order or any referenced item is missing
        ValidationError: If details is an empty list
    """
    current_app.logger.info("Updating purchase order with id: %s", purchase_order_id)

    po = db.session.get(PurchaseOrderHeader, purchase_order_id)
    if po is None:
        raise ResourceNotFoundError("Purchase Order", purchase_order_id)

    # Resolve before touching the header so a bad item id writes nothing
    new_details = _build_details(details) if details is not None else None

    with atomic() as session:
        if order_datetime is not None:
            po.order_datetime = to_utc(order_datetime)
        if description is not None:
            # "" clears the stored description
            po.description = description or None

        if new_details is not None:
            # Orphaned rows are deleted by the delete-orphan cascade; flush
            # the deletes before inserting the replacement set.
            po.details.clear()
            session.flush()
            po.details.extend(new_details)
            _apply_totals(po, new_details)
            _warn_on_client_totals(po, total_price, total_cost)

        po.stamp_updated(actor, utcnow())

    current_app.logger.info("Purchase order updated with id: %s", purchase_order_id)
    return po


def delete_purchase_order(purchase_order_id: int) -> bool:
    """
    Delete a purchase order and all of its details.

    Raises:
        ResourceNotFoundError: If the order does not exist
    """
    current_app.logger.info("Deleting purchase order with id: %s", purchase_order_id)

    po = db.session.get(PurchaseOrderHeader, purchase_order_id)
    if po is None:
        raise ResourceNotFoundError("Purchase Order", purchase_order_id)

    with atomic() as session:
        session.delete(po)

    current_app.logger.info("Purchase order deleted with id: %s", purchase_order_id)
    return True
