# backend/purchasing/services/item_service.py
"""
Item Catalog Service

Plain CRUD over Item. Supplies price/cost lookups to the purchase order
service (get_items_by_ids).

UPDATE: full replace of name/description/price/cost. created_by and
created_datetime are preserved.

DELETE: unknown id raises ResourceNotFoundError (same policy as purchase
orders). An item still referenced by purchase order details cannot be
deleted (ConflictError).
"""
from __future__ import annotations

from typing import Iterable

from flask import current_app

from ..errors import ConflictError, ResourceNotFoundError
from ..extensions import db
from ..models import Item, PurchaseOrderDetail
from ..pagination import Page, PageRequest, paginate
from .transaction import atomic
from ..time_utils import utcnow

ITEM_MUTABLE_FIELDS = ("name", "description", "price", "cost")


def apply_item_patch(item: Item, patch: dict) -> None:
    # Full replace: fields missing from the patch are cleared
    for k in ITEM_MUTABLE_FIELDS:
        setattr(item, k, patch.get(k))


def list_items(page_request: PageRequest) -> Page[Item]:
    current_app.logger.debug("Finding all items page=%s size=%s", page_request.number, page_request.size)
    query = db.session.query(Item).order_by(Item.name.asc(), Item.id.asc())
    return paginate(query, page_request)


def get_item(item_id: int) -> Item | None:
    current_app.logger.debug("Finding item with id: %s", item_id)
    return db.session.get(Item, item_id)


def get_items_by_ids(item_ids: Iterable[int]) -> dict[int, Item]:
    """Batch lookup: id -> Item for the ids that exist."""
    ids = set(item_ids)
    if not ids:
        return {}
    items = db.session.query(Item).filter(Item.id.in_(ids)).all()
    return {item.id: item for item in items}


def create_item(*, patch: dict, actor: str) -> Item:
    """
    Create an item from a validated patch dict.

    Both audit timestamps are set to the same "now".
    """
    item = Item()
    apply_item_patch(item, patch)
    item.stamp_created(actor, utcnow())

    with atomic() as session:
        session.add(item)

    current_app.logger.info("Item created with id: %s", item.id)
    return item


def update_item(*, item_id: int, patch: dict, actor: str) -> Item | None:
    """
    Replace an item's fields.

    Returns:
        Updated Item, or None if not found
    """
    item = db.session.get(Item, item_id)
    if item is None:
        return None

    with atomic():
        apply_item_patch(item, patch)
        item.stamp_updated(actor, utcnow())

    current_app.logger.info("Item updated with id: %s", item_id)
    return item


def delete_item(item_id: int) -> bool:
    """
    Delete an item.

    Raises:
        ResourceNotFoundError: If the item does not exist
        ConflictError: If purchase order details still reference it
    """
    item = db.session.get(Item, item_id)
    if item is None:
        raise ResourceNotFoundError("Item", item_id)

    in_use = (
        db.session.query(PurchaseOrderDetail.id)
        .filter(PurchaseOrderDetail.item_id == item_id)
        .first()
    )
    if in_use is not None:
        raise ConflictError(f"Item {item_id} is referenced by purchase order details")

    with atomic() as session:
        session.delete(item)

    current_app.logger.info("Item deleted with id: %s", item_id)
    return True
