# Overview: Flask API routes for the item catalog; parses input and returns JSON responses.

from flask import Blueprint, g, request

from ..decorators import json_body, with_actor
from ..errors import ResourceNotFoundError
from ..models import Item
from ..pagination import page_request_from_args
from ..services import item_service
from ..validation import ITEM_POLICY, validate_payload

items_bp = Blueprint("items", __name__, url_prefix="/api/v1/items")


@items_bp.get("")
def list_items():
    """
    List items sorted by name.

    Query params:
    - page: int (optional) - page number (0-based)
    - size: int (optional) - items per page (default 10)
    """
    page = item_service.list_items(page_request_from_args(request.args))
    return page.to_dict(Item.to_dict)


@items_bp.get("/<int:item_id>")
def get_item(item_id: int):
    item = item_service.get_item(item_id)
    if item is None:
        raise ResourceNotFoundError("Item", item_id)
    return item.to_dict()


@items_bp.post("")
@with_actor
def create_item():
    patch = validate_payload(model=Item, payload=json_body(), policy=ITEM_POLICY, partial=False)
    item = item_service.create_item(patch=patch, actor=g.actor)
    return item.to_dict(), 201


@items_bp.put("/<int:item_id>")
@with_actor
def update_item(item_id: int):
    """Full replace of name, description, price and cost."""
    if item_service.get_item(item_id) is None:
        raise ResourceNotFoundError("Item", item_id)

    patch = validate_payload(model=Item, payload=json_body(), policy=ITEM_POLICY, partial=False)
    item = item_service.update_item(item_id=item_id, patch=patch, actor=g.actor)
    if item is None:
        raise ResourceNotFoundError("Item", item_id)
    return item.to_dict()


@items_bp.delete("/<int:item_id>")
def delete_item(item_id: int):
    item_service.delete_item(item_id)
    return "", 204
