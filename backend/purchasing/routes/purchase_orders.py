# Overview: Flask API routes for purchase orders; parses input and returns JSON responses.

# backend/purchasing/routes/purchase_orders.py
"""
Purchase order routes.

Datetimes in and out are local civil time of the configured zone
(yyyy-MM-dd'T'HH:mm:ss). Typed service errors are turned into the JSON
error envelope by purchasing.errors.
"""
from flask import Blueprint, current_app, g, request

from ..decorators import json_body, with_actor
from ..errors import ResourceNotFoundError
from ..pagination import page_request_from_args
from ..services import purchase_order_service
from ..validation import validate_purchase_order_payload

purchase_orders_bp = Blueprint("purchase_orders", __name__, url_prefix="/api/v1/purchase-orders")


def _serialize_summary(po) -> dict:
    return po.to_dict(include_item=False)


def _serialize_full(po) -> dict:
    return po.to_dict(include_item=True)


def _require_purchase_order(purchase_order_id: int):
    po = purchase_order_service.get_purchase_order(purchase_order_id)
    if po is None:
        raise ResourceNotFoundError("Purchase Order", purchase_order_id)
    return po


@purchase_orders_bp.get("")
def list_purchase_orders():
    """
    List purchase orders, newest first.

    Query params:
    - page: int (optional) - page number (0-based)
    - size: int (optional) - items per page (default 10)
    """
    page_request = page_request_from_args(request.args)
    current_app.logger.info("Listing POs - page: %s, size: %s", page_request.number, page_request.size)

    page = purchase_order_service.list_purchase_orders(page_request)
    return page.to_dict(_serialize_summary)


@purchase_orders_bp.get("/<int:purchase_order_id>")
def get_purchase_order(purchase_order_id: int):
    """Get one purchase order with all details."""
    return _serialize_full(_require_purchase_order(purchase_order_id))


@purchase_orders_bp.post("")
@with_actor
def create_purchase_order():
    """
    Create a purchase order.

    Request body:
    {
        "datetime": "2025-01-15T10:30:00",   // required, local civil time
        "description": "...",                 // optional, <= 500 chars
        "totalPrice": 300,                    // required, recomputed server side
        "totalCost": 240,                     // required, recomputed server side
        "details": [                          // required, non-empty
            {"itemId": 1, "quantity": 3, "unitPrice": null, "cost": null}
        ]
    }
    """
    cleaned = validate_purchase_order_payload(json_body(), partial=False)

    po = purchase_order_service.create_purchase_order(actor=g.actor, **cleaned)
    return _serialize_full(purchase_order_service.get_purchase_order(po.id)), 201


@purchase_orders_bp.put("/<int:purchase_order_id>")
@with_actor
def replace_purchase_order(purchase_order_id: int):
    """Full replace: same body as create; every existing detail is discarded."""
    _require_purchase_order(purchase_order_id)
    cleaned = validate_purchase_order_payload(json_body(), partial=False)

    purchase_order_service.update_purchase_order(
        purchase_order_id=purchase_order_id, actor=g.actor, **cleaned
    )
    return _serialize_full(purchase_order_service.get_purchase_order(purchase_order_id))


@purchase_orders_bp.patch("/<int:purchase_order_id>")
@with_actor
def patch_purchase_order(purchase_order_id: int):
    """
    Partial update: omitted fields keep their values.
    Supplying "details" still replaces the whole set of lines.
    """
    _require_purchase_order(purchase_order_id)
    cleaned = validate_purchase_order_payload(json_body(), partial=True)

    purchase_order_service.update_purchase_order(
        purchase_order_id=purchase_order_id, actor=g.actor, **cleaned
    )
    return _serialize_full(purchase_order_service.get_purchase_order(purchase_order_id))


@purchase_orders_bp.delete("/<int:purchase_order_id>")
def delete_purchase_order(purchase_order_id: int):
    """Delete a purchase order and its details. 204 on success, 404 if absent."""
    purchase_order_service.delete_purchase_order(purchase_order_id)
    return "", 204
