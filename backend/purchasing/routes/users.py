# Overview: Flask API routes for the user directory; parses input and returns JSON responses.

from flask import Blueprint, g, request

from ..decorators import json_body, with_actor
from ..errors import ResourceNotFoundError
from ..models import User
from ..pagination import page_request_from_args
from ..services import user_service
from ..validation import USER_POLICY, validate_payload

users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")


@users_bp.get("")
def list_users():
    page = user_service.list_users(page_request_from_args(request.args))
    return page.to_dict(User.to_dict)


@users_bp.get("/<int:user_id>")
def get_user(user_id: int):
    user = user_service.get_user(user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user.to_dict()


@users_bp.post("")
@with_actor
def create_user():
    """
    Request body:
    {
        "firstName": "Ada",          // required
        "lastName": "Lovelace",      // required
        "email": "ada@example.com",  // required, unique
        "phone": "+62..."            // optional, <= 20 chars
    }
    """
    patch = validate_payload(model=User, payload=json_body(), policy=USER_POLICY, partial=False)
    user = user_service.create_user(patch=patch, actor=g.actor)
    return user.to_dict(), 201


@users_bp.put("/<int:user_id>")
@with_actor
def update_user(user_id: int):
    """Merge update: omitted or null fields keep their stored values."""
    if user_service.get_user(user_id) is None:
        raise ResourceNotFoundError("User", user_id)

    patch = validate_payload(model=User, payload=json_body(), policy=USER_POLICY, partial=True)
    user = user_service.update_user(user_id=user_id, patch=patch, actor=g.actor)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user.to_dict()


@users_bp.delete("/<int:user_id>")
def delete_user(user_id: int):
    user_service.delete_user(user_id)
    return "", 204
