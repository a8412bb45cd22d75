# backend/purchasing/services/user_service.py
"""
User Directory Service

Email is globally unique (compared trimmed + lowercased). The check runs
before every create/update; the users.email unique constraint catches the
race between two writers.

UPDATE: merge semantics. Any field not supplied keeps the stored value.
This differs from items and purchase orders on purpose.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import DuplicateResourceError, ResourceNotFoundError
from ..extensions import db
from ..models import User
from ..pagination import Page, PageRequest, paginate
from .transaction import atomic
from ..time_utils import utcnow

USER_MUTABLE_FIELDS = {"first_name", "last_name", "email", "phone"}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def apply_user_patch(user: User, patch: dict) -> None:
    for k, v in patch.items():
        if k not in USER_MUTABLE_FIELDS:
            continue
        if k == "email" and v is not None:
            v = normalize_email(v)
        setattr(user, k, v)


def _email_taken(email: str, exclude_user_id: int | None = None) -> bool:
    query = db.session.query(User.id).filter(User.email == normalize_email(email))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _duplicate(email: str) -> DuplicateResourceError:
    return DuplicateResourceError(f"User with email {normalize_email(email)} already exists")


def list_users(page_request: PageRequest) -> Page[User]:
    current_app.logger.debug("Fetching all users page=%s size=%s", page_request.number, page_request.size)
    query = db.session.query(User).order_by(User.id.asc())
    return paginate(query, page_request)


def get_user(user_id: int) -> User | None:
    current_app.logger.debug("Fetching user with ID: %s", user_id)
    return db.session.get(User, user_id)


def create_user(*, patch: dict, actor: str) -> User:
    """
    Create a user.

    Raises:
        DuplicateResourceError: If the email already belongs to a user
    """
    email = patch.get("email")
    if email is None:
        raise ValueError("email is required")
    if _email_taken(email):
        raise _duplicate(email)

    user = User()
    apply_user_patch(user, patch)
    user.stamp_created(actor, utcnow())

    try:
        with atomic() as session:
            session.add(user)
    except IntegrityError:
        raise _duplicate(email)

    current_app.logger.info("User created successfully with ID: %s", user.id)
    return user


def update_user(*, user_id: int, patch: dict, actor: str) -> User | None:
    """
    Merge the supplied fields into an existing user.

    Returns:
        Updated User, or None if not found

    Raises:
        DuplicateResourceError: If the new email belongs to another user
    """
    user = db.session.get(User, user_id)
    if user is None:
        return None

    email = patch.get("email")
    if email is not None and normalize_email(email) != user.email and _email_taken(email, exclude_user_id=user.id):
        raise _duplicate(email)

    try:
        with atomic():
            apply_user_patch(user, patch)
            user.stamp_updated(actor, utcnow())
    except IntegrityError:
        raise _duplicate(email or user.email)

    current_app.logger.info("User updated successfully with ID: %s", user_id)
    return user


def delete_user(user_id: int) -> bool:
    """
    Raises:
        ResourceNotFoundError: If the user does not exist
    """
    user = db.session.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)

    with atomic() as session:
        session.delete(user)

    current_app.logger.info("User deleted successfully with ID: %s", user_id)
    return True
