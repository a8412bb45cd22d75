# Overview: Request decorators and helpers for API routes.

from functools import wraps
from flask import current_app, g, request


def with_actor(f):
    """
    Establish the actor recorded on created_by / updated_by.

    Sets g.actor. There is no authentication yet, so this is always the
    configured DEFAULT_ACTOR; routes read g.actor and never invent one.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.actor = current_app.config.get("DEFAULT_ACTOR") or "SYSTEM"
        return f(*args, **kwargs)

    return decorated_function


def json_body():
    """Parsed JSON body, {} when absent or unparseable."""
    payload = request.get_json(silent=True)
    return {} if payload is None else payload
