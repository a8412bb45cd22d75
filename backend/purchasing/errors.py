# Overview: Typed service errors and the JSON error envelope for the API.

"""
Error taxonomy

Services raise these; only the handlers registered here know about HTTP.

- ValidationError        -> 400 (optional per-field messages)
- ResourceNotFoundError  -> 404
- DuplicateResourceError -> 409
- ConflictError          -> 409
- anything else          -> 500, generic message, traceback logged only

Envelope:
{
    "status": 404,
    "error": "Resource not found",
    "message": "Purchase Order not found with id: 7",
    "path": "/api/v1/purchase-orders/7",
    "timestamp": "2025-01-15T10:30:00",
    "validationErrors": null
}
"""
from __future__ import annotations

from typing import Iterable, Optional

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .extensions import db
from .time_utils import get_timezone, utcnow


class PurchasingError(Exception):
    """Base exception for all service-level errors."""

    status_code = 500
    label = "Internal server error"


class ValidationError(PurchasingError, ValueError):
    """400-level input problem."""

    status_code = 400
    label = "Validation failed"

    def __init__(self, message: str = "Input validation error occurred", field_errors: Optional[dict] = None):
        self.field_errors = dict(field_errors) if field_errors else None
        super().__init__(message)


class ResourceNotFoundError(PurchasingError, LookupError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    label = "Resource not found"

    def __init__(self, resource: str, ids: int | Iterable[int]):
        if isinstance(ids, int):
            self.ids = [ids]
            message = f"{resource} not found with id: {ids}"
        else:
            self.ids = list(ids)
            message = f"{resource} not found with ids: {self.ids}"
        self.resource = resource
        super().__init__(message)


class DuplicateResourceError(PurchasingError):
    """409-level uniqueness violation (e.g., email already registered)."""

    status_code = 409
    label = "Duplicate resource"


class ConflictError(PurchasingError):
    """409-level business rule conflict (e.g., deleting an item still on an order)."""

    status_code = 409
    label = "Conflict"


def error_body(status: int, label: str, message: str, field_errors: Optional[dict] = None) -> dict:
    return {
        "status": status,
        "error": label,
        "message": message,
        "path": request.path,
        "timestamp": get_timezone().format_for_api_local(utcnow()),
        "validationErrors": field_errors,
    }


def _handle_purchasing_error(exc: PurchasingError):
    db.session.rollback()
    field_errors = getattr(exc, "field_errors", None)
    if field_errors:
        current_app.logger.warning("%s: %s %s", exc.label, exc, field_errors)
    else:
        current_app.logger.warning("%s: %s", exc.label, exc)
    return jsonify(error_body(exc.status_code, exc.label, str(exc), field_errors)), exc.status_code


def _handle_http_exception(exc: HTTPException):
    db.session.rollback()
    status = exc.code or 500
    return jsonify(error_body(status, exc.name, exc.description or exc.name)), status


def _handle_unexpected(exc: Exception):
    db.session.rollback()
    current_app.logger.exception("Unexpected error occurred")
    return jsonify(error_body(500, "Internal server error", "An unexpected error occurred")), 500


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(PurchasingError, _handle_purchasing_error)
    app.register_error_handler(HTTPException, _handle_http_exception)
    app.register_error_handler(Exception, _handle_unexpected)
