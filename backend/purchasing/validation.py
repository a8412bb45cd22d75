from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError
from .models import BIGINT_MAX, INTEGER_MAX
from .services.purchase_order_service import DetailRequest
from .time_utils import parse_api_datetime


# Maximum money value accepted on any price/cost field
MAX_MONEY = 999_999_999_999

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)*$")


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - fields: API name -> model column key (also the writable allowlist)
    - required: API names required on create (and on full replace)
    - non_negative: integer fields that must be >= 0
    - email_fields: string fields that must look like an email
    """
    fields: dict[str, str]
    required: frozenset[str] = field(default_factory=frozenset)
    non_negative: frozenset[str] = field(default_factory=frozenset)
    email_fields: frozenset[str] = field(default_factory=frozenset)


ITEM_POLICY = ModelValidationPolicy(
    fields={"name": "name", "description": "description", "price": "price", "cost": "cost"},
    required=frozenset({"name", "price", "cost"}),
    non_negative=frozenset({"price", "cost"}),
)

USER_POLICY = ModelValidationPolicy(
    fields={"firstName": "first_name", "lastName": "last_name", "email": "email", "phone": "phone"},
    required=frozenset({"firstName", "lastName", "email"}),
    email_fields=frozenset({"email"}),
)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_int(name: str, value: Any) -> int:
    """
    Strict integer coercion: rejects floats, booleans and scientific notation.
    Raises ValueError with a field-level message.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValueError(f"{name} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValueError(f"{name} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValueError(f"{name} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValueError(f"{name} must be an integer")
    if isinstance(value, float):
        raise ValueError(f"{name} must be an integer, not a decimal")
    raise ValueError(f"{name} must be an integer")


def _coerce_value(name: str, col, value: Any):
    coltype = col.type

    if isinstance(coltype, Integer):
        return _coerce_int(name, value)

    if isinstance(coltype, (String, Text)):
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string")
        return value.strip()

    # Default: leave as-is
    return value


def _check_money(name: str, value: int, *, allow_zero: bool = True) -> None:
    if allow_zero and value < 0:
        raise ValueError(f"{name} must be zero or positive")
    if not allow_zero and value <= 0:
        raise ValueError(f"{name} must be positive")
    if value > MAX_MONEY:
        raise ValueError(f"{name} cannot exceed {MAX_MONEY}")


def _require_object(payload) -> dict:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (fields)
    - required fields (if partial=False)
    Returns a cleaned patch dict keyed by model column.

    partial=False: create / full-replace semantics (enforce required)
    partial=True: merge semantics (validate only provided, non-null keys)

    Every problem is collected; one ValidationError carries all of them.
    """
    payload = _require_object(payload)
    cols = _columns_by_key(model)
    errors: dict[str, str] = {}

    for k in payload.keys():
        if k not in policy.fields:
            errors[k] = "Field not allowed"

    if not partial:
        for k in sorted(policy.required):
            if payload.get(k) is None:
                errors.setdefault(k, f"{k} is required")

    patch: dict = {}

    for k, raw in payload.items():
        if k in errors:
            continue
        col = cols[policy.fields[k]]

        # NULL handling: merge updates treat null as "keep existing"
        if raw is None:
            if not partial:
                patch[col.key] = None
            continue

        try:
            val = _coerce_value(k, col, raw)

            if isinstance(val, str):
                # Blank string check for required text fields
                if val == "":
                    if not col.nullable:
                        raise ValueError(f"{k} must not be blank")
                    val = None
                # Max length check for String(n)
                elif isinstance(col.type, String) and col.type.length and len(val) > col.type.length:
                    raise ValueError(f"{k} must not exceed {col.type.length} characters")
                elif k in policy.email_fields and not EMAIL_RE.match(val):
                    raise ValueError(f"{k} must be a valid email")

            if k in policy.non_negative:
                _check_money(k, val)
        except ValueError as e:
            errors[k] = str(e)
            continue

        patch[col.key] = val

    if errors:
        raise ValidationError(field_errors=errors)
    return patch


def _parse_datetime_field(name: str, raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"{name} must be a string formatted yyyy-MM-dd'T'HH:mm:ss")
    try:
        dt = parse_api_datetime(raw)
    except ValueError:
        raise ValueError(f"{name} must be formatted yyyy-MM-dd'T'HH:mm:ss")
    if dt is None:
        raise ValueError(f"{name} is required")
    return dt


def _parse_detail(index: int, raw: Any, errors: dict[str, str]) -> DetailRequest | None:
    prefix = f"details[{index}]"
    if not isinstance(raw, dict):
        errors[prefix] = "must be an object"
        return None

    values: dict[str, int | None] = {}
    ok = True
    for key, required, check in (
        ("itemId", True, "id"),
        ("quantity", True, "positive"),
        ("unitPrice", False, "money"),
        ("cost", False, "money"),
    ):
        value = raw.get(key)
        if value is None:
            if required:
                errors[f"{prefix}.{key}"] = f"{key} is required"
                ok = False
            values[key] = None
            continue
        try:
            value = _coerce_int(key, value)
            if check in ("id", "positive"):
                if value <= 0:
                    raise ValueError(f"{key} must be positive")
                if value > INTEGER_MAX:
                    raise ValueError(f"{key} cannot exceed {INTEGER_MAX}")
            if check == "money":
                _check_money(key, value)
        except ValueError as e:
            errors[f"{prefix}.{key}"] = str(e)
            ok = False
            continue
        values[key] = value

    if not ok:
        return None

    # Overridden unit values are known here; item snapshots are checked by the service
    for key in ("unitPrice", "cost"):
        if values[key] is not None and values[key] * values["quantity"] > BIGINT_MAX:
            errors[f"{prefix}.{key}"] = f"{key} x quantity cannot exceed {BIGINT_MAX}"
            ok = False
    if not ok:
        return None

    return DetailRequest(
        item_id=values["itemId"],
        quantity=values["quantity"],
        unit_price=values["unitPrice"],
        unit_cost=values["cost"],
    )


def validate_purchase_order_payload(payload: dict, *, partial: bool) -> dict:
    """
    Validate a purchase order body.

    Returns a dict with only the keys the client supplied:
    - order_datetime: naive = local civil in the app zone, aware = absolute
    - description: trimmed; "" is kept so an update can clear the field
    - details: list[DetailRequest] (never empty)
    - total_price / total_cost: informational; the service recomputes

    partial=False (POST / PUT): datetime, totalPrice, totalCost and a
    non-empty details list are required.
    partial=True (PATCH): everything optional; null means "keep".
    """
    payload = _require_object(payload)
    errors: dict[str, str] = {}
    cleaned: dict = {}

    raw_dt = payload.get("datetime")
    if raw_dt is None:
        if not partial:
            errors["datetime"] = "Datetime is required"
    else:
        try:
            cleaned["order_datetime"] = _parse_datetime_field("datetime", raw_dt)
        except ValueError as e:
            errors["datetime"] = str(e)

    raw_desc = payload.get("description")
    if raw_desc is not None:
        if not isinstance(raw_desc, str):
            errors["description"] = "description must be a string"
        elif len(raw_desc.strip()) > 500:
            errors["description"] = "Description must not exceed 500 characters"
        else:
            cleaned["description"] = raw_desc.strip()

    for api_key, key in (("totalPrice", "total_price"), ("totalCost", "total_cost")):
        raw = payload.get(api_key)
        if raw is None:
            if not partial:
                errors[api_key] = f"{api_key} is required"
            continue
        try:
            value = _coerce_int(api_key, raw)
            _check_money(api_key, value)
        except ValueError as e:
            errors[api_key] = str(e)
            continue
        cleaned[key] = value

    raw_details = payload.get("details")
    if raw_details is None:
        if not partial:
            errors["details"] = "Purchase order details cannot be empty"
    elif not isinstance(raw_details, list):
        errors["details"] = "details must be a list"
    elif not raw_details:
        errors["details"] = "Purchase order details cannot be empty"
    else:
        details = [_parse_detail(i, d, errors) for i, d in enumerate(raw_details)]
        if all(d is not None for d in details):
            cleaned["details"] = details

    if errors:
        raise ValidationError(field_errors=errors)
    return cleaned
