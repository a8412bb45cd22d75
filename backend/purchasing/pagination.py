# Overview: Page requests from query params and the paged response envelope.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Mapping, TypeVar

from flask import current_app

from .errors import ValidationError
from .models import INTEGER_MAX

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """0-based page number and page size."""
    number: int
    size: int

    @property
    def offset(self) -> int:
        return self.number * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    number: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.total_elements == 0:
            return 0
        return (self.total_elements + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def to_dict(self, serialize: Callable[[T], dict]) -> dict:
        return {
            "content": [serialize(item) for item in self.items],
            "page": {
                "number": self.number,
                "size": self.size,
                "totalElements": self.total_elements,
                "totalPages": self.total_pages,
                "first": not self.has_previous,
                "last": not self.has_next,
                "hasNext": self.has_next,
                "hasPrevious": self.has_previous,
            },
        }


def _int_arg(
    args: Mapping[str, str], name: str, default: int, minimum: int, errors: dict, maximum: int | None = None
) -> int:
    raw = args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        errors[name] = f"{name} must be an integer"
        return default
    if value < minimum:
        errors[name] = f"{name} must be >= {minimum}"
    elif maximum is not None and value > maximum:
        errors[name] = f"{name} must be <= {maximum}"
    return value


def page_request_from_args(args: Mapping[str, str]) -> PageRequest:
    """
    Query params:
    - page: int (optional) - page number (0-based, default 0)
    - size: int (optional) - items per page (default DEFAULT_PAGE_SIZE, max MAX_PAGE_SIZE)
    """
    default_size = current_app.config.get("DEFAULT_PAGE_SIZE", 10)
    max_size = current_app.config.get("MAX_PAGE_SIZE", 100)

    errors: dict[str, str] = {}
    number = _int_arg(args, "page", 0, 0, errors, maximum=INTEGER_MAX)
    size = _int_arg(args, "size", default_size, 1, errors)
    if errors:
        raise ValidationError("Invalid pagination parameters", field_errors=errors)

    return PageRequest(number=number, size=min(size, max_size))


def paginate(query, page_request: PageRequest) -> Page:
    """Run an ordered SQLAlchemy query as one page."""
    total = query.order_by(None).count()
    items = query.offset(page_request.offset).limit(page_request.size).all()
    return Page(items=items, number=page_request.number, size=page_request.size, total_elements=total)
