from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from bookshelf.book import BookInput

NAME_REQUIRED = "Please provide the book name"
READ_PAGE_BOUND = "readPage must not be greater than pageCount"
NOT_AN_OBJECT = '"value" must be of type object'

# Field order defines which violation is reported first.
STRING_FIELDS = ("name", "author", "summary", "publisher")
FIELD_ORDER = ("name", "year", "author", "summary", "publisher", "pageCount", "readPage", "reading")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass: ok, or the first violated rule."""

    ok: bool
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(ok=False, message=message)


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_integer(value: Any) -> bool:
    return is_number(value) and float(value).is_integer()


class BookValidator:
    """Rule checks for book payloads.

    Create runs the full schema, one field at a time in ``FIELD_ORDER``.
    A missing key and an explicit ``null`` are reported differently.
    Update is intentionally looser: only ``name`` presence and the page bound.
    """

    @staticmethod
    def _check_string(key: str, payload: dict) -> Optional[str]:
        if key not in payload:
            return NAME_REQUIRED if key == "name" else f'"{key}" is required'
        value = payload[key]
        if not isinstance(value, str):
            return f'"{key}" must be a string'
        if value == "":
            return f'"{key}" is not allowed to be empty'
        return None

    @staticmethod
    def _check_count(key: str, payload: dict, minimum: Optional[int] = None) -> Optional[str]:
        if key not in payload:
            return f'"{key}" is required'
        value = payload[key]
        if not is_number(value):
            return f'"{key}" must be a number'
        if not is_integer(value):
            return f'"{key}" must be an integer'
        if minimum is not None and value < minimum:
            return f'"{key}" must be greater than or equal to {minimum}'
        return None

    @staticmethod
    def _check_boolean(key: str, payload: dict) -> Optional[str]:
        if key not in payload:
            return f'"{key}" is required'
        if not isinstance(payload[key], bool):
            return f'"{key}" must be a boolean'
        return None

    @staticmethod
    def _check_read_page(payload: dict) -> Optional[str]:
        message = BookValidator._check_count("readPage", payload, minimum=0)
        if message:
            return message
        page_count = payload.get("pageCount")
        if is_number(page_count) and payload["readPage"] > page_count:
            return READ_PAGE_BOUND
        return None

    @staticmethod
    def _check_field(key: str, payload: dict) -> Optional[str]:
        if key in STRING_FIELDS:
            return BookValidator._check_string(key, payload)
        if key == "year":
            return BookValidator._check_count(key, payload)
        if key == "pageCount":
            return BookValidator._check_count(key, payload, minimum=0)
        if key == "readPage":
            return BookValidator._check_read_page(payload)
        return BookValidator._check_boolean(key, payload)

    @staticmethod
    def validate_create(payload: Any) -> ValidationResult:
        """Run the create schema over a raw payload and stop at the first violation."""
        if not isinstance(payload, dict):
            return ValidationResult.failure(NOT_AN_OBJECT)

        for key in FIELD_ORDER:
            message = BookValidator._check_field(key, payload)
            if message:
                return ValidationResult.failure(message)

        for key in payload:
            if key not in FIELD_ORDER:
                return ValidationResult.failure(f'"{key}" is not allowed')

        return ValidationResult.success()

    @staticmethod
    def validate_update(data: BookInput) -> ValidationResult:
        if not data.name:
            return ValidationResult.failure(NAME_REQUIRED)
        if is_number(data.read_page) and is_number(data.page_count) and data.read_page > data.page_count:
            return ValidationResult.failure(READ_PAGE_BOUND)
        return ValidationResult.success()
