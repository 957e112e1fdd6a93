# core/schemas/common.py
"""
Shared normalisers for the input schemas.

Each helper takes a raw form value and either returns the normalised value
or raises ValueError with the message shown next to the field.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import HttpUrl, TypeAdapter, ValidationError

from core.utils.dates import to_datetime
from core.utils.isbn import is_valid_isbn, normalize_isbn

_url_adapter = TypeAdapter(HttpUrl)


def required_text(value: Any, message: str) -> str:
    """Trim a required string; empty after trimming is an error"""
    if value is None:
        raise ValueError(message)
    if not isinstance(value, str):
        raise ValueError("Must be text")
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


def optional_text(value: Any) -> Optional[str]:
    """Trim an optional string; empty becomes None"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Must be text")
    return value.strip() or None


def max_length(value: Optional[str], limit: int, message: str) -> Optional[str]:
    if value is not None and len(value) > limit:
        raise ValueError(message)
    return value


def isbn_value(value: Any) -> Optional[str]:
    """Normalise an ISBN; accepts ISBN-10 (optionally ending in X) or ISBN-13"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Invalid ISBN format")
    normalized = normalize_isbn(value)
    if normalized is None:
        return None
    if not is_valid_isbn(normalized):
        raise ValueError("Invalid ISBN format")
    return normalized


def url_value(value: Any) -> Optional[str]:
    """Validate an http(s) URL, keeping the caller's spelling of it"""
    value = optional_text(value)
    if value is None:
        return None
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL") from None
    return value


def datetime_value(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    parsed = to_datetime(value)
    if parsed is None:
        raise ValueError("Invalid date")
    return parsed


def _field_label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def field_errors(exc: ValidationError, skip: Tuple[str, ...] = ()) -> Dict[str, str]:
    """Flatten a ValidationError into {field: first message}.

    Nested locations are joined with dots (e.g. "reads.0.finished_at");
    model-level errors are reported under "__root__". A leading location
    part listed in `skip` (FastAPI's "body", "query") is dropped.
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in skip:
            loc = loc[1:]
        field = ".".join(loc) if loc else "__root__"
        if error.get("type") == "missing":
            message = f"{_field_label(loc[-1])} is required" if loc else "Required"
        else:
            message = error.get("msg", "Invalid value")
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def first_error(exc: ValidationError) -> str:
    """The first field message, for endpoints that report a single error"""
    errors = field_errors(exc)
    return next(iter(errors.values()), "Invalid input")
