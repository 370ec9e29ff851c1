"""Serializer - Converts payload records to and from wire JSON.

Write policy: None-valued fields are omitted, enums are written as their
string value, dates and datetimes as ISO 8601 text, field names by alias.
Read policy: unknown fields are ignored (see models.ApiModel).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from apistax_client.errors import DecodeError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def encode(payload: Any) -> bytes:
    """Serialize a payload record (or plain JSON-compatible value) to JSON bytes."""
    return _adapter(type(payload)).dump_json(payload, by_alias=True, exclude_none=True)


def decode(data: bytes, result_type: type[T]) -> T:
    """Parse JSON bytes into result_type.

    Raises:
        DecodeError: If data is not valid JSON or does not fit result_type.
    """
    try:
        return _adapter(result_type).validate_json(data)
    except ValidationError as e:
        raise DecodeError(e) from e
