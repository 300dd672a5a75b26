"""
JSON encoding of typed values.

Values are encoded and decoded here, at the API boundary, so the Store table
only ever holds strings. Any type pydantic understands can be stored:
models, dataclasses, TypedDicts, ``Decimal``, containers of those, and so on.
"""

from __future__ import annotations

from typing import Any, TypeVar, cast

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from .exceptions import DeserializationError, SerializationError


T = TypeVar("T")


def _type_name(type_: Any) -> str:
    return cast(str, getattr(type_, "__name__", repr(type_)))


def encode(key: str, value: object) -> str:
    """Serialize ``value`` to a JSON string using its runtime type."""
    value_type = type(value)
    try:
        payload = TypeAdapter(value_type).dump_json(value)
    # PydanticSerializationError and circular-reference errors are ValueErrors
    except (PydanticSchemaGenerationError, ValueError, TypeError) as e:
        raise SerializationError(key, _type_name(value_type), str(e)) from e
    return payload.decode("utf-8")


def decode(key: str, data: str, type_: type[T]) -> T:
    """Validate the JSON string ``data`` into an instance of ``type_``."""
    try:
        return cast(T, TypeAdapter(type_).validate_json(data))
    except (PydanticSchemaGenerationError, ValidationError, TypeError) as e:
        raise DeserializationError(key, _type_name(type_), str(e)) from e
