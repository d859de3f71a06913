"""JSON serialization configuration for typed payloads.

Payload types are handled through pydantic ``TypeAdapter`` so that models,
dataclasses, TypedDicts and plain containers all serialize the same way.
JsonOptions is the pluggable configuration object shared by JsonRequest
and JsonResponse.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from restwire.constants import JSON_MEDIA_TYPE
from restwire.errors import SerializationError

T = TypeVar("T")


@dataclass(frozen=True)
class JsonOptions:
    """Options controlling JSON encoding and decoding.

    Attributes:
        by_alias: Use field aliases when dumping models (default: True)
        exclude_none: Omit fields whose value is None (default: False)
        indent: Pretty-print with this indent; None for compact output
        strict: Validate decoded payloads in pydantic strict mode (default: False)
    """

    by_alias: bool = True
    exclude_none: bool = False
    indent: int | None = None
    strict: bool = False


DEFAULT_JSON_OPTIONS = JsonOptions()


@lru_cache(maxsize=256)
def _adapter(payload_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(payload_type)


def _cached_adapter(payload_type: Any) -> TypeAdapter[Any]:
    try:
        return _adapter(payload_type)
    except TypeError:
        # Unhashable type expressions cannot be cached
        return TypeAdapter(payload_type)


def dump_json(payload: Any, options: JsonOptions | None = None) -> bytes:
    """Serialize ``payload`` to UTF-8 JSON bytes.

    Raises:
        SerializationError: If the payload cannot be represented as JSON
    """
    options = options or DEFAULT_JSON_OPTIONS
    adapter = _cached_adapter(type(payload))
    try:
        return adapter.dump_json(
            payload,
            by_alias=options.by_alias,
            exclude_none=options.exclude_none,
            indent=options.indent,
        )
    except (ValueError, TypeError) as e:
        raise SerializationError(str(e), media_type=JSON_MEDIA_TYPE, cause=e) from e


def load_json(data: bytes | str, payload_type: type[T], options: JsonOptions | None = None) -> T:
    """Parse and validate JSON ``data`` as ``payload_type``.

    Raises:
        SerializationError: If the data is not valid JSON or fails validation
    """
    options = options or DEFAULT_JSON_OPTIONS
    adapter = _cached_adapter(payload_type)
    try:
        return adapter.validate_json(data, strict=options.strict)
    except ValidationError as e:
        raise SerializationError(
            f"{e.error_count()} validation error(s) for {e.title}",
            media_type=JSON_MEDIA_TYPE,
            cause=e,
            details={"errors": e.errors(include_url=False)},
        ) from e


__all__ = ["DEFAULT_JSON_OPTIONS", "JsonOptions", "dump_json", "load_json"]
