from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel

ORJSON_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z


def _payload(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    return value


def canonical_bytes(data: Any) -> bytes:
    """Return canonical JSON bytes for already-validated data."""
    return orjson.dumps(data, option=ORJSON_OPTIONS)


def serialize_element(value: Any) -> str | None:
    """Encode one attribute value for a text column.

    Enumerations are stored as their lexical value ("Instance", "xs:int");
    models and other values as JSON text with camelCase member names.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return canonical_bytes(_payload(value)).decode("utf-8")


def serialize_list(values: Sequence[Any] | None) -> str | None:
    """Encode a list attribute as a JSON array, keeping element order."""
    if values is None:
        return None
    return canonical_bytes([_payload(value) for value in values]).decode("utf-8")
