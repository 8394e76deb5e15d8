"""
Argument Encoding.

Argument bags are loosely typed: each value is one of

    ABSENT  None
    SCALAR  str, int, float, bool
    ARRAY   list or tuple of scalars
    OBJECT  dict (nested object)

Two encoders map every kind to the wire, one per request shape:

    kind     query (GET)              multipart (write verbs)
    ABSENT   omitted                  omitted
    SCALAR   scalar_to_str            one field, scalar_to_str
    ARRAY    comma-joined string      one repeated field per element
    OBJECT   JSON string              one field, JSON string

Path substitution uses the query form, with ABSENT as "".
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote

METHOD_OVERRIDE_FIELD = "__method"

FormField = tuple[str, tuple[None, str]]


class ValueKind(Enum):
    """Kind of an argument value."""

    ABSENT = "absent"
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"


def classify(value: Any) -> ValueKind:
    """Classify an argument value."""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def scalar_to_str(value: Any) -> str:
    """String form of a scalar; booleans use JSON spelling."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def to_query_value(value: Any) -> str | None:
    """
    Encode one argument for the query string.

    Returns None for ABSENT values, which are left out of the query.
    """
    kind = classify(value)
    if kind is ValueKind.ABSENT:
        return None
    if kind is ValueKind.ARRAY:
        return ",".join(scalar_to_str(item) for item in value)
    if kind is ValueKind.OBJECT:
        return _to_json(value)
    return scalar_to_str(value)


def to_path_value(value: Any) -> str:
    """
    Encode one argument for `{name}` substitution in a path template.

    The value is percent-encoded as a single segment, so "a/b" or "x?y"
    cannot change the shape of the URL.
    """
    encoded = to_query_value(value)
    return "" if encoded is None else quote(encoded, safe="")


def encode_query(arguments: Mapping[str, Any]) -> dict[str, str]:
    """Encode a whole argument bag as query parameters."""
    params: dict[str, str] = {}
    for key, value in arguments.items():
        encoded = to_query_value(value)
        if encoded is not None:
            params[key] = encoded
    return params


def to_form_fields(key: str, value: Any) -> list[FormField]:
    """
    Encode one argument as multipart form fields.

    Fields are `(name, (None, value))` tuples, which httpx sends as plain
    form parts without a filename.
    """
    kind = classify(value)
    if kind is ValueKind.ABSENT:
        return []
    if kind is ValueKind.ARRAY:
        return [(key, (None, scalar_to_str(item))) for item in value]
    if kind is ValueKind.OBJECT:
        return [(key, (None, _to_json(value)))]
    return [(key, (None, scalar_to_str(value)))]


def encode_multipart(arguments: Mapping[str, Any], method: str) -> list[FormField]:
    """
    Encode a whole argument bag as a tunnelled multipart body.

    The logical verb is appended as the last field under `__method`.
    """
    fields: list[FormField] = []
    for key, value in arguments.items():
        fields.extend(to_form_fields(key, value))
    fields.append((METHOD_OVERRIDE_FIELD, (None, method.upper())))
    return fields
