"""
Helpers for JSON-shaped form values.

Form values arrive as plain Python data (dict, list, str, int, float, bool,
None). JSON has no separate notion of "absent", so ``MISSING`` stands in for a
property that is not present in its parent object.
"""

import json
import math
from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Marker for a value that is absent from its parent object."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_missing(value: Any, treat_null_as_undefined: bool = False) -> bool:
    """Return True when ``value`` counts as not provided."""
    if value is MISSING:
        return True
    return treat_null_as_undefined and value is None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def json_type_of(value: Any) -> str:
    """Name the JSON type of ``value`` ("integer" for whole numbers)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_integer(value):
        return "integer"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_array(value):
        return "array"
    if is_object(value):
        return "object"
    return type(value).__name__


def matches_type(value: Any, type_name: str) -> bool:
    """Check ``value`` against a single JSON Schema type name."""
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "number":
        return is_number(value)
    if type_name == "integer":
        return is_integer(value)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "null":
        return value is None
    if type_name == "array":
        return is_array(value)
    if type_name == "object":
        return is_object(value)
    return False


def json_equal(left: Any, right: Any) -> bool:
    """
    Deep equality with JSON semantics.

    ``1 == 1.0`` holds, but booleans never equal numbers, and mappings
    compare independently of key order.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if is_object(left) and is_object(right):
        if set(left) != set(right):
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if is_array(left) and is_array(right):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    return type(left) is type(right) and left == right


def to_display_string(value: Any) -> str:
    """Render a value the way it should appear in labels and messages."""
    if isinstance(value, str):
        return value
    if value is MISSING:
        return "undefined"
    # Rule arithmetic yields floats; JSON numbers print without ".0".
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def to_json_literal(value: Any) -> str:
    """Render a value as a JSON literal (strings keep their quotes)."""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)
