"""
Common utility functions for schematojsons.
"""

import math
from typing import Any

from schematojsons.errors import UnsupportedLiteralError

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"


def is_json_literal(value: Any) -> bool:
    """
    Check whether a value can be written as a JSON literal.

    Strings, booleans, None and finite-or-infinite numbers qualify; NaN and
    any other Python object (symbols, sets, instances) do not.
    """
    if value is None or isinstance(value, (str, bool)):
        return True
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return False


def assert_json_literal(value: Any) -> Any:
    """Return the value unchanged or raise UnsupportedLiteralError."""
    if not is_json_literal(value):
        raise UnsupportedLiteralError(value)
    return value


def is_equal(left: Any, right: Any) -> bool:
    """
    Order-sensitive structural comparison of two JSON values.

    Dicts match on key set and values, lists position by position. Booleans
    never equal numbers; 1 and 1.0 are equal.
    """
    if left is right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(is_equal(value, right[key]) for key, value in left.items())
    if isinstance(left, list):
        return len(left) == len(right) and all(is_equal(a, b) for a, b in zip(left, right))
    return left == right


def to_definition_uri(name: str) -> str:
    """JSON pointer to a named entry in the `definitions` block."""
    return f"#/definitions/{name}"
