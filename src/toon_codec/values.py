"""The value model: variant classification and structural equality."""

from enum import Enum

from .errors import UnsupportedTypeError


class ValueKind(Enum):
    """The six variants a TOON value can take."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


SCALAR_KINDS = frozenset({ValueKind.NULL, ValueKind.BOOL, ValueKind.NUMBER, ValueKind.STRING})


def kind_of(value: object) -> ValueKind:
    """
    Classify a Python value as one of the TOON variants.

    Lists and tuples are arrays. Dicts are objects and must have string keys.

    Raises:
        UnsupportedTypeError: For any other value.
    """
    if value is None:
        return ValueKind.NULL

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL

    if isinstance(value, (int, float)):
        return ValueKind.NUMBER

    if isinstance(value, str):
        return ValueKind.STRING

    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY

    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise UnsupportedTypeError(
                    key, f"Object keys must be strings, got {type(key).__name__}"
                )
        return ValueKind.OBJECT

    raise UnsupportedTypeError(value)


def is_primitive(value: object) -> bool:
    """Check if value is a scalar (null, bool, number or string)."""
    return kind_of(value) in SCALAR_KINDS


def is_container(value: object) -> bool:
    """Check if value is an array or object."""
    return kind_of(value) not in SCALAR_KINDS


def deep_equal(left: object, right: object) -> bool:
    """
    Compare two values structurally.

    Numbers compare by value (``1 == 1.0``), but a bool never equals a number,
    and a tuple equals a list with the same items. Object key order is ignored.
    """
    kind = kind_of(left)
    if kind is not kind_of(right):
        return False

    if kind is ValueKind.ARRAY:
        return len(left) == len(right) and all(
            deep_equal(a, b) for a, b in zip(left, right)
        )

    if kind is ValueKind.OBJECT:
        return left.keys() == right.keys() and all(
            deep_equal(left[k], right[k]) for k in left
        )

    return left == right
