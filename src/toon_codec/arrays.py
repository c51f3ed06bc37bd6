"""Array layout selection for the TOON encoder."""

from collections.abc import Sequence
from enum import Enum

from .values import ValueKind, is_primitive, kind_of


class ArrayFormat(Enum):
    """How an array is laid out in TOON text."""

    TABULAR = "tabular"
    """Header with field names, then one delimiter-joined row per object."""

    PRIMITIVE = "primitive"
    """All values inline on the header line."""

    LIST = "list"
    """One ``- `` item block per element."""


def select_array_format(arr: Sequence) -> ArrayFormat:
    """
    Pick the layout for an array.

    Tabular wins when every element is an object with the same keys and only
    scalar values; primitive when every element is a scalar; list otherwise,
    including for empty arrays.
    """
    if tabular_fields(arr) is not None:
        return ArrayFormat.TABULAR
    if arr and all(is_primitive(v) for v in arr):
        return ArrayFormat.PRIMITIVE
    return ArrayFormat.LIST


def tabular_fields(arr: Sequence) -> list[str] | None:
    """
    Return the column names for a tabular array, or None if it isn't one.

    Columns follow the encoder's key order (sorted), so every row shares the
    same column order.
    """
    if not arr:
        return None

    # All elements must be objects
    if not all(kind_of(v) is ValueKind.OBJECT for v in arr):
        return None

    # All objects must have same keys
    first_keys = arr[0].keys()
    if not first_keys:
        return None

    for item in arr[1:]:
        if item.keys() != first_keys:
            return None

    # All values must be primitives
    for item in arr:
        for v in item.values():
            if not is_primitive(v):
                return None

    return sorted(first_keys)
