"""TOON encoder implementation."""

import logging
from collections.abc import Generator
from typing import Any

from .arrays import ArrayFormat, select_array_format, tabular_fields
from .guard import TraversalGuard
from .primitives import encode_key, encode_primitive, format_array_header
from .types import EncodeOptions, JsonValue
from .values import ValueKind, kind_of

logger = logging.getLogger(__name__)


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """
    Encode a Python value to TOON format.

    Args:
        value: The value to encode (dict, list, or primitive).
        options: Encoding options.

    Returns:
        The TOON-formatted string.

    Raises:
        CircularReferenceError: If a container contains itself.
        DepthExceededError: If nesting exceeds ``options.max_depth``.
        UnsupportedTypeError: For values outside the JSON data model.
    """
    opts = options or EncodeOptions()
    lines = list(encode_lines(value, opts))
    return "\n".join(lines)


def encode_lines(
    value: Any, options: EncodeOptions | None = None
) -> Generator[str, None, None]:
    """
    Encode a Python value to TOON format, yielding lines.

    Errors surface while iterating, so a consumer that must not emit partial
    output should collect the lines first (as :func:`encode` does).

    Args:
        value: The value to encode.
        options: Encoding options.

    Yields:
        Lines of TOON output.
    """
    opts = options or EncodeOptions()
    guard = TraversalGuard(opts.max_depth)
    kind = kind_of(value)

    # Root form detection
    if kind is ValueKind.OBJECT:
        yield from _encode_object(value, opts, 0, guard)
    elif kind is ValueKind.ARRAY:
        yield from _encode_array(None, value, opts, 0, guard, "")
    else:
        yield encode_primitive(value, opts.delimiter)


def _indent(opts: EncodeOptions, depth: int) -> str:
    return " " * (opts.indent * depth)


def _encode_object(
    obj: dict, opts: EncodeOptions, depth: int, guard: TraversalGuard
) -> Generator[str, None, None]:
    """Encode an object's key-value pairs, keys in sorted order."""
    with guard.enter(obj):
        for key in sorted(obj):
            yield from _encode_field(key, obj[key], opts, depth, guard)


def _encode_field(
    key: str,
    value: JsonValue,
    opts: EncodeOptions,
    depth: int,
    guard: TraversalGuard,
    lead: str | None = None,
) -> Generator[str, None, None]:
    """
    Encode one ``key: value`` field at ``depth``.

    ``lead`` replaces the indentation of the first line; list items pass
    their hyphen marker here so the first field shares the hyphen line.
    Nested content always goes to ``depth + 1``.
    """
    if lead is None:
        lead = _indent(opts, depth)
    kind = kind_of(value)

    if kind is ValueKind.OBJECT:
        # Empty objects are just the bare key
        yield f"{lead}{encode_key(key)}:"
        yield from _encode_object(value, opts, depth + 1, guard)
    elif kind is ValueKind.ARRAY:
        yield from _encode_array(key, value, opts, depth, guard, lead)
    else:
        yield f"{lead}{encode_key(key)}: {encode_primitive(value, opts.delimiter)}"


def _encode_array(
    key: str | None,
    arr: list,
    opts: EncodeOptions,
    depth: int,
    guard: TraversalGuard,
    lead: str,
) -> Generator[str, None, None]:
    """Encode an array with the best format; rows and items go to depth + 1."""
    delimiter = opts.delimiter

    with guard.enter(arr):
        fmt = select_array_format(arr)
        logger.debug("Encoding %d-element array %r as %s", len(arr), key, fmt.value)

        if fmt is ArrayFormat.TABULAR:
            fields = tabular_fields(arr)
            yield lead + format_array_header(len(arr), key, fields, delimiter)
            for row in arr:
                yield from _encode_tabular_row(row, fields, opts, depth + 1, guard)
        elif fmt is ArrayFormat.PRIMITIVE:
            values = [encode_primitive(v, delimiter) for v in arr]
            header = format_array_header(len(arr), key, None, delimiter)
            yield f"{lead}{header} " + delimiter.join(values)
        else:
            yield lead + format_array_header(len(arr), key, None, delimiter)
            for item in arr:
                yield from _encode_list_item(item, opts, depth + 1, guard)


def _encode_tabular_row(
    row: dict, fields: list[str], opts: EncodeOptions, depth: int, guard: TraversalGuard
) -> Generator[str, None, None]:
    """Encode a single tabular row."""
    with guard.enter(row):
        values = [encode_primitive(row[f], opts.delimiter) for f in fields]
        yield _indent(opts, depth) + opts.delimiter.join(values)


def _encode_list_item(
    item: JsonValue, opts: EncodeOptions, depth: int, guard: TraversalGuard
) -> Generator[str, None, None]:
    """Encode a list item (after the - marker)."""
    marker = _indent(opts, depth) + "- "
    kind = kind_of(item)

    if kind is ValueKind.OBJECT:
        with guard.enter(item):
            keys = sorted(item)
            if not keys:
                # Empty object as list item
                yield marker.rstrip()
                return
            # First field on the hyphen line, the rest one level deeper
            yield from _encode_field(keys[0], item[keys[0]], opts, depth + 1, guard, marker)
            for key in keys[1:]:
                yield from _encode_field(key, item[key], opts, depth + 1, guard)
    elif kind is ValueKind.ARRAY:
        yield from _encode_array(None, item, opts, depth, guard, marker)
    else:
        yield marker + encode_primitive(item, opts.delimiter)
