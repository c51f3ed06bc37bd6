"""TOON decoder implementation."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from .errors import (
    ArrayCountMismatchError,
    DuplicateKeyError,
    InvalidNumberLiteralError,
    MalformedIndentationError,
    ToonDecodeError,
    ToonError,
)
from .guard import TraversalGuard
from .primitives import parse_key, parse_primitive
from .string_utils import find_unquoted_colon, split_by_delimiter
from .types import ArrayHeaderInfo, DecodeOptions, JsonValue, ParsedLine

logger = logging.getLogger(__name__)

# Pattern for array header: key[N<delim?>]{fields}:
ARRAY_HEADER_PATTERN = re.compile(
    r"^(?P<key>(?:[^:\[\]{}\"]+|\"(?:[^\"\\]|\\.)*\")?)"  # Optional key (possibly quoted)
    r"\[(?P<length>[0-9]+)(?P<delim>[,\t|])?\]"  # [N<delim?>]
    r"(?:\{(?P<fields>(?:[^}\"]|\"(?:[^\"\\]|\\.)*\")*)\})?"  # Optional {fields}
    r":(?P<rest>.*)$"  # Colon and rest
)


def decode(text: str, options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON text to a Python value.

    Args:
        text: The TOON-formatted string.
        options: Decoding options.

    Returns:
        The decoded Python value. An empty document decodes to ``{}``.

    Raises:
        ToonDecodeError: For malformed input (see the subclasses in
            :mod:`toon_codec.errors`).
        DepthExceededError: If nesting exceeds ``options.max_depth``.
    """
    opts = options or DecodeOptions()
    lines = text.split("\n")
    return decode_lines(lines, opts)


def decode_lines(lines: Iterable[str], options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON from pre-split lines.

    Args:
        lines: Iterable of line strings, with or without line endings.
        options: Decoding options.

    Returns:
        The decoded Python value.
    """
    opts = options or DecodeOptions()
    try:
        cursor = _Cursor(_parse_lines(lines, opts), opts)
        return _decode_root(cursor)
    except ToonError as exc:
        logger.debug("Decoding failed: %s", exc)
        raise


def validate(text: str, options: DecodeOptions | None = None) -> bool:
    """Check whether ``text`` decodes without error."""
    try:
        decode(text, options)
    except ToonError:
        return False
    return True


class _Cursor:
    """Cursor for iterating through parsed lines."""

    def __init__(self, lines: list[ParsedLine], options: DecodeOptions):
        self.lines = lines
        self.options = options
        self.pos = 0
        # Text cannot encode a cycle, so only depth is tracked
        self.guard = TraversalGuard(options.max_depth, track_identity=False)

    @property
    def strict(self) -> bool:
        return self.options.strict

    def peek(self) -> ParsedLine | None:
        """Look at current line without advancing."""
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if line.content:  # Skip blank lines
                return line
            self.pos += 1
        return None

    def advance(self) -> ParsedLine | None:
        """Get current line and advance position."""
        line = self.peek()
        if line:
            self.pos += 1
        return line


@contextmanager
def _at_line(line: ParsedLine) -> Iterator[None]:
    """Attach the line number to errors raised while handling ``line``."""
    try:
        yield
    except ToonError as exc:
        if exc.line_number is None:
            exc.line_number = line.line_number
        raise


def _parse_lines(lines: Iterable[str], options: DecodeOptions) -> list[ParsedLine]:
    """Parse raw lines into ParsedLine objects, resolving indentation levels."""
    unit = options.indent
    parsed = []

    for i, raw in enumerate(lines, start=1):
        raw = raw.rstrip("\r\n")
        stripped = raw.lstrip(" ")
        indent = len(raw) - len(stripped)
        content = stripped.rstrip()

        if not content:
            parsed.append(ParsedLine(raw=raw, content="", indent=indent, depth=0, line_number=i))
            continue

        if options.strict and stripped.startswith("\t"):
            raise MalformedIndentationError("Tab in indentation (use spaces)", i)

        if indent and unit is None:
            # The first indented line fixes the unit for the whole document
            unit = indent
            logger.debug("Inferred indent unit of %d spaces from line %d", unit, i)

        if options.strict and indent and indent % unit != 0:
            raise MalformedIndentationError(
                f"Indentation {indent} is not a multiple of {unit}", i
            )

        depth = indent // unit if indent else 0
        parsed.append(
            ParsedLine(raw=raw, content=content, indent=indent, depth=depth, line_number=i)
        )

    return parsed


def _decode_root(cursor: _Cursor) -> JsonValue:
    """Decode the root value and make sure nothing is left over."""
    line = cursor.peek()
    if line is None:
        return {}

    if line.indent:
        raise MalformedIndentationError("First line must not be indented", line.line_number)

    header = _match_array_header(line.content, line, cursor)
    if header is not None and header.key is None:
        # Root array
        cursor.advance()
        value: JsonValue = _decode_array(header, line, cursor, 1)
    elif header is None and find_unquoted_colon(line.content) == -1:
        # Root primitive
        cursor.advance()
        with _at_line(line):
            value = parse_primitive(line.content)
    else:
        value = _decode_object(cursor, 0, line)

    trailing = cursor.peek()
    if trailing is not None:
        if trailing.depth > 0:
            raise MalformedIndentationError("Unexpected indentation", trailing.line_number)
        raise ToonDecodeError("Unexpected content after root value", trailing.line_number)

    return value


def _is_list_item(content: str) -> bool:
    return content == "-" or content.startswith("- ")


def _decode_object(cursor: _Cursor, depth: int, opener: ParsedLine) -> dict:
    """Decode the fields of an object whose lines sit at ``depth``."""
    with cursor.guard.enter(line_number=opener.line_number):
        result: dict = {}
        _decode_fields(cursor, depth, result)
    return result


def _decode_fields(cursor: _Cursor, depth: int, result: dict) -> None:
    """Decode consecutive ``key: value`` lines at ``depth`` into ``result``."""
    while True:
        line = cursor.peek()
        if line is None or line.depth < depth:
            return
        if line.depth > depth:
            raise MalformedIndentationError(
                f"Unexpected indentation (expected level {depth}, found {line.depth})",
                line.line_number,
            )
        if _is_list_item(line.content):
            raise ToonDecodeError("List item outside of an array", line.line_number)

        cursor.advance()
        key, value = _decode_field(line.content, line, cursor, depth + 1)
        if key in result:
            raise DuplicateKeyError(key, line.line_number)
        result[key] = value


def _decode_field(
    content: str, line: ParsedLine, cursor: _Cursor, child_depth: int
) -> tuple[str, JsonValue]:
    """
    Decode one field whose nested content, if any, sits at ``child_depth``.

    ``content`` is the field text: the whole line for ordinary fields, or the
    text after ``- `` for the first field of a list item.
    """
    header = _match_array_header(content, line, cursor)
    if header is not None:
        if header.key is None:
            raise ToonDecodeError("Array header without a key inside an object", line.line_number)
        return header.key, _decode_array(header, line, cursor, child_depth)

    colon_pos = find_unquoted_colon(content)
    if colon_pos == -1:
        raise ToonDecodeError(f"Expected 'key: value', found {content!r}", line.line_number)

    key_part = content[:colon_pos].strip()
    value_part = content[colon_pos + 1 :]

    with _at_line(line):
        if cursor.strict:
            _check_bracket_key(key_part)
            _check_value_separator(value_part)
        key = parse_key(key_part)
        value_part = value_part.strip()
        if value_part:
            return key, parse_primitive(value_part)

    # Nested object (possibly empty)
    nested_depth = child_depth
    next_line = cursor.peek()
    if next_line is not None and next_line.depth > child_depth:
        if cursor.strict:
            raise MalformedIndentationError(
                f"Expected indentation level {child_depth}, found {next_line.depth}",
                next_line.line_number,
            )
        nested_depth = next_line.depth

    return key, _decode_object(cursor, nested_depth, line)


def _check_bracket_key(key_part: str) -> None:
    """Reject unquoted keys that look like an array header with a bad count."""
    if key_part.startswith('"') or "[" not in key_part:
        return
    count = key_part[key_part.index("[") + 1 :].split("]", 1)[0]
    raise InvalidNumberLiteralError(f"Invalid array length {count!r} in {key_part!r}")


def _check_value_separator(value_part: str) -> None:
    """Require exactly one space between the colon and an inline value."""
    if not value_part:
        return
    if not value_part.startswith(" ") or value_part[1:2] in ("", " "):
        raise ToonDecodeError("Expected a single space after ':'")


def _match_array_header(
    content: str, line: ParsedLine, cursor: _Cursor
) -> ArrayHeaderInfo | None:
    """Parse an array header, or return None if ``content`` isn't one."""
    match = ARRAY_HEADER_PATTERN.match(content)
    if not match:
        return None

    with _at_line(line):
        key_token = match.group("key")
        key = parse_key(key_token) if key_token else None
        delimiter = match.group("delim") or ","
        length_text = match.group("length")
        try:
            length = int(length_text)
        except ValueError as exc:
            raise InvalidNumberLiteralError(
                f"Array length of {len(length_text)} digits is too long to convert"
            ) from exc

        fields: list[str] = []
        fields_str = match.group("fields")
        if fields_str is not None:
            if not fields_str.strip():
                raise ToonDecodeError("Tabular header declares no fields")
            for name in split_by_delimiter(fields_str, delimiter):
                field_name = parse_key(name)
                if field_name in fields:
                    raise DuplicateKeyError(field_name, column=True)
                fields.append(field_name)

        rest = match.group("rest")
        if cursor.strict:
            _check_value_separator(rest)

    return ArrayHeaderInfo(
        key=key,
        length=length,
        delimiter=delimiter,
        fields=fields,
        rest=rest.strip(),
    )


def _decode_array(
    header: ArrayHeaderInfo, line: ParsedLine, cursor: _Cursor, child_depth: int
) -> list:
    """Decode the array introduced by ``header``; rows/items sit at ``child_depth``."""
    with cursor.guard.enter(line_number=line.line_number):
        if header.fields:
            if header.rest:
                raise ToonDecodeError("Unexpected values after tabular header", line.line_number)
            return _decode_tabular_rows(cursor, header, line, child_depth)
        if header.rest:
            return _decode_inline_values(header, line)
        return _decode_list_items(cursor, header, line, child_depth)


def _decode_inline_values(header: ArrayHeaderInfo, line: ParsedLine) -> list:
    """Decode inline primitive array values."""
    with _at_line(line):
        values = [parse_primitive(v) for v in split_by_delimiter(header.rest, header.delimiter)]

    if len(values) != header.length:
        raise ArrayCountMismatchError(header.length, len(values), line.line_number)

    return values


def _decode_tabular_rows(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, depth: int
) -> list[dict]:
    """Decode tabular array rows."""
    result = []
    fields = header.fields

    while True:
        line = cursor.peek()
        if line is None or line.depth < depth:
            break
        if line.depth > depth:
            raise MalformedIndentationError("Unexpected indentation in tabular rows", line.line_number)
        if len(result) == header.length:
            raise ArrayCountMismatchError(
                header.length, f"more than {header.length}", line.line_number, "rows"
            )

        cursor.advance()
        values = split_by_delimiter(line.content, header.delimiter)
        if len(values) != len(fields):
            raise ArrayCountMismatchError(len(fields), len(values), line.line_number, "values")

        with cursor.guard.enter(line_number=line.line_number), _at_line(line):
            row = {name: parse_primitive(value) for name, value in zip(fields, values)}
        result.append(row)

    if len(result) != header.length:
        raise ArrayCountMismatchError(header.length, len(result), header_line.line_number, "rows")

    return result


def _decode_list_items(
    cursor: _Cursor, header: ArrayHeaderInfo, header_line: ParsedLine, depth: int
) -> list:
    """Decode list items (lines starting with -)."""
    result = []

    while True:
        line = cursor.peek()
        if line is None or line.depth < depth:
            break
        if line.depth > depth:
            raise MalformedIndentationError("Unexpected indentation in list", line.line_number)
        if not _is_list_item(line.content):
            raise ToonDecodeError(f"Expected list item, found {line.content!r}", line.line_number)
        if len(result) == header.length:
            raise ArrayCountMismatchError(
                header.length, f"more than {header.length}", line.line_number
            )

        cursor.advance()
        result.append(_decode_list_item(line, cursor, depth))

    if len(result) != header.length:
        raise ArrayCountMismatchError(header.length, len(result), header_line.line_number)

    return result


def _decode_list_item(line: ParsedLine, cursor: _Cursor, depth: int) -> JsonValue:
    """Decode a single list item."""
    if line.content == "-":
        # Empty object; non-strict mode also accepts fields on following lines
        with cursor.guard.enter(line_number=line.line_number):
            result: dict = {}
            next_line = cursor.peek()
            if next_line is not None and next_line.depth > depth:
                if cursor.strict:
                    raise MalformedIndentationError(
                        "Unexpected indentation after empty list item", next_line.line_number
                    )
                _decode_fields(cursor, next_line.depth, result)
        return result

    item_content = line.content[2:].strip()

    header = _match_array_header(item_content, line, cursor)
    if header is not None and header.key is None:
        # Bare array as list item
        return _decode_array(header, line, cursor, depth + 1)

    if header is not None or find_unquoted_colon(item_content) != -1:
        # Object with its first field on the hyphen line
        with cursor.guard.enter(line_number=line.line_number):
            key, value = _decode_field(item_content, line, cursor, depth + 2)
            result = {key: value}
            _decode_fields(cursor, depth + 1, result)
        return result

    with _at_line(line):
        return parse_primitive(item_content)
