"""Primitive value encoding and parsing for TOON."""

import math
import re
from typing import TYPE_CHECKING

from .errors import UnsupportedTypeError
from .numeric import canonicalize_number, parse_number
from .string_utils import is_safe_unquoted, quote, unquote

if TYPE_CHECKING:
    from .types import Delimiter, JsonPrimitive

# Keys that can be written bare; everything else is quoted
SAFE_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")


def encode_primitive(value: "JsonPrimitive", delimiter: "Delimiter" = ",") -> str:
    """
    Encode a primitive value to TOON format.

    Args:
        value: The primitive value (str, int, float, bool, or None).
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string representation.

    Raises:
        UnsupportedTypeError: For non-primitive values.
    """
    if value is None:
        return "null"

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (int, float)):
        # NaN and infinities have no number literal
        if isinstance(value, float) and not math.isfinite(value):
            return "null"
        return canonicalize_number(value)

    if isinstance(value, str):
        return encode_string_literal(value, delimiter)

    raise UnsupportedTypeError(value)


def encode_string_literal(value: str, delimiter: "Delimiter" = ",") -> str:
    """
    Encode a string value, with or without quotes.

    Args:
        value: The string to encode.
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string (quoted if necessary).
    """
    if is_safe_unquoted(value, delimiter):
        return value
    return quote(value)


def encode_key(key: str) -> str:
    """
    Encode an object key for TOON format.

    Identifier-like keys (letters, digits, ``_``, ``.``, ``-``, not starting
    with a digit or ``-``) are written bare; all others are quoted.

    Args:
        key: The key string.

    Returns:
        The encoded key (quoted if necessary).
    """
    if SAFE_KEY_PATTERN.fullmatch(key):
        return key
    return quote(key)


def parse_primitive(token: str) -> "JsonPrimitive":
    """
    Parse a primitive token to a Python value.

    Classification is ordered: quoted string, ``null``, ``true``/``false``,
    number, and finally unquoted string.

    Args:
        token: The token string (trimmed).

    Returns:
        The parsed Python value.

    Raises:
        UnterminatedQuoteError: For an unterminated quoted string.
        InvalidEscapeError: For a bad escape sequence.
    """
    # Empty token is empty string
    if not token:
        return ""

    if token.startswith('"'):
        return unquote(token)

    if token == "null":
        return None
    if token == "true":
        return True
    if token == "false":
        return False

    number = parse_number(token)
    if number is not None:
        return number

    return token


def parse_key(token: str) -> str:
    """Parse a key, handling quoted keys."""
    token = token.strip()
    if token.startswith('"'):
        return unquote(token)
    return token


def format_bracket(length: int, delimiter: "Delimiter" = ",") -> str:
    """Format the bracket portion of an array header."""
    if delimiter == ",":
        return f"[{length}]"
    return f"[{length}{delimiter}]"


def format_array_header(
    length: int,
    key: str | None = None,
    fields: list[str] | None = None,
    delimiter: "Delimiter" = ",",
) -> str:
    """
    Format an array header line.

    Args:
        length: The array length.
        key: Optional key name (None for root arrays or list items).
        fields: Optional field names for tabular format.
        delimiter: The delimiter (included in bracket if not comma).

    Returns:
        The formatted header string, ending with the colon.
    """
    fields_part = ""
    if fields:
        encoded_fields = [encode_key(f) for f in fields]
        fields_part = "{" + delimiter.join(encoded_fields) + "}"

    key_part = encode_key(key) if key is not None else ""
    return f"{key_part}{format_bracket(length, delimiter)}{fields_part}:"
