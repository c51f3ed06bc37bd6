"""Canonical number formatting and parsing for TOON."""

import math
import re
from decimal import Decimal

from .errors import InvalidNumberLiteralError, ToonEncodeError

# -?(0|[1-9]digits)(.digits)? -- ASCII digits only, no '+', no exponent,
# no leading zeros
NUMBER_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?")


def canonicalize_number(value: int | float) -> str:
    """
    Format a number in canonical TOON form.

    The result is the shortest decimal that reads back as the same value,
    written without exponent, without trailing fractional zeros, and with
    negative zero collapsed to ``0``.

    Args:
        value: An int or a finite float.

    Returns:
        The canonical decimal text.

    Raises:
        ValueError: If value is NaN or infinite.
        ToonEncodeError: If value is an int with more digits than the
            interpreter will convert to text.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not numbers")

    if isinstance(value, int):
        return _int_to_text(value)

    if not math.isfinite(value):
        raise ValueError(f"Cannot canonicalize non-finite number: {value!r}")

    # Integral floats print as their exact integer (same length as any other
    # exponent-free form), so they read back as an int equal to the float.
    # Also collapses -0 to 0.
    if value.is_integer():
        return _int_to_text(int(value))

    # repr gives the shortest round-tripping digits; Decimal expands any exponent
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _int_to_text(value: int) -> str:
    try:
        return str(value)
    except ValueError as exc:
        # sys.get_int_max_str_digits() caps int/str conversion
        raise ToonEncodeError(
            f"Integer with {value.bit_length()} bits is too large to write as decimal text"
        ) from exc


def parse_number(text: str) -> int | float | None:
    """
    Parse number text in TOON grammar.

    Returns None (not a number) for anything outside the grammar, including
    ``+1``, ``1e5``, ``1.2.3``, ``.5`` and leading zeros such as ``007``.

    Raises:
        InvalidNumberLiteralError: If an integer literal has more digits than
            the interpreter will convert.
    """
    if not NUMBER_PATTERN.fullmatch(text):
        return None

    if "." not in text:
        try:
            return int(text)
        except ValueError as exc:
            raise InvalidNumberLiteralError(
                f"Integer literal of {len(text)} characters is too long to convert"
            ) from exc

    value = float(text)
    if not math.isfinite(value):
        return None

    # Normalize -0.0 to 0
    if value == 0.0:
        return 0

    return value


def is_number_literal(text: str) -> bool:
    """Check if text would be read back as a number."""
    try:
        return parse_number(text) is not None
    except InvalidNumberLiteralError:
        return False
