"""String utilities for TOON encoding/decoding."""

import re
from typing import TYPE_CHECKING

from .errors import InvalidEscapeError, ToonDecodeError, UnterminatedQuoteError

if TYPE_CHECKING:
    from .types import Delimiter

# TOON only allows these 5 escape sequences
ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

UNESCAPE_MAP = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Reserved literals that can't be unquoted strings
RESERVED_LITERALS = {"true", "false", "null"}

# Structural characters that require quoting
STRUCTURAL_CHARS = frozenset(':[]{}"\\')

# Characters that must appear escaped inside a quoted string
CONTROL_CHARS = frozenset("\n\r\t")

# Anything a reader could take for a number, including forms the number
# grammar rejects (leading zeros, exponents)
NUMBER_LIKE_PATTERN = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")


def escape_string(value: str) -> str:
    """
    Escape a string for use in TOON quoted strings.

    Only the 5 valid TOON escape sequences are produced:
    - \\\\ (backslash)
    - \\" (double quote)
    - \\n (newline)
    - \\r (carriage return)
    - \\t (tab)

    Args:
        value: The string to escape.

    Returns:
        The escaped string (without surrounding quotes).
    """
    return "".join(ESCAPE_MAP.get(char, char) for char in value)


def unescape_string(value: str) -> str:
    """
    Unescape a TOON string that was inside quotes.

    Args:
        value: The string content (without surrounding quotes).

    Returns:
        The unescaped string.

    Raises:
        InvalidEscapeError: For an unknown escape sequence, a trailing
            backslash, or a bare tab/CR/newline.
    """
    result = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\":
            if i + 1 >= len(value):
                raise InvalidEscapeError("Backslash at end of string")
            next_char = value[i + 1]
            if next_char not in UNESCAPE_MAP:
                raise InvalidEscapeError(f"Invalid escape sequence: \\{next_char}")
            result.append(UNESCAPE_MAP[next_char])
            i += 2
            continue
        if char in CONTROL_CHARS:
            raise InvalidEscapeError(f"Unescaped control character {char!r} in quoted string")
        result.append(char)
        i += 1
    return "".join(result)


def quote(value: str) -> str:
    """Wrap a string in double quotes, escaping as needed."""
    return f'"{escape_string(value)}"'


def unquote(token: str) -> str:
    """
    Parse a complete quoted token back to its string value.

    Args:
        token: Text starting with '"' and ending at the closing quote.

    Returns:
        The unescaped string content.

    Raises:
        UnterminatedQuoteError: If there is no closing quote.
        InvalidEscapeError: For bad escape sequences.
        ToonDecodeError: If characters follow the closing quote.
    """
    if not token.startswith('"'):
        raise ToonDecodeError(f"String literal must start with quote: {token}")

    end = find_closing_quote(token, 0)
    if end == -1:
        raise UnterminatedQuoteError(f"Unterminated string: {token}")

    if end != len(token) - 1:
        raise ToonDecodeError(f"Unexpected characters after closing quote: {token[end + 1:]}")

    return unescape_string(token[1:end])


def find_closing_quote(s: str, start: int) -> int:
    """
    Find the closing quote in a string.

    Args:
        s: The string to search.
        start: The position of the opening quote.

    Returns:
        Index of the closing quote, or -1 if not found.
    """
    i = start + 1
    while i < len(s):
        char = s[i]
        if char == "\\":
            # Skip escape sequence
            i += 2
            continue
        if char == '"':
            return i
        i += 1
    return -1


def is_safe_unquoted(value: str, delimiter: "Delimiter" = ",") -> bool:
    """
    Check if a string can be safely represented without quotes.

    A string can be unquoted if:
    - Non-empty
    - No leading/trailing whitespace
    - Not a boolean/null/number literal
    - No structural chars (: [ ] { }), quotes or backslashes
    - No control chars (newline, carriage return, tab)
    - No active delimiter
    - Doesn't start with '-' (list marker)

    Args:
        value: The string to check.
        delimiter: The active delimiter character.

    Returns:
        True if the string can be unquoted.
    """
    if not value:
        return False

    if value != value.strip():
        return False

    if value.lower() in RESERVED_LITERALS:
        return False

    if NUMBER_LIKE_PATTERN.fullmatch(value):
        return False

    if any(c in STRUCTURAL_CHARS or c in CONTROL_CHARS for c in value):
        return False

    if delimiter in value:
        return False

    # Can't start with list marker
    if value.startswith("-"):
        return False

    return True


def needs_quoting(value: str, delimiter: "Delimiter" = ",") -> bool:
    """Check if a string needs to be quoted."""
    return not is_safe_unquoted(value, delimiter)


def find_unquoted_colon(line: str) -> int:
    """
    Find the position of the first unquoted colon in a line.

    Args:
        line: The line to search.

    Returns:
        Index of the colon, or -1 if not found.
    """
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\" and in_quotes and i + 1 < len(line):
            # Skip escape sequence
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            return i
        i += 1
    return -1


def split_by_delimiter(value: str, delimiter: "Delimiter") -> list[str]:
    """
    Split a string by delimiter, respecting quoted sections.

    Args:
        value: The string to split.
        delimiter: The delimiter character.

    Returns:
        List of values (still containing quotes if originally quoted).
    """
    result = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(value):
        char = value[i]
        if char == "\\" and in_quotes and i + 1 < len(value):
            # Keep escape sequence intact
            current.append(char)
            current.append(value[i + 1])
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            result.append("".join(current).strip(" "))
            current = []
        else:
            current.append(char)
        i += 1

    result.append("".join(current).strip(" "))
    return result
