"""Exception hierarchy for TOON encoding/decoding.

Every error carries a stable ``code`` string naming its kind, so callers can
branch on the kind without importing each class. Decode errors also carry the
1-based line number of the offending line.
"""

from __future__ import annotations


class ToonError(ValueError):
    """Base class for all TOON errors."""

    code = "ToonError"

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"


class ToonEncodeError(ToonError):
    """An in-memory value could not be encoded."""

    code = "EncodeError"


class CircularReferenceError(ToonEncodeError):
    """A container was reached again while it was still being encoded."""

    code = "CircularReference"


class UnsupportedTypeError(ToonEncodeError, TypeError):
    """A value outside null/bool/number/string/array/object."""

    code = "UnsupportedType"

    def __init__(self, value: object, message: str | None = None):
        super().__init__(message or f"Cannot encode value of type {type(value).__name__}")
        self.value = value


class DepthExceededError(ToonError):
    """Container nesting went past the configured ``max_depth``."""

    code = "DepthExceeded"

    def __init__(self, max_depth: int, line_number: int | None = None):
        super().__init__(f"Maximum nesting depth of {max_depth} exceeded", line_number)
        self.max_depth = max_depth


class ToonDecodeError(ToonError):
    """Malformed TOON text."""

    code = "DecodeError"


class MalformedIndentationError(ToonDecodeError):
    code = "MalformedIndentation"


class DuplicateKeyError(ToonDecodeError):
    code = "DuplicateKey"

    def __init__(self, key: str, line_number: int | None = None, *, column: bool = False):
        what = "column" if column else "key"
        super().__init__(f"Duplicate {what} {key!r}", line_number)
        self.key = key


class ArrayCountMismatchError(ToonDecodeError):
    code = "ArrayCountMismatch"

    def __init__(
        self,
        expected: int,
        actual: int | str,
        line_number: int | None = None,
        what: str = "items",
    ):
        super().__init__(f"Expected {expected} {what}, found {actual}", line_number)
        self.expected = expected
        self.actual = actual


class InvalidEscapeError(ToonDecodeError):
    code = "InvalidEscape"


class UnterminatedQuoteError(ToonDecodeError):
    code = "UnterminatedQuote"


class InvalidNumberLiteralError(ToonDecodeError):
    code = "InvalidNumberLiteral"
