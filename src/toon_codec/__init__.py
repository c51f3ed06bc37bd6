"""
TOON (Token-Oriented Object Notation) codec.

A line-oriented, indentation-structured text format for the JSON data model,
with a compact tabular layout for uniform arrays of records. Encoding is
canonical: object keys are sorted, numbers have a single textual form, and
``encode(decode(encode(v))) == encode(v)``.

Usage:
    import toon_codec

    # Encode Python data to TOON
    data = {"name": "Alice", "age": 30}
    encoded = toon_codec.encode(data)

    # Decode TOON to Python data
    decoded = toon_codec.decode(encoded)

    # With options
    from toon_codec import EncodeOptions, DecodeOptions

    encoded = toon_codec.encode(data, EncodeOptions(indent=4, delimiter="|"))
    decoded = toon_codec.decode(text, DecodeOptions(strict=False, max_depth=32))
"""

__version__ = "1.0.0"

from .decode import decode, decode_lines, validate
from .encode import encode, encode_lines
from .errors import (
    ArrayCountMismatchError,
    CircularReferenceError,
    DepthExceededError,
    DuplicateKeyError,
    InvalidEscapeError,
    InvalidNumberLiteralError,
    MalformedIndentationError,
    ToonDecodeError,
    ToonEncodeError,
    ToonError,
    UnsupportedTypeError,
    UnterminatedQuoteError,
)
from .types import DecodeOptions, Delimiter, EncodeOptions, JsonValue
from .values import ValueKind, deep_equal, kind_of

__all__ = [
    # Version
    "__version__",
    # Main API
    "encode",
    "encode_lines",
    "decode",
    "decode_lines",
    "validate",
    # Options
    "EncodeOptions",
    "DecodeOptions",
    # Errors
    "ToonError",
    "ToonEncodeError",
    "ToonDecodeError",
    "CircularReferenceError",
    "UnsupportedTypeError",
    "DepthExceededError",
    "MalformedIndentationError",
    "DuplicateKeyError",
    "ArrayCountMismatchError",
    "InvalidEscapeError",
    "UnterminatedQuoteError",
    "InvalidNumberLiteralError",
    # Value model
    "JsonValue",
    "Delimiter",
    "ValueKind",
    "kind_of",
    "deep_equal",
]
