"""Type definitions for the TOON encoder/decoder."""

from dataclasses import dataclass, field
from typing import Literal

# JSON type aliases
JsonPrimitive = str | int | float | bool | None
JsonArray = list["JsonValue"]
JsonObject = dict[str, "JsonValue"]
JsonValue = JsonPrimitive | JsonArray | JsonObject

# Delimiter options
Delimiter = Literal[",", "\t", "|"]

DELIMITERS: frozenset[str] = frozenset({",", "\t", "|"})
DEFAULT_DELIMITER: Delimiter = ","
DEFAULT_MAX_DEPTH = 100


@dataclass
class EncodeOptions:
    """Options for TOON encoding."""

    indent: int = 2
    """Number of spaces per indentation level."""

    delimiter: Delimiter = DEFAULT_DELIMITER
    """Delimiter for inline arrays and tabular rows."""

    max_depth: int = DEFAULT_MAX_DEPTH
    """Maximum number of nested containers from the root."""

    def __post_init__(self) -> None:
        if self.indent < 1:
            raise ValueError(f"indent must be a positive integer, got {self.indent}")
        if self.delimiter not in DELIMITERS:
            raise ValueError(f"Unsupported delimiter: {self.delimiter!r}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth}")


@dataclass
class DecodeOptions:
    """Options for TOON decoding."""

    strict: bool = True
    """Reject indentation and whitespace deviations from canonical output."""

    max_depth: int = DEFAULT_MAX_DEPTH
    """Maximum number of nested containers from the root."""

    indent: int | None = None
    """Indentation unit. None infers it from the first indented line."""

    def __post_init__(self) -> None:
        if self.indent is not None and self.indent < 1:
            raise ValueError(f"indent must be a positive integer, got {self.indent}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth}")


@dataclass
class ParsedLine:
    """A parsed line with indentation info."""

    raw: str
    """Original line content."""

    content: str
    """Content after stripping indentation."""

    indent: int
    """Number of leading spaces."""

    depth: int
    """Indentation level (indent / indent unit)."""

    line_number: int
    """1-based line number."""


@dataclass
class ArrayHeaderInfo:
    """Parsed array header information."""

    key: str | None
    """Field name, or None for root arrays and bare list-item arrays."""

    length: int
    """Declared array length."""

    delimiter: Delimiter = DEFAULT_DELIMITER
    """Delimiter for this array's values."""

    fields: list[str] = field(default_factory=list)
    """Field names for tabular format (empty for non-tabular)."""

    rest: str = ""
    """Text after the header colon (inline values)."""
