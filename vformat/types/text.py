"""Library for decoding and encoding TEXT values."""

from __future__ import annotations

import re

from vformat.parsing.property import ParsedProperty
from vformat.values import TextValue

from .data_types import DATA_TYPE, DecodeContext

UNESCAPE_CHAR = {"\\\\": "\\", "\\;": ";", "\\,": ",", "\\N": "\n", "\\n": "\n"}
ESCAPE_CHAR = {"\\": "\\\\", ";": "\\;", ",": "\\,", "\n": "\\n"}

_UNESCAPE_RE = re.compile(r"\\.", flags=re.DOTALL)
_ESCAPE_RE = re.compile(r"[\\;,\n]")


def unescape(value: str) -> str:
    """Replace escape sequences with the characters they stand for.

    Unknown escape sequences are kept as they are.
    """
    if "\\" not in value:
        return value
    return _UNESCAPE_RE.sub(
        lambda match: UNESCAPE_CHAR.get(match.group(0), match.group(0)), value
    )


def escape(value: str) -> str:
    """Escape backslash, semicolon, comma and newline characters."""
    return _ESCAPE_RE.sub(lambda match: ESCAPE_CHAR[match.group(0)], value)


def split_unescaped(value: str, sep: str) -> list[str]:
    """Split on a separator character that is not preceded by an escape.

    The parts are returned still escaped.
    """
    parts: list[str] = []
    current: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            current.append(char)
            current.append(next(chars, ""))
        elif char == sep:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


@DATA_TYPE.register("TEXT")
class TextEncoder:
    """Encode an rfc5545 TEXT value."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> TextValue:
        """Parse a rfc5545 into a text value."""
        return TextValue(unescape(prop.value))

    @classmethod
    def __encode_property_value__(cls, value: str) -> str:
        """Serialize text as an ICS value."""
        return escape(value)
