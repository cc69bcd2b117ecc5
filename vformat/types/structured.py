"""Library for decoding and encoding structured values such as N and ADR.

A structured value is a list of components separated by semicolons, where
each component may itself hold a list of values separated by commas, e.g.
the additional names of a contact.
"""

from __future__ import annotations

from collections.abc import Sequence

from vformat.parsing.property import ParsedProperty
from vformat.values import StructuredValue

from .data_types import DATA_TYPE, DecodeContext
from .text import escape, split_unescaped, unescape


@DATA_TYPE.register("STRUCTURED")
class StructuredEncoder:
    """Encode a semicolon separated structured value."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> StructuredValue:
        """Parse the value into its parts, padding to the declared arity."""
        parts = split_unescaped(prop.value, ";")
        if (arity := context.property_type.arity) is not None:
            parts.extend([""] * (arity - len(parts)))
        return StructuredValue(
            tuple(
                tuple(unescape(value) for value in split_unescaped(part, ","))
                for part in parts
            )
        )

    @classmethod
    def __encode_property_value__(
        cls, value: str | Sequence[str | Sequence[str]]
    ) -> str:
        """Encode the parts, escaping the text of each one."""
        if isinstance(value, str):
            return escape(value)
        parts = []
        for part in value:
            if isinstance(part, str):
                parts.append(escape(part))
            else:
                parts.append(",".join(escape(item) for item in part))
        return ";".join(parts)
