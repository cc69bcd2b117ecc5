"""Library for decoding and encoding INTEGER values."""

from typing import Any

from vformat.parsing.property import ParsedProperty
from vformat.values import IntegerValue

from .data_types import DATA_TYPE, DecodeContext


@DATA_TYPE.register("INTEGER")
class IntEncoder:
    """Encode an int ICS value."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> IntegerValue:
        """Parse a rfc5545 int value."""
        return IntegerValue(int(prop.value))

    @classmethod
    def __encode_property_value__(cls, value: Any) -> str:
        """Serialize an int, rejecting anything that is not an integer."""
        if isinstance(value, bool):
            raise ValueError(f"Expected an integer value, got {value!r}")
        return str(int(str(value).strip()))
