"""Library for decoding and encoding BOOLEAN values."""

from vformat.parsing.property import ParsedProperty
from vformat.values import BooleanValue

from .data_types import DATA_TYPE, DecodeContext


@DATA_TYPE.register("BOOLEAN")
class BooleanEncoder:
    """Encode a boolean ICS value."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> BooleanValue:
        """Parse an rfc5545 property into a boolean."""
        if prop.value.upper() == "TRUE":
            return BooleanValue(True)
        if prop.value.upper() == "FALSE":
            return BooleanValue(False)
        raise ValueError(f"Unable to parse value as boolean: {prop.value}")

    @classmethod
    def __encode_property_value__(cls, value: bool) -> str:
        """Serialize boolean as an ICS value."""
        return "TRUE" if value else "FALSE"
