"""Library for decoding UTC-OFFSET values."""

from __future__ import annotations

import datetime
import re

from vformat.parsing.property import ParsedProperty
from vformat.values import DurationValue

from .data_types import DATA_TYPE, DecodeContext

UTC_OFFSET_REGEX = re.compile(r"^([-+])([0-9]{2}):?([0-9]{2})([0-9]{2})?$")


@DATA_TYPE.register("UTC-OFFSET")
class UtcOffsetEncoder:
    """Contains an offset from UTC to local time."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> DurationValue:
        """Parse a UTC Offset."""
        if not (match := UTC_OFFSET_REGEX.fullmatch(prop.value.strip())):
            raise ValueError(
                f"Expected value to match UTC-OFFSET pattern: {prop.value}"
            )
        sign, hours, minutes, seconds = match.groups()
        result = datetime.timedelta(
            hours=int(hours or 0),
            minutes=int(minutes or 0),
            seconds=int(seconds or 0),
        )
        if sign == "-":
            result = -result
        return DurationValue(result)

    @classmethod
    def __encode_property_value__(cls, value: datetime.timedelta) -> str:
        """Serialize a time delta as a UTC-OFFSET ICS value."""
        if not isinstance(value, datetime.timedelta):
            raise ValueError(f"Expected a time delta, got {value!r}")
        sign = "-" if value < datetime.timedelta(0) else "+"
        seconds = abs(int(value.total_seconds()))
        hours, seconds = divmod(seconds, 3600)
        minutes, seconds = divmod(seconds, 60)
        if seconds:
            return f"{sign}{hours:02}{minutes:02}{seconds:02}"
        return f"{sign}{hours:02}{minutes:02}"
