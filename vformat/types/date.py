"""Library for decoding and encoding DATE values."""

from __future__ import annotations

import datetime
import logging
import re

from vformat.parsing.property import ParsedProperty
from vformat.values import DateTimeValue

from .data_types import DATA_TYPE, DecodeContext

_LOGGER = logging.getLogger(__name__)

DATE_REGEX = re.compile(r"^([0-9]{4})-?([0-9]{2})-?([0-9]{2})$")


@DATA_TYPE.register("DATE")
class DateEncoder:
    """Encode and decode an rfc5545 DATE and datetime.date."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> DateTimeValue:
        """Parse a rfc5545 into a datetime.date."""
        if not (match := DATE_REGEX.fullmatch(prop.value.strip())):
            raise ValueError(f"Expected value to match DATE pattern: '{prop.value}'")
        year, month, day = match.groups()
        result = datetime.date(int(year), int(month), int(day))
        _LOGGER.debug("DateEncoder returned %s", result)
        return DateTimeValue(result)

    @classmethod
    def __encode_property_value__(cls, value: datetime.date | str) -> str:
        """Serialize as an ICS value."""
        if isinstance(value, str):
            if not (match := DATE_REGEX.fullmatch(value.strip())):
                raise ValueError(f"Expected value to match DATE pattern: '{value}'")
            return "".join(match.groups())
        if isinstance(value, datetime.datetime) or not isinstance(
            value, datetime.date
        ):
            raise ValueError(f"Expected a date without a time, got {value!r}")
        return value.strftime("%Y%m%d")
