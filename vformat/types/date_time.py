"""Library for decoding and encoding DATE-TIME types."""

from __future__ import annotations

import datetime
import logging
import re

from vformat.parsing.property import ParsedProperty
from vformat.values import DateTimeValue, ZoneState

from .data_types import DATA_TYPE, DecodeContext

_LOGGER = logging.getLogger(__name__)


# Both the basic rfc5545 form and the extended form used by some vCards
DATETIME_REGEX = re.compile(
    r"^([0-9]{4})-?([0-9]{2})-?([0-9]{2})T([0-9]{2}):?([0-9]{2}):?([0-9]{2})(Z)?$"
)
TZID = "TZID"


def parse_property_value(
    prop: ParsedProperty, context: DecodeContext
) -> DateTimeValue:
    """Parse a rfc5545 value into a DateTimeValue.

    A 'Z' suffix makes the value an absolute UTC instant. Otherwise the TZID
    parameter is looked up in the timezones of the document, and when it
    can't be found the value is kept as a naive local time.
    """
    if not (match := DATETIME_REGEX.fullmatch(prop.value.strip())):
        raise ValueError(f"Expected value to match DATE-TIME pattern: {prop.value}")

    year, month, day, hour, minute, second, utc = match.groups()
    # Example: TZID=America/New_York:19980119T020000
    timezone: datetime.tzinfo | None = None
    zone = ZoneState.FLOATING
    tzid = prop.get_parameter_value(TZID)
    if utc:  # Example: 19980119T070000Z
        timezone = datetime.timezone.utc
        zone = ZoneState.UTC
        tzid = None
    elif tzid:
        if (timezone := context.timezones.get(tzid)) is not None:
            zone = ZoneState.RESOLVED
        else:
            _LOGGER.debug("Timezone '%s' not defined in document", tzid)
            zone = ZoneState.UNRESOLVED

    result = datetime.datetime(
        int(year),
        int(month),
        int(day),
        int(hour),
        int(minute),
        int(second),
        tzinfo=timezone,
    )
    _LOGGER.debug("DateTimeEncoder returned %s", result)
    return DateTimeValue(result, zone=zone, tzid=tzid)


def _from_string(value: str) -> datetime.datetime:
    """Parse an ISO 8601 or rfc5545 formatted date and time."""
    value = value.strip()
    if match := DATETIME_REGEX.fullmatch(value):
        year, month, day, hour, minute, second, utc = match.groups()
        return datetime.datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            tzinfo=datetime.timezone.utc if utc else None,
        )
    if "T" not in value and " " not in value:
        raise ValueError(f"Expected a date and time, got '{value}'")
    return datetime.datetime.fromisoformat(value)


@DATA_TYPE.register("DATE-TIME")
class DateTimeEncoder:
    """Class to handle encoding for a datetime.datetime."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> DateTimeValue:
        """Parse a rfc5545 into a DateTimeValue."""
        return parse_property_value(prop, context)

    @classmethod
    def __encode_property_value__(cls, value: datetime.datetime | str) -> str:
        """Encode a datetime, converting values with an offset to UTC."""
        if isinstance(value, str):
            value = _from_string(value)
        if not isinstance(value, datetime.datetime):
            raise ValueError(f"Expected a date and time, got {value!r}")
        if value.tzinfo is None:
            return value.strftime("%Y%m%dT%H%M%S")
        return value.astimezone(datetime.timezone.utc).strftime("%Y%m%dT%H%M%SZ")
