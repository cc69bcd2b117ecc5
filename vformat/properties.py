"""Declared value types of the properties that can appear in documents.

This file maps property names from rfc5545 (iCalendar) and rfc6350 (vCard,
including the properties carried over from vCard 3.0) to the value types
they hold. Properties that are not listed here, including all experimental
'X-' properties, hold TEXT.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    "PropertyType",
    "PROPERTY_TYPES",
    "TodoStatus",
    "property_type",
]


@dataclass(frozen=True)
class PropertyType:
    """The value types a property may hold."""

    value_types: tuple[str, ...]
    """Allowed value type names, tried in this order unless VALUE is set."""

    multi: bool = False
    """The value is a comma separated list of values."""

    arity: int | None = None
    """Number of semicolon separated parts of a STRUCTURED value, if fixed."""

    @property
    def default_type(self) -> str:
        """Return the value type used when encoding."""
        return self.value_types[0]


TEXT = PropertyType(("TEXT",))
TEXT_LIST = PropertyType(("TEXT",), multi=True)
INTEGER = PropertyType(("INTEGER",))
DATE_TIME = PropertyType(("DATE-TIME",))
DATE_TIME_OR_DATE = PropertyType(("DATE-TIME", "DATE"))
DATE_OR_DATE_TIME = PropertyType(("DATE", "DATE-TIME"))
DATE_TIME_LIST = PropertyType(("DATE-TIME", "DATE"), multi=True)
UTC_OFFSET = PropertyType(("UTC-OFFSET",))

PROPERTY_TYPES: dict[str, PropertyType] = {
    # rfc5545 descriptive properties
    "SUMMARY": TEXT,
    "DESCRIPTION": TEXT,
    "LOCATION": TEXT,
    "COMMENT": TEXT,
    "CONTACT": TEXT,
    "STATUS": TEXT,
    "CLASS": TEXT,
    "TRANSP": TEXT,
    "UID": TEXT,
    "PRODID": TEXT,
    "VERSION": TEXT,
    "METHOD": TEXT,
    "CALSCALE": TEXT,
    "ACTION": TEXT,
    "ORGANIZER": TEXT,
    "ATTENDEE": TEXT,
    "CATEGORIES": TEXT_LIST,
    "RESOURCES": TEXT_LIST,
    "PRIORITY": INTEGER,
    "PERCENT-COMPLETE": INTEGER,
    "SEQUENCE": INTEGER,
    "REPEAT": INTEGER,
    # rfc5545 date and time properties
    "DTSTART": DATE_TIME_OR_DATE,
    "DTEND": DATE_TIME_OR_DATE,
    "DUE": DATE_TIME_OR_DATE,
    "RECURRENCE-ID": DATE_TIME_OR_DATE,
    "COMPLETED": DATE_TIME,
    "DTSTAMP": DATE_TIME,
    "CREATED": DATE_TIME,
    "LAST-MODIFIED": DATE_TIME,
    "EXDATE": DATE_TIME_LIST,
    "RDATE": DATE_TIME_LIST,
    "DURATION": PropertyType(("DURATION",)),
    "TRIGGER": PropertyType(("DURATION", "DATE-TIME")),
    "RRULE": PropertyType(("RECUR",)),
    "EXRULE": PropertyType(("RECUR",)),
    # rfc5545 timezone properties
    "TZID": TEXT,
    "TZNAME": TEXT,
    "TZOFFSETFROM": UTC_OFFSET,
    "TZOFFSETTO": UTC_OFFSET,
    # rfc6350 properties
    "FN": TEXT,
    "N": PropertyType(("STRUCTURED",), arity=5),
    "ADR": PropertyType(("STRUCTURED",), arity=7),
    "ORG": PropertyType(("STRUCTURED",)),
    "NICKNAME": TEXT_LIST,
    "EMAIL": TEXT,
    "TEL": TEXT,
    "TITLE": TEXT,
    "ROLE": TEXT,
    "NOTE": TEXT,
    "URL": TEXT,
    "KIND": TEXT,
    "LABEL": TEXT,
    "REV": DATE_TIME,
    "BDAY": DATE_OR_DATE_TIME,
    "ANNIVERSARY": DATE_OR_DATE_TIME,
}


def property_type(name: str) -> PropertyType | None:
    """Return the declared type of a property, or None if it is not known.

    Experimental 'X-' properties are always TEXT.
    """
    name = name.upper()
    if (result := PROPERTY_TYPES.get(name)) is not None:
        return result
    if name.startswith("X-"):
        return TEXT
    return None


class TodoStatus(str, enum.Enum):
    """Status or confirmation of the to-do."""

    NEEDS_ACTION = "NEEDS-ACTION"
    COMPLETED = "COMPLETED"
    IN_PROCESS = "IN-PROCESS"
    CANCELLED = "CANCELLED"
