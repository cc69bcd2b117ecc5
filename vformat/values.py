"""Typed property values.

Every decoded property holds exactly one of the value classes defined here.
The class is chosen from the declared type of the property (see
`vformat.properties`), never by looking at what the text happens to look
like, and the `kind` attribute can be used to dispatch on it.
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass
from typing import ClassVar, Union

__all__ = [
    "BooleanValue",
    "DateTimeValue",
    "DurationValue",
    "IntegerValue",
    "ListValue",
    "RecurValue",
    "StructuredValue",
    "TextValue",
    "TypedValue",
    "ValueKind",
    "ZoneState",
]


class ValueKind(str, enum.Enum):
    """Tag identifying the type of a decoded value."""

    TEXT = "TEXT"
    DATE_TIME = "DATE-TIME"
    DURATION = "DURATION"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    LIST = "LIST"
    STRUCTURED = "STRUCTURED"
    RECUR = "RECUR"


class ZoneState(str, enum.Enum):
    """How the timezone of a DATE-TIME value was determined."""

    UTC = "UTC"
    """The value had a 'Z' suffix and is an absolute instant."""

    RESOLVED = "RESOLVED"
    """The TZID parameter matched a VTIMEZONE in the same document."""

    FLOATING = "FLOATING"
    """No timezone was given, the value is a local time."""

    UNRESOLVED = "UNRESOLVED"
    """A TZID was given but not defined, the value is treated as a local time."""


@dataclass(frozen=True)
class TextValue:
    """A TEXT value, already unescaped."""

    kind: ClassVar[ValueKind] = ValueKind.TEXT

    text: str
    fallback: bool = False
    """Set when the value could not be decoded as its declared type.

    The text is then the raw value exactly as it appeared in the document.
    """

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class DateTimeValue:
    """A DATE-TIME or DATE value."""

    kind: ClassVar[ValueKind] = ValueKind.DATE_TIME

    value: datetime.datetime | datetime.date
    zone: ZoneState = ZoneState.FLOATING
    tzid: str | None = None

    @property
    def is_date(self) -> bool:
        """Return true for a DATE value without a time."""
        return not isinstance(self.value, datetime.datetime)

    @property
    def is_naive(self) -> bool:
        """Return true if the value is a local time without a known offset."""
        return self.zone in (ZoneState.FLOATING, ZoneState.UNRESOLVED)

    def __str__(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True)
class DurationValue:
    """A signed DURATION value, also used for UTC-OFFSET values."""

    kind: ClassVar[ValueKind] = ValueKind.DURATION

    duration: datetime.timedelta

    def __str__(self) -> str:
        return str(self.duration)


@dataclass(frozen=True)
class IntegerValue:
    """An INTEGER value, not range checked."""

    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanValue:
    """A BOOLEAN value."""

    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

    value: bool

    def __str__(self) -> str:
        return "TRUE" if self.value else "FALSE"


@dataclass(frozen=True)
class ListValue:
    """A comma separated list of values of the same type."""

    kind: ClassVar[ValueKind] = ValueKind.LIST

    items: tuple[TypedValue, ...]

    def __str__(self) -> str:
        return ", ".join(str(item) for item in self.items)


@dataclass(frozen=True)
class StructuredValue:
    """A semicolon separated value such as N or ADR.

    Each part is a tuple of its comma separated values. Missing trailing
    parts are filled in with a single empty string.
    """

    kind: ClassVar[ValueKind] = ValueKind.STRUCTURED

    parts: tuple[tuple[str, ...], ...]

    def part(self, index: int) -> str:
        """Return a part with multiple values joined by a space."""
        if index >= len(self.parts):
            return ""
        return " ".join(value for value in self.parts[index] if value)

    def __str__(self) -> str:
        return ", ".join(
            text for index in range(len(self.parts)) if (text := self.part(index))
        )


@dataclass(frozen=True)
class RecurValue:
    """A recurrence rule descriptor, validated but never expanded."""

    kind: ClassVar[ValueKind] = ValueKind.RECUR

    rule: str

    def __str__(self) -> str:
        return self.rule


TypedValue = Union[
    TextValue,
    DateTimeValue,
    DurationValue,
    IntegerValue,
    BooleanValue,
    ListValue,
    StructuredValue,
    RecurValue,
]
