"""A grouping of component properties that defines a time zone.

An iCal timezone is a complete description of a timezone, separate from the
built-in timezones used by python datetime objects. Only the VTIMEZONE
components found in the same document are used to resolve a TZID, there
are no lookups in a timezone database.
"""

from __future__ import annotations

import datetime
import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import cached_property

from dateutil import rrule

from .decoder import decode_value
from .parsing.component import ParsedComponent
from .values import DateTimeValue, DurationValue, ListValue, RecurValue

__all__ = [
    "Observance",
    "VTimezone",
    "build_timezone_table",
]

_LOGGER = logging.getLogger(__name__)

_ZERO = datetime.timedelta(0)

VTIMEZONE = "VTIMEZONE"


class ObservanceType(str, enum.Enum):
    """Type of a timezone observance."""

    STANDARD = "STANDARD"
    DAYLIGHT = "DAYLIGHT"


@dataclass(frozen=True)
class Observance:
    """A sub-component with properties for a set of timezone observances."""

    observance_type: ObservanceType
    start: datetime.datetime
    """The first onset datetime (local time) for the observance."""

    offset_from: datetime.timedelta
    offset_to: datetime.timedelta
    """Gives the UTC offset for the time zone when this observance is in use."""

    rule: str | None = None
    """The recurrence rule for the onset of observances."""

    rdates: tuple[datetime.datetime, ...] = ()
    name: str | None = None

    @cached_property
    def _ruleset(self) -> rrule.rruleset:
        ruleset = rrule.rruleset()
        if self.rule:
            ruleset.rrule(
                rrule.rrulestr(self.rule, dtstart=self.start, ignoretz=True)
            )
        ruleset.rdate(self.start)
        for rdate in self.rdates:
            ruleset.rdate(rdate)
        return ruleset

    def last_onset(self, value: datetime.datetime) -> datetime.datetime | None:
        """Return the latest onset at or before the local time value."""
        return self._ruleset.before(value, inc=True)


@dataclass(frozen=True)
class VTimezone(datetime.tzinfo):
    """An implementation of tzinfo based on a VTIMEZONE component."""

    tzid: str
    observances: tuple[Observance, ...] = field(default_factory=tuple)

    def _get_observance(self, dt: datetime.datetime) -> Observance | None:
        value = dt.replace(tzinfo=None)
        result: tuple[datetime.datetime, Observance] | None = None
        for observance in self.observances:
            if (onset := observance.last_onset(value)) is None:
                continue
            if result is None or onset > result[0]:
                result = (onset, observance)
        return result[1] if result else None

    def utcoffset(self, dt: datetime.datetime | None) -> datetime.timedelta:
        """Return offset of local time from UTC, as a timedelta object."""
        if not dt or not self.observances:
            return _ZERO
        if obs := self._get_observance(dt):
            return obs.offset_to
        # Before the first onset the offset in effect is the one it changed from
        return min(self.observances, key=lambda obs: obs.start).offset_from

    def tzname(self, dt: datetime.datetime | None) -> str | None:
        """Return the time zone name for the datetime."""
        if dt and (obs := self._get_observance(dt)) and obs.name:
            return obs.name
        return self.tzid

    def dst(self, dt: datetime.datetime | None) -> datetime.timedelta:
        """Return the daylight saving time (DST) adjustment, if applicable."""
        if (
            not dt
            or not (obs := self._get_observance(dt))
            or obs.observance_type != ObservanceType.DAYLIGHT
        ):
            return _ZERO
        return obs.offset_to - obs.offset_from

    def __str__(self) -> str:
        return self.tzid

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.tzid})"


def _first(component: ParsedComponent, name: str) -> str | None:
    for prop in component.properties:
        if prop.name == name:
            return prop.value
    return None


def _parse_observance(component: ParsedComponent) -> Observance:
    """Parse a STANDARD or DAYLIGHT component, raising ValueError on failure."""
    values: dict[str, object] = {}
    rdates: list[datetime.datetime] = []
    for prop in component.properties:
        if prop.name not in (
            "DTSTART",
            "TZOFFSETFROM",
            "TZOFFSETTO",
            "RRULE",
            "RDATE",
            "TZNAME",
        ):
            continue
        value = decode_value(prop)
        if prop.name == "RDATE" and isinstance(value, ListValue):
            rdates.extend(
                item.value.replace(tzinfo=None)
                for item in value.items
                if isinstance(item, DateTimeValue)
                and isinstance(item.value, datetime.datetime)
            )
        elif prop.name not in values:
            values[prop.name] = value

    dtstart = values.get("DTSTART")
    offset_from = values.get("TZOFFSETFROM")
    offset_to = values.get("TZOFFSETTO")
    if not isinstance(dtstart, DateTimeValue) or dtstart.is_date:
        raise ValueError(f"{component.name} requires a DTSTART date and time")
    if not isinstance(offset_to, DurationValue):
        raise ValueError(f"{component.name} requires TZOFFSETTO")
    if not isinstance(offset_from, DurationValue):
        offset_from = offset_to
    rule = values.get("RRULE")
    tzname = values.get("TZNAME")
    return Observance(
        observance_type=ObservanceType(component.name),
        start=dtstart.value.replace(tzinfo=None),  # type: ignore[union-attr]
        offset_from=offset_from.duration,
        offset_to=offset_to.duration,
        rule=rule.rule if isinstance(rule, RecurValue) else None,
        rdates=tuple(rdates),
        name=str(tzname) if tzname is not None else None,
    )


def parse_timezone(component: ParsedComponent) -> VTimezone:
    """Build a VTimezone from a VTIMEZONE component.

    Raises ValueError if the component has no TZID or no valid observance.
    """
    if not (tzid := _first(component, "TZID")):
        raise ValueError("VTIMEZONE requires a TZID")
    observances = []
    for child in component.components:
        if child.name not in (ObservanceType.STANDARD, ObservanceType.DAYLIGHT):
            continue
        try:
            observances.append(_parse_observance(child))
        except ValueError as err:
            _LOGGER.debug("Ignoring observance in '%s': %s", tzid, err)
    if not observances:
        raise ValueError(
            f"VTIMEZONE '{tzid}' requires at least one standard or daylight definition"
        )
    return VTimezone(tzid=tzid, observances=tuple(observances))


def _walk(components: Iterable[ParsedComponent]) -> Iterable[ParsedComponent]:
    for component in components:
        yield component
        yield from _walk(component.components)


def build_timezone_table(
    components: Iterable[ParsedComponent],
) -> dict[str, VTimezone]:
    """Return the timezones defined anywhere in the component tree by TZID."""
    result: dict[str, VTimezone] = {}
    for component in _walk(components):
        if component.name != VTIMEZONE:
            continue
        try:
            timezone = parse_timezone(component)
        except ValueError as err:
            _LOGGER.debug("Ignoring invalid timezone: %s", err)
            continue
        result[timezone.tzid] = timezone
    return result
