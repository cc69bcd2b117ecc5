"""Library for handling rfc5545 and rfc6350 properties and parameters.

A property is the definition of an individual attribute describing a
calendar object, a contact or one of their sub components. A property is
also really just a "contentline", however properties in this file are the
output of the tokenizer and are provided in the context of where they live
on a component hierarchy (e.g. attached to a component, or sub component).

This is a very simple tokenizer that converts lines in an iCalendar or vCard
file into an object structure with necessary relationships to interpret the
meaning of the contentlines and how the parts break down into properties and
parameters. This library does not attempt to interpret the meaning of the
properties or types themselves.

For example, given a content line of:

  item1.EMAIL;TYPE=WORK,PREF:jane@example.com

This library would create a ParsedProperty object with this structure:

  ParsedProperty(
    name='EMAIL',
    value='jane@example.com',
    params=[
        ParsedPropertyParameter(
            name='TYPE',
            values=['WORK', 'PREF']
        )
    ],
    group='item1',
  )
"""

from __future__ import annotations

import logging
import re
from collections.abc import Generator, Iterable
from dataclasses import dataclass

from vformat.exceptions import ParseError

from .const import ATTR_TYPE

_LOGGER = logging.getLogger(__name__)

# Characters that should be encoded in quotes
_UNSAFE_CHAR_RE = re.compile(r"[,:;]")
_RE_NAME = re.compile("[A-Za-z0-9-]+")
_QUOTE = '"'
_GROUP_SEP = "."


@dataclass
class ParsedPropertyParameter:
    """A property parameter."""

    name: str
    values: list[str]


@dataclass
class ParsedProperty:
    """A property, or content line, as read from a document."""

    name: str
    value: str
    params: list[ParsedPropertyParameter] | None = None
    group: str | None = None
    """The vCard group prefix, e.g. 'item1' for 'item1.EMAIL'."""

    def get_parameter(self, name: str) -> ParsedPropertyParameter | None:
        """Return the last ParsedPropertyParameter with the specified name."""
        if not self.params:
            return None
        result = None
        for param in self.params:
            if param.name.upper() == name.upper():
                result = param
        return result

    def get_parameter_value(self, name: str) -> str | None:
        """Return the first value of the named property parameter."""
        if not (param := self.get_parameter(name)) or not param.values:
            return None
        return param.values[0]

    def ics(self) -> str:
        """Encode a ParsedProperty into the serialized format."""
        result = []
        if self.group:
            result.append(f"{self.group}{_GROUP_SEP}")
        result.append(self.name.upper())
        if self.params:
            result.append(";")
            result_params = []
            for parameter in self.params:
                result_param_values = []
                for value in parameter.values:
                    # Property parameters with values contain a colon, semicolon,
                    # or a comma character must be placed in quoted text
                    if _UNSAFE_CHAR_RE.search(value):
                        result_param_values.append(f'"{value}"')
                    else:
                        result_param_values.append(value)
                values = ",".join(result_param_values)
                result_params.append(f"{parameter.name.upper()}={values}")
            result.append(";".join(result_params))
        result.append(":")
        result.append(str(self.value))
        return "".join(result)

    @classmethod
    def from_ics(cls, contentline: str) -> ParsedProperty:
        """Decode a ParsedProperty from a content line.

        Will raise a ParseError on failure.
        """
        return _parse_line(contentline)


def _find_value_sep(line: str) -> int:
    """Return the position of the first ':' that is not inside a quoted string."""
    quoted = False
    for pos, char in enumerate(line):
        if char == _QUOTE:
            quoted = not quoted
        elif char == ":" and not quoted:
            return pos
    if quoted:
        raise ParseError(
            "Unexpected end of line: unclosed quoted parameter value",
            detailed_error=line,
        )
    raise ParseError(
        "Invalid property line, expected ':' after property name",
        detailed_error=line,
    )


def _split_unquoted(text: str, sep: str) -> list[str]:
    """Split text on a separator, ignoring separators inside quoted strings."""
    parts: list[str] = []
    quoted = False
    start = 0
    for pos, char in enumerate(text):
        if char == _QUOTE:
            quoted = not quoted
        elif char == sep and not quoted:
            parts.append(text[start:pos])
            start = pos + 1
    parts.append(text[start:])
    return parts


def _parse_param_value(value: str, line: str) -> str:
    if len(value) >= 2 and value[0] == _QUOTE and value[-1] == _QUOTE:
        value = value[1:-1]
    if _QUOTE in value:
        raise ParseError(
            f"Parameter value '{value}' is improperly quoted", detailed_error=line
        )
    return value


def _parse_line(line: str) -> ParsedProperty:
    """Parse a single property line."""
    value_pos = _find_value_sep(line)
    header = _split_unquoted(line[:value_pos], ";")

    # parse [GROUP.]NAME
    property_name = header[0]
    group: str | None = None
    if _GROUP_SEP in property_name:
        group, property_name = property_name.rsplit(_GROUP_SEP, 1)
        if not _RE_NAME.fullmatch(group):
            raise ParseError(f"Invalid property group '{group}'", detailed_error=line)
    if not _RE_NAME.fullmatch(property_name):
        raise ParseError(
            f"Invalid property name '{property_name}'", detailed_error=line
        )

    # parse PARAMS if any
    params: list[ParsedPropertyParameter] = []
    bare_types: ParsedPropertyParameter | None = None
    for param in header[1:]:
        if (name_end_pos := param.find("=")) == -1:
            # vCard 2.1 allows bare parameters such as TEL;WORK;VOICE
            if not _RE_NAME.fullmatch(param):
                raise ParseError(
                    f"Invalid parameter format: missing '=' in '{param}'",
                    detailed_error=line,
                )
            if bare_types is None:
                bare_types = ParsedPropertyParameter(name=ATTR_TYPE, values=[])
                params.append(bare_types)
            bare_types.values.append(param)
            continue
        param_name = param[0:name_end_pos]
        if not _RE_NAME.fullmatch(param_name):
            raise ParseError(
                f"Invalid parameter name '{param_name}'", detailed_error=line
            )
        param_values = [
            _parse_param_value(value, line)
            for value in _split_unquoted(param[name_end_pos + 1 :], ",")
        ]
        params.append(
            ParsedPropertyParameter(name=param_name.upper(), values=param_values)
        )

    return ParsedProperty(
        name=property_name.upper(),
        value=line[value_pos + 1 :],
        params=params if params else None,
        group=group,
    )


def parse_line(contentline: str) -> ParsedProperty | None:
    """Parse a single content line, returning None if it can't be tokenized."""
    if not contentline:
        return None
    try:
        return ParsedProperty.from_ics(contentline)
    except ParseError as err:
        _LOGGER.debug("Skipping content line: %s", err)
        return None


def parse_contentlines(
    contentlines: Iterable[str],
) -> Generator[ParsedProperty, None, None]:
    """Parse content lines into ParsedProperty objects, skipping malformed lines."""
    for contentline in contentlines:
        if prop := parse_line(contentline):
            yield prop
