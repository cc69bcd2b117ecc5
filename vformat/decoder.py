"""Library for decoding the raw value of a property into a typed value.

The declared type of the property (see `vformat.properties`) determines
which value types are attempted. A VALUE parameter may select one of the
registered value types explicitly. Decoding a single property never fails:
when no type fits, the raw text is kept and a diagnostic is returned so
the rest of the document can still be read.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
from collections.abc import Mapping

from .component import ParamValue, Property
from .diagnostics import Diagnostic, DiagnosticKind
from .parsing.const import ATTR_TYPE
from .parsing.property import ParsedProperty, ParsedPropertyParameter
from .properties import TEXT, PropertyType, property_type
from .types import DATA_TYPE, DecodeContext
from .types.text import split_unescaped
from .values import DateTimeValue, ListValue, TextValue, TypedValue, ZoneState

__all__ = [
    "decode_params",
    "decode_property",
    "decode_value",
]

_LOGGER = logging.getLogger(__name__)

ATTR_VALUE = "VALUE"


def decode_params(
    params: list[ParsedPropertyParameter] | None,
) -> dict[str, ParamValue]:
    """Convert the raw parameters into a mapping.

    TYPE values accumulate across repeated parameters. Any other repeated
    parameter replaces the earlier one.
    """
    result: dict[str, ParamValue] = {}
    for param in params or ():
        name = param.name.upper()
        values = list(dict.fromkeys(param.values))
        if name == ATTR_TYPE and name in result:
            previous = result[name]
            if isinstance(previous, str):
                previous = (previous,)
            values = list(dict.fromkeys([*previous, *values]))
        if len(values) == 1:
            result[name] = values[0]
        else:
            result[name] = tuple(values)
    return result


def _value_types(prop: ParsedProperty, prop_type: PropertyType) -> list[str]:
    """Return the value type names to attempt, in order."""
    if (value_type := prop.get_parameter_value(ATTR_VALUE)) is not None:
        value_type = value_type.upper()
        if value_type in DATA_TYPE.parse_property_value:
            _LOGGER.debug("Parsing %s as value type '%s'", prop.name, value_type)
            return [value_type]
        _LOGGER.debug(
            "Property parameter specified unsupported type '%s', using %s",
            value_type,
            prop_type.value_types,
        )
    return list(prop_type.value_types)


def _decode_single(
    prop: ParsedProperty, value_types: list[str], context: DecodeContext
) -> TypedValue:
    errors = []
    for value_type in value_types:
        if not (decoder := DATA_TYPE.parse_property_value.get(value_type)):
            errors.append(f"no decoder for {value_type}")
            continue
        try:
            return decoder(prop, context)
        except ValueError as err:
            _LOGGER.debug(
                "Unable to parse property value as type %s: %s", value_type, err
            )
            errors.append(str(err))
    raise ValueError(f"Failed to validate: {prop.value}, errors: ({errors})")


def decode_value(
    prop: ParsedProperty,
    timezones: Mapping[str, datetime.tzinfo] | None = None,
) -> TypedValue:
    """Decode the value of a property as its declared type.

    Raises ValueError if the value does not match any of the allowed types.
    """
    prop_type = property_type(prop.name) or TEXT
    context = DecodeContext(property_type=prop_type, timezones=timezones or {})
    value_types = _value_types(prop, prop_type)
    if not prop_type.multi:
        return _decode_single(prop, value_types, context)
    return ListValue(
        tuple(
            _decode_single(dataclasses.replace(prop, value=item), value_types, context)
            for item in split_unescaped(prop.value, ",")
        )
    )


def _unresolved(value: TypedValue) -> list[DateTimeValue]:
    if isinstance(value, ListValue):
        return [item for sub in value.items for item in _unresolved(sub)]
    if isinstance(value, DateTimeValue) and value.zone == ZoneState.UNRESOLVED:
        return [value]
    return []


def decode_property(
    prop: ParsedProperty,
    timezones: Mapping[str, datetime.tzinfo] | None = None,
) -> tuple[Property, list[Diagnostic]]:
    """Decode a parsed property, returning it with any problems found."""
    diagnostics: list[Diagnostic] = []
    value: TypedValue
    try:
        value = decode_value(prop, timezones)
    except ValueError as err:
        _LOGGER.debug("Keeping '%s' as text: %s", prop.name, err)
        value = TextValue(prop.value, fallback=True)
        diagnostics.append(
            Diagnostic(
                DiagnosticKind.INVALID_VALUE,
                f"Property '{prop.name}' value does not match its type: {prop.value}",
            )
        )
    for unresolved in _unresolved(value):
        diagnostics.append(
            Diagnostic(
                DiagnosticKind.UNRESOLVED_TZID,
                f"Property '{prop.name}' uses undefined timezone '{unresolved.tzid}'",
            )
        )
    return (
        Property(
            name=prop.name,
            value=value,
            params=decode_params(prop.params),
            group=prop.group,
        ),
        diagnostics,
    )
