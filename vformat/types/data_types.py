"""Library for decoding and encoding rfc5545 and rfc6350 value types."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

from vformat.parsing.property import ParsedProperty
from vformat.properties import PropertyType
from vformat.values import TypedValue

_LOGGER = logging.getLogger(__name__)

T_TYPE = TypeVar("T_TYPE", bound=type)


@dataclass(frozen=True)
class DecodeContext:
    """Information available to a value decoder beyond the property itself."""

    property_type: PropertyType
    """The declared type of the property being decoded."""

    timezones: Mapping[str, datetime.tzinfo] = field(default_factory=dict)
    """Timezones defined by VTIMEZONE components of the same document."""


class DataType(Protocol):
    """Defines the protocol implemented by data types in this library.

    The methods defined in this protocol are all optional.
    """

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> TypedValue:
        """Decode the raw property value, raising ValueError if it does not fit."""

    @classmethod
    def __encode_property_value__(cls, value: Any) -> str:
        """Encode an application value as the raw property value text."""


class Registry:
    """Registry of data types."""

    def __init__(
        self,
    ) -> None:
        """Initialize Registry."""
        self._items: dict[str, type] = {}
        self._parse_property_value: dict[
            str, Callable[[ParsedProperty, DecodeContext], TypedValue]
        ] = {}
        self._encode_property_value: dict[str, Callable[[Any], str]] = {}

    def register(
        self,
        name: str,
    ) -> Callable[[T_TYPE], T_TYPE]:
        """Return decorator to register a type.

        The name is the Property Value Data Type name, e.g. 'DATE-TIME'.
        """

        def decorator(func: T_TYPE) -> T_TYPE:
            """Register decorated function."""
            self._items[name] = func
            if parse_property_value := getattr(func, "__parse_property_value__", None):
                self._parse_property_value[name] = parse_property_value
            if encode_property_value := getattr(
                func, "__encode_property_value__", None
            ):
                self._encode_property_value[name] = encode_property_value
            return func

        return decorator

    @property
    def parse_property_value(
        self,
    ) -> dict[str, Callable[[ParsedProperty, DecodeContext], TypedValue]]:
        """Registry of value type names to functions that decode raw values."""
        return self._parse_property_value

    @property
    def encode_property_value(self) -> dict[str, Callable[[Any], str]]:
        """Registry of value type names to functions that encode values."""
        return self._encode_property_value


DATA_TYPE: Registry = Registry()
