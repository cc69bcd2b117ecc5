"""The decoded, immutable component tree.

A `Component` is built from a `ParsedComponent` once all of its property
values have been decoded (see `vformat.document`). Components and
properties are frozen and hold tuples, so a decoded tree can be shared
freely and is never modified after it is built.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .values import TextValue, TypedValue

__all__ = [
    "Component",
    "ParamValue",
    "Property",
]

ParamValue = str | tuple[str, ...]


def _freeze_params(params: Mapping[str, ParamValue]) -> Mapping[str, ParamValue]:
    return MappingProxyType(dict(params))


@dataclass(frozen=True)
class Property:
    """A single decoded property."""

    name: str
    value: TypedValue
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    """Parameters keyed by upper case name.

    A parameter with one value holds a str, one with several values holds
    an ordered tuple without duplicates.
    """

    group: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _freeze_params(self.params))

    def param(self, name: str) -> str | None:
        """Return a parameter value, with multiple values joined by a comma."""
        if (value := self.params.get(name.upper())) is None:
            return None
        if isinstance(value, tuple):
            return ",".join(value)
        return value

    def param_values(self, name: str) -> tuple[str, ...]:
        """Return all values of a parameter."""
        if (value := self.params.get(name.upper())) is None:
            return ()
        if isinstance(value, tuple):
            return value
        return (value,)

    @property
    def text(self) -> str:
        """Return the value rendered as text."""
        return str(self.value)


@dataclass(frozen=True)
class Component:
    """A decoded component such as VCALENDAR, VEVENT or VCARD."""

    name: str
    properties: Mapping[str, tuple[Property, ...]] = field(default_factory=dict)
    """Properties keyed by name, each holding all instances in document order."""

    components: tuple[Component, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(self, "components", tuple(self.components))

    def get(self, name: str) -> Property | None:
        """Return the first property with the name, if present."""
        if values := self.properties.get(name.upper()):
            return values[0]
        return None

    def get_all(self, name: str) -> tuple[Property, ...]:
        """Return all properties with the name."""
        return self.properties.get(name.upper(), ())

    def text(self, name: str, default: str = "") -> str:
        """Return the value of the first property with the name as text."""
        if (prop := self.get(name)) is None:
            return default
        return prop.text

    def first(self, name: str) -> Component | None:
        """Return the first direct sub component with the name."""
        name = name.upper()
        for component in self.components:
            if component.name == name:
                return component
        return None

    def subcomponents(self, name: str) -> tuple[Component, ...]:
        """Return all direct sub components with the name."""
        name = name.upper()
        return tuple(
            component for component in self.components if component.name == name
        )

    def walk(self, name: str | None = None) -> Generator[Component, None, None]:
        """Yield this component and all descendants, depth first.

        When a name is given only components with that name are returned.
        """
        if name is None or self.name == name.upper():
            yield self
        for component in self.components:
            yield from component.walk(name)

    @property
    def is_text_fallback(self) -> bool:
        """Return true if any property value could not be decoded as its type."""
        return any(
            isinstance(prop.value, TextValue) and prop.value.fallback
            for values in self.properties.values()
            for prop in values
        )
