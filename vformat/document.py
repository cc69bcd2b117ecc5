"""A decoded iCalendar or vCard document.

This is an example of decoding a calendar object fetched from a server:

```python
from vformat.document import Document

document = Document.from_text(ics_content)
if event := document.find("VEVENT"):
    print(event.text("SUMMARY"))
for diagnostic in document.diagnostics:
    print(diagnostic)
```

Decoding is tolerant: unbalanced BEGIN/END markers, malformed content lines
and values that do not match their type are recorded as diagnostics on the
document instead of being raised. Use `vformat.settings.strict_mode()` to
raise a `ParseError` for structural problems instead.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Mapping
from dataclasses import dataclass

from . import settings
from .component import Component, Property
from .diagnostics import Diagnostic, redact_text
from .decoder import decode_property
from .exceptions import ParseError
from .parsing.component import ParsedComponent, parse_content
from .timezone import VTimezone, build_timezone_table

__all__ = [
    "Document",
]

_LOGGER = logging.getLogger(__name__)

ENCODING = "utf-8"


def _build_component(
    parsed: ParsedComponent,
    timezones: Mapping[str, VTimezone],
    diagnostics: list[Diagnostic],
) -> Component:
    properties: dict[str, list[Property]] = {}
    for parsed_prop in parsed.properties:
        prop, prop_diagnostics = decode_property(parsed_prop, timezones)
        diagnostics.extend(prop_diagnostics)
        properties.setdefault(prop.name, []).append(prop)
    return Component(
        name=parsed.name,
        properties={name: tuple(values) for name, values in properties.items()},
        components=tuple(
            _build_component(child, timezones, diagnostics)
            for child in parsed.components
        ),
    )


@dataclass(frozen=True)
class Document:
    """The top level components of a document and the problems found decoding it."""

    components: tuple[Component, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @classmethod
    def from_text(cls, content: str) -> Document:
        """Factory method to create a new instance from iCalendar or vCard content.

        Raises ParseError in strict mode when the component nesting is broken.
        """
        result = parse_content(content)
        diagnostics = list(result.diagnostics)
        timezones = build_timezone_table(result.components)
        _LOGGER.debug("Found timezones %s", list(timezones))
        components = tuple(
            _build_component(component, timezones, diagnostics)
            for component in result.components
        )
        document = cls(components=components, diagnostics=tuple(diagnostics))
        if diagnostics:
            _LOGGER.debug(
                "Decoded document with %d diagnostic(s):\n%s",
                len(diagnostics),
                redact_text(content),
            )
        if settings.is_strict_mode_enabled() and (
            errors := document.structural_errors
        ):
            raise ParseError(
                "Failed to parse document contents",
                detailed_error="\n".join(str(error) for error in errors),
            )
        return document

    @classmethod
    def from_bytes(cls, content: bytes) -> Document:
        """Create a new instance from UTF-8 encoded content."""
        try:
            text = content.decode(ENCODING)
        except UnicodeDecodeError as err:
            raise ParseError(
                "Document content is not valid UTF-8", detailed_error=str(err)
            ) from err
        return cls.from_text(text)

    def walk(self, name: str | None = None) -> Generator[Component, None, None]:
        """Yield every component in the document, depth first."""
        for component in self.components:
            yield from component.walk(name)

    def find(self, name: str) -> Component | None:
        """Return the first component with the name anywhere in the document."""
        return next(self.walk(name), None)

    def find_all(self, name: str) -> list[Component]:
        """Return all components with the name anywhere in the document."""
        return list(self.walk(name))

    @property
    def structural_errors(self) -> tuple[Diagnostic, ...]:
        """Return the diagnostics that affected the component nesting."""
        return tuple(
            diagnostic for diagnostic in self.diagnostics if diagnostic.structural
        )

    @property
    def has_errors(self) -> bool:
        """Return true if the component nesting of the document was broken."""
        return bool(self.structural_errors)
