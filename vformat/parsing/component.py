"""Library for handling rfc5545 and rfc6350 components.

An iCalendar or vCard object consists of one or more components, that may
have properties or sub-components. An example of a component might be the
calendar itself, an event, a to-do, an alarm, timezone info, a contact, etc.

Components created here have no semantic meaning, but hold all the data
needed to interpret based on the type (see `vformat.document` which decodes
the property values).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from vformat import settings
from vformat.diagnostics import Diagnostic, DiagnosticKind
from vformat.exceptions import ParseError

from .const import (
    ATTR_BEGIN,
    ATTR_END,
    BOM,
    CRLF,
    FOLD_INDENT,
    FOLD_LEN,
    WSP,
)
from .property import ParsedProperty

_LOGGER = logging.getLogger(__name__)

LINES_RE = re.compile(r"\r?\n")


@dataclass
class ParsedComponent:
    """A component as read from a document."""

    name: str
    properties: list[ParsedProperty] = field(default_factory=list)
    components: list[ParsedComponent] = field(default_factory=list)

    def contentlines(self) -> list[str]:
        """Return the folded physical lines of this component."""
        result = [f"{ATTR_BEGIN}:{self.name.upper()}"]
        for prop in self.properties:
            result.extend(fold_contentline(prop.ics()))
        for component in self.components:
            result.extend(component.contentlines())
        result.append(f"{ATTR_END}:{self.name.upper()}")
        return result

    def ics(self, newline: str = CRLF) -> str:
        """Encode a component as text."""
        return newline.join(self.contentlines())


@dataclass
class ParseResult:
    """The raw component tree and any problems found building it."""

    components: list[ParsedComponent]
    diagnostics: list[Diagnostic]


def fold_contentline(contentline: str) -> list[str]:
    """Fold a content line into physical lines of at most 75 octets.

    Lines are broken between characters, never inside a multi-byte UTF-8
    sequence, and each continuation line starts with a single space.
    """
    if (
        not settings.is_output_folding_enabled()
        or len(contentline.encode("utf-8")) <= FOLD_LEN
    ):
        return [contentline]
    result: list[str] = []
    current: list[str] = []
    size = 0
    for char in contentline:
        char_len = len(char.encode("utf-8"))
        if size + char_len > FOLD_LEN:
            result.append("".join(current))
            current = [FOLD_INDENT]
            size = len(FOLD_INDENT)
        current.append(char)
        size += char_len
    result.append("".join(current))
    return result


def unfolded_lines(content: str) -> list[str]:
    """Read content and unfold lines.

    Any line starting with a space or tab is a continuation of the previous
    line with exactly one whitespace character removed. A continuation with
    no previous line is kept as the start of a new (malformed) line.
    """
    if content.startswith(BOM):
        content = content[len(BOM) :]
    lines: list[list[str]] = []
    for line in LINES_RE.split(content):
        if lines and line[:1] in WSP:
            lines[-1].append(line[1:])
        else:
            lines.append([line])
    result = ["".join(parts) for parts in lines]
    while result and not result[-1]:
        result.pop()
    return result


def parse_content(content: str) -> ParseResult:
    """Parse content into a tree of raw components.

    This includes all necessary unfolding of long lines into full properties.

    This is fairly straight forward in that it walks through each line and uses
    a stack to associate properties with the current object. This does the absolute
    minimum possible parsing to get the right structure. All the more detailed
    decoding of the property values is handled elsewhere.

    Structural problems are recorded as diagnostics rather than raised: a
    mismatched END still closes the open component, and components left open
    at the end of the input are closed and kept.
    """
    lines = unfolded_lines(content)
    diagnostics: list[Diagnostic] = []
    if not any(lines):
        diagnostics.append(
            Diagnostic(DiagnosticKind.EMPTY_DOCUMENT, "Document has no content lines")
        )
        return ParseResult(components=[], diagnostics=diagnostics)

    stack: list[ParsedComponent] = [ParsedComponent(name="stream")]
    for lineno, line in enumerate(lines, start=1):
        if not line:
            continue
        try:
            prop = ParsedProperty.from_ics(line)
        except ParseError as err:
            _LOGGER.debug("Skipping malformed line %d: %s", lineno, err.detailed_error)
            diagnostics.append(
                Diagnostic(DiagnosticKind.MALFORMED_LINE, err.message, lineno)
            )
            continue
        if prop.name == ATTR_BEGIN:
            if not (name := prop.value.strip().upper()):
                diagnostics.append(
                    Diagnostic(
                        DiagnosticKind.MALFORMED_LINE,
                        f"{ATTR_BEGIN} without a component name",
                        lineno,
                    )
                )
                continue
            stack.append(ParsedComponent(name=name))
        elif prop.name == ATTR_END:
            name = prop.value.strip().upper()
            if len(stack) == 1:
                diagnostics.append(
                    Diagnostic(
                        DiagnosticKind.UNEXPECTED_END,
                        f"Unexpected '{ATTR_END}:{name}' with no open component",
                        lineno,
                    )
                )
                continue
            component = stack.pop()
            if name != component.name:
                diagnostics.append(
                    Diagnostic(
                        DiagnosticKind.MISMATCHED_END,
                        f"Unexpected '{ATTR_END}:{name}', "
                        f"expected {ATTR_END}:{component.name}",
                        lineno,
                    )
                )
            stack[-1].components.append(component)
        elif len(stack) == 1:
            diagnostics.append(
                Diagnostic(
                    DiagnosticKind.MALFORMED_LINE,
                    f"Property '{prop.name}' is outside of any component",
                    lineno,
                )
            )
        else:
            stack[-1].properties.append(prop)

    while len(stack) > 1:
        component = stack.pop()
        diagnostics.append(
            Diagnostic(
                DiagnosticKind.UNTERMINATED,
                f"Missing {ATTR_END}:{component.name}",
            )
        )
        stack[-1].components.append(component)

    return ParseResult(components=stack[0].components, diagnostics=diagnostics)


def encode_content(components: Iterable[ParsedComponent], newline: str = CRLF) -> str:
    """Encode a set of parsed components into content."""
    return newline.join(component.ics(newline) for component in components)
