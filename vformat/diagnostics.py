"""Library for diagnostics or debugging information about documents.

Problems found while decoding are recorded as `Diagnostic` objects on the
returned document rather than raised, since a partially readable document
is more useful than none. The redaction helpers allow logging document
content without leaking personal details.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
import enum
import itertools
import re

from .parsing.property import ParsedProperty, parse_line


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "redact_text",
]


class DiagnosticKind(str, enum.Enum):
    """The kind of problem found while decoding a document."""

    EMPTY_DOCUMENT = "empty-document"
    """The document had no content lines at all."""

    MISMATCHED_END = "mismatched-end"
    """An END marker named a different component than the one open."""

    UNEXPECTED_END = "unexpected-end"
    """An END marker appeared with no open component."""

    UNTERMINATED = "unterminated"
    """A component was still open when the input ended."""

    MALFORMED_LINE = "malformed-line"
    """A content line could not be tokenized and was skipped."""

    INVALID_VALUE = "invalid-value"
    """A property value did not match its declared type and was kept as text."""

    UNRESOLVED_TZID = "unresolved-tzid"
    """A TZID parameter had no matching VTIMEZONE in the document."""


STRUCTURAL_KINDS = frozenset(
    {
        DiagnosticKind.EMPTY_DOCUMENT,
        DiagnosticKind.MISMATCHED_END,
        DiagnosticKind.UNEXPECTED_END,
        DiagnosticKind.UNTERMINATED,
    }
)


@dataclass(frozen=True)
class Diagnostic:
    """A problem found while decoding a document."""

    kind: DiagnosticKind
    message: str
    line: int | None = None
    """The 1-based logical line number, when known."""

    @property
    def structural(self) -> bool:
        """Return true if the component nesting was affected."""
        return self.kind in STRUCTURAL_KINDS

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.kind.value}: {self.message}"
        return f"line {self.line}: {self.kind.value}: {self.message}"


PROPERTY_ALLOWLIST = {
    "BEGIN",
    "END",
    "VERSION",
    "PRODID",
    "DTSTAMP",
    "CREATED",
    "LAST-MODIFIED",
    "DTSTART",
    "DTEND",
    "DUE",
    "RRULE",
    "TRIGGER",
    "ACTION",
    "TZID",
    "TZOFFSETFROM",
    "TZOFFSETTO",
    "REV",
}
PARAMETER_ALLOWLIST = {
    "VALUE",
    "TZID",
    "TYPE",
    "ENCODING",
    "CHARSET",
    "PREF",
    "PARTSTAT",
    "ROLE",
    "CUTYPE",
    "RSVP",
    "RELATED",
    "RANGE",
}
REDACT = "***"
MAX_CONTENTLINES = 5000

_FOLD_RE = re.compile(r"\r?\n[ \t]")


def _redact_params(prop: ParsedProperty) -> str:
    result = []
    for param in prop.params or ():
        if param.name in PARAMETER_ALLOWLIST:
            result.append(f";{param.name}={','.join(param.values)}")
        else:
            result.append(f";{param.name}={REDACT}")
    return "".join(result)


def redact_contentline(contentline: str, property_allowlist: set[str]) -> str:
    """Return a redacted version of a content line.

    The group, property name and parameter names are kept. Values are only
    kept for allowed properties and parameters, since parameters such as CN
    or EMAIL carry personal details just like property values do.
    """
    if (prop := parse_line(contentline)) is None:
        return REDACT
    name = f"{prop.group}.{prop.name}" if prop.group else prop.name
    value = prop.value if prop.name in property_allowlist else REDACT
    return f"{name}{_redact_params(prop)}:{value}"


def redact_lines(
    content: str,
    max_contentlines: int = MAX_CONTENTLINES,
    property_allowlist: set[str] | None = None,
) -> Generator[str, None, None]:
    """Generate redacted document contents one unfolded line at a time."""
    contentlines = _FOLD_RE.sub("", content).splitlines()
    for contentline in itertools.islice(contentlines, max_contentlines):
        if contentline:
            yield redact_contentline(
                contentline, property_allowlist or PROPERTY_ALLOWLIST
            )


def redact_text(content: str, max_contentlines: int = MAX_CONTENTLINES) -> str:
    """Return the redacted document contents, suitable for logging."""
    return "\n".join(redact_lines(content, max_contentlines))
