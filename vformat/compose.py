"""Library for composing new documents and updating fields of existing ones.

New documents are built as a component tree and encoded with CRLF line
endings, with every value passed through `vformat.encoder.encode_field`
so it is escaped exactly once:

```python
from vformat import compose

ics = compose.new_event(
    "Planning, Q4",
    start=datetime.datetime(2025, 10, 15, 10, tzinfo=datetime.UTC),
    end=datetime.datetime(2025, 10, 15, 11, tzinfo=datetime.UTC),
)
ics = compose.update_fields(ics, {"LOCATION": "Room 1"})
```

`update_fields` only touches the lines of the properties being updated,
everything else in the document is kept exactly as it was.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .encoder import encode_contentline, encode_field
from .exceptions import EncodeError
from .parsing.component import ParsedComponent
from .parsing.const import ATTR_BEGIN, ATTR_END, CRLF, WSP
from .parsing.property import ParsedProperty, ParsedPropertyParameter, parse_line
from .properties import TodoStatus, property_type
from .types.text import split_unescaped, unescape
from .util import dtstamp_factory, prodid_factory, uid_factory

__all__ = [
    "new_contact",
    "new_event",
    "new_todo",
    "update_fields",
]

_LOGGER = logging.getLogger(__name__)

ENTITY_COMPONENTS = ("VEVENT", "VTODO", "VJOURNAL", "VCARD")

CONTACT_FIELDS = {
    "full_name": "FN",
    "email": "EMAIL",
    "phone": "TEL",
    "organization": "ORG",
    "title": "TITLE",
    "note": "NOTE",
    "url": "URL",
}
NAME_FIELDS = ("family_name", "given_name")

# Parameters that describe the old value and do not apply to a new one
_VALUE_PARAMS = {"VALUE", "TZID", "ENCODING", "CHARSET"}


def _prop(name: str, value: Any, **params: str) -> ParsedProperty:
    return ParsedProperty(
        name=name,
        value=encode_field(name, value),
        params=[
            ParsedPropertyParameter(name=key, values=[param_value])
            for key, param_value in params.items()
        ]
        or None,
    )


def _date_prop(name: str, value: Any) -> ParsedProperty:
    """Return a DATE-TIME property, marked with VALUE=DATE for a date."""
    prop = _prop(name, value)
    if "T" not in prop.value:
        prop.params = [ParsedPropertyParameter(name="VALUE", values=["DATE"])]
    return prop


def _encode(component: ParsedComponent) -> str:
    return component.ics(CRLF) + CRLF


def _calendar(child: ParsedComponent) -> ParsedComponent:
    return ParsedComponent(
        name="VCALENDAR",
        properties=[
            ParsedProperty(name="VERSION", value="2.0"),
            _prop("PRODID", prodid_factory()),
        ],
        components=[child],
    )


def new_event(
    summary: str,
    start: datetime.datetime | datetime.date | str,
    end: datetime.datetime | datetime.date | str,
    description: str | None = None,
    location: str | None = None,
) -> str:
    """Return a new calendar document holding a single event."""
    event = ParsedComponent(
        name="VEVENT",
        properties=[
            _prop("UID", uid_factory()),
            _prop("DTSTAMP", dtstamp_factory()),
            _date_prop("DTSTART", start),
            _date_prop("DTEND", end),
            _prop("SUMMARY", summary),
        ],
    )
    if description:
        event.properties.append(_prop("DESCRIPTION", description))
    if location:
        event.properties.append(_prop("LOCATION", location))
    return _encode(_calendar(event))


def new_todo(
    summary: str,
    due: datetime.datetime | datetime.date | str | None = None,
    priority: int | None = None,
    status: TodoStatus | str | None = None,
    description: str | None = None,
    percent_complete: int | None = None,
) -> str:
    """Return a new calendar document holding a single to-do.

    The status defaults to NEEDS-ACTION.
    """
    try:
        todo_status = TodoStatus(status or TodoStatus.NEEDS_ACTION)
    except ValueError as err:
        raise EncodeError(f"Invalid to-do status: {status}") from err
    todo = ParsedComponent(
        name="VTODO",
        properties=[
            _prop("UID", uid_factory()),
            _prop("DTSTAMP", dtstamp_factory()),
            _prop("SUMMARY", summary),
        ],
    )
    if description:
        todo.properties.append(_prop("DESCRIPTION", description))
    todo.properties.append(_prop("STATUS", todo_status.value))
    if priority is not None:
        todo.properties.append(_prop("PRIORITY", priority))
    if due is not None:
        todo.properties.append(_date_prop("DUE", due))
    if percent_complete is not None:
        todo.properties.append(_prop("PERCENT-COMPLETE", percent_complete))
    return _encode(_calendar(todo))


def new_contact(
    full_name: str,
    family_name: str | None = None,
    given_name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    organization: str | None = None,
    title: str | None = None,
    note: str | None = None,
    url: str | None = None,
) -> str:
    """Return a new vCard 3.0 document for a contact."""
    contact = ParsedComponent(
        name="VCARD",
        properties=[
            ParsedProperty(name="VERSION", value="3.0"),
            _prop("UID", uid_factory()),
            _prop("FN", full_name),
        ],
    )
    if family_name or given_name:
        contact.properties.append(
            _prop("N", [family_name or "", given_name or "", "", "", ""])
        )
    if email:
        contact.properties.append(_prop("EMAIL", email, TYPE="INTERNET"))
    if phone:
        contact.properties.append(_prop("TEL", phone, TYPE="CELL"))
    for name, value in (
        ("ORG", organization),
        ("TITLE", title),
        ("NOTE", note),
        ("URL", url),
    ):
        if value:
            contact.properties.append(_prop(name, value))
    contact.properties.append(_prop("REV", dtstamp_factory()))
    return _encode(contact)


@dataclass
class _Entry:
    """A logical line of an existing document and its physical lines."""

    lines: list[str]
    prop: ParsedProperty | None = None
    depth: int = 0

    @property
    def name(self) -> str | None:
        return self.prop.name if self.prop else None


@dataclass
class _Target:
    begin: int
    end: int | None = None
    existing: dict[str, list[int]] = field(default_factory=dict)


def _entries(lines: list[str]) -> list[_Entry]:
    entries: list[_Entry] = []
    for line in lines:
        if entries and line[:1] in WSP:
            entries[-1].lines.append(line)
        else:
            entries.append(_Entry(lines=[line]))
    depth = 0
    for entry in entries:
        first, *rest = entry.lines
        entry.prop = parse_line(first + "".join(line[1:] for line in rest))
        if entry.name == ATTR_END:
            depth -= 1
        entry.depth = depth
        if entry.name == ATTR_BEGIN:
            depth += 1
    return entries


def _find_target(entries: list[_Entry], component: str | None) -> _Target:
    names = (component.upper(),) if component else ENTITY_COMPONENTS
    target: _Target | None = None
    for index, entry in enumerate(entries):
        if entry.prop is None:
            continue
        if target is None:
            if entry.name == ATTR_BEGIN and entry.prop.value.strip().upper() in names:
                target = _Target(begin=index)
            continue
        depth = entries[target.begin].depth + 1
        if entry.name == ATTR_END and entry.depth == depth - 1:
            target.end = index
            return target
        if entry.depth == depth and entry.name not in (ATTR_BEGIN, ATTR_END):
            target.existing.setdefault(entry.name or "", []).append(index)
    if target is None:
        raise EncodeError(f"Document has no {' or '.join(names)} component to update")
    name = entries[target.begin].prop.value  # type: ignore[union-attr]
    raise EncodeError(f"Component {name} is not terminated")


def _property_fields(
    fields: Mapping[str, Any], existing_n: str | None
) -> dict[str, Any]:
    """Map contact style keys to property names, merging name parts into N."""
    result: dict[str, Any] = {}
    for key, value in fields.items():
        if key in NAME_FIELDS:
            continue
        result[CONTACT_FIELDS.get(key, key).upper()] = value
    if any(key in fields for key in NAME_FIELDS):
        parts: list[str | list[str]] = [
            [unescape(item) for item in split_unescaped(part, ",")]
            for part in split_unescaped(existing_n or "", ";")
        ]
        parts.extend([""] * (5 - len(parts)))
        for index, key in enumerate(NAME_FIELDS):
            if key in fields:
                parts[index] = fields[key] or ""
        result["N"] = parts
    return result


def update_fields(
    data: str,
    fields: Mapping[str, Any],
    component: str | None = None,
) -> str:
    """Replace or add properties of the first entity component of a document.

    The entity is the first VEVENT, VTODO, VJOURNAL or VCARD unless a
    component name is given. Each field replaces all existing instances of
    the property with a single new one, or is added at the end of the
    component. The keys are property names, or the contact keys
    'full_name', 'family_name', 'given_name', 'email', 'phone',
    'organization', 'title', 'note' and 'url'. The line terminator of the
    document is kept.

    Raises EncodeError if there is no component to update or a value can't
    be encoded.
    """
    newline = CRLF if CRLF in data else "\n"
    lines = data.split(newline)
    trailing = lines[-1] == ""
    if trailing:
        lines.pop()
    entries = _entries(lines)
    target = _find_target(entries, component)

    existing_n = None
    if n_indexes := target.existing.get("N"):
        existing_n = entries[n_indexes[0]].prop.value  # type: ignore[union-attr]

    replacements: dict[int, list[str]] = {}
    removed: set[int] = set()
    added: list[str] = []
    for name, value in _property_fields(fields, existing_n).items():
        params: dict[str, Sequence[str]] = {}
        group: str | None = None
        indexes = target.existing.get(name, [])
        if indexes and (old := entries[indexes[0]].prop):
            group = old.group
            prop_type = property_type(name)
            if (
                old.params
                and prop_type is not None
                and prop_type.default_type == "TEXT"
            ):
                params = {
                    param.name: param.values
                    for param in old.params
                    if param.name not in _VALUE_PARAMS
                }
        new_lines = encode_contentline(name, value, params, group).split(CRLF)
        _LOGGER.debug("Updating property %s", name)
        if not indexes:
            added.extend(new_lines)
            continue
        replacements[indexes[0]] = new_lines
        removed.update(indexes[1:])

    result: list[str] = []
    for index, entry in enumerate(entries):
        if index == target.end:
            result.extend(added)
        if index in removed:
            continue
        result.extend(replacements.get(index, entry.lines))
    if trailing:
        result.append("")
    return newline.join(result)
