"""Library for rendering decoded documents as Markdown reports.

The reports are meant to be read by people and language models alike. Each
entity gets a headline and a list of fields, and list reports end with the
raw url, etag and data of every object so a caller can use them for
updates:

```python
from vformat import report
from vformat.records import DavObject

result = report.format_event_list(
    [DavObject(url=url, etag=etag, data=ics)], calendar_name="Work"
)
print(result.text)
```

Reports are assembled as a list of fragments that is joined once.
"""

from __future__ import annotations

import json
import logging
import traceback
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .component import Component, Property
from .document import Document
from .records import Collection, DavObject, Report
from .types.cal_address import CalAddress
from .types.duration import DurationEncoder
from .values import (
    DateTimeValue,
    DurationValue,
    IntegerValue,
    RecurValue,
    StructuredValue,
    TypedValue,
    ZoneState,
)

__all__ = [
    "format_addressbook_list",
    "format_calendar_list",
    "format_contact",
    "format_contact_list",
    "format_datetime",
    "format_error",
    "format_event",
    "format_event_list",
    "format_success",
    "format_todo",
    "format_todo_list",
]

_LOGGER = logging.getLogger(__name__)

UNKNOWN_CALENDAR = "Unknown Calendar"
UNKNOWN_ADDRESS_BOOK = "Unknown Address Book"
UNTITLED_EVENT = "Untitled Event"
UNTITLED_TASK = "Untitled Task"
UNNAMED_CONTACT = "Unnamed Contact"
UNNAMED_CALENDAR = "Unnamed Calendar"
UNNAMED_ADDRESS_BOOK = "Unnamed Address Book"

NO_EVENTS = "No events found."
NO_TODOS = "No todos found."
NO_CALENDARS = "No calendars found."
NO_ADDRESS_BOOKS = "No address books found."
NO_CONTACTS_HINT = """

💡 **Next steps**:
- Try broader search: use addressbook_query with partial name
- List all contacts: use list_contacts to see available names
- Create new contact: use create_contact if contact doesn't exist yet

📝 **Available address books**: Use list_addressbooks to see all address books"""
CONTACT_LIST_HINT = """
💡 **What you can do next**:
- Update contact: use update_contact with URL and ETAG from above
- Delete contact: use delete_contact with URL and ETAG from above
- Get full details: Contact data already complete above"""

STATUS_EMOJI = {
    "NEEDS-ACTION": "📋",
    "IN-PROCESS": "🔄",
    "COMPLETED": "✅",
    "CANCELLED": "❌",
}
DEFAULT_STATUS = "NEEDS-ACTION"
CALENDAR_FIELDS = {"display_name", "url", "components", "color", "description"}
ADDRESS_BOOK_FIELDS = {"display_name", "url", "description"}

# Parts of the N and ADR structured values
N_FAMILY, N_GIVEN, N_ADDITIONAL, N_PREFIX, N_SUFFIX = range(5)
ADR_STREET, ADR_LOCALITY, ADR_REGION, ADR_POSTAL_CODE, ADR_COUNTRY = range(2, 7)


def format_datetime(value: TypedValue | None) -> str:
    """Format a date or date and time for display.

    Values in UTC or in a timezone defined by the document show the zone,
    a TZID that could not be resolved is shown in parentheses.
    """
    if value is None:
        return ""
    if not isinstance(value, DateTimeValue):
        return str(value)
    result = f"{value.value:%B} {value.value.day}, {value.value.year}"
    if value.is_date:
        return result
    result = f"{result}, {value.value:%I:%M %p}"
    if value.zone == ZoneState.UTC:
        return f"{result} UTC"
    if value.zone == ZoneState.RESOLVED:
        return f"{result} {value.value.tzname() or value.tzid}"
    if value.zone == ZoneState.UNRESOLVED:
        return f"{result} ({value.tzid})"
    return result


def _format_trigger(value: TypedValue | None) -> str:
    if value is None:
        return "Unknown trigger"
    if isinstance(value, DurationValue):
        return DurationEncoder.__encode_property_value__(value.duration)
    return format_datetime(value)


def _type_tags(prop: Property) -> str:
    if tags := prop.param_values("TYPE"):
        return f" ({', '.join(tags)})"
    return ""


def _multi(
    fragments: list[str],
    label: str,
    plural_label: str,
    noun: str,
    items: Sequence[str],
) -> None:
    """Add a field with a singular label, or a counted list for many items."""
    if not items:
        return
    if len(items) == 1:
        fragments.append(f"- **{label}**: {items[0]}\n")
        return
    fragments.append(f"- **{plural_label}**: {len(items)} {noun}\n")
    fragments.extend(f"  - {item}\n" for item in items)


def _parse_warnings(fragments: list[str], document: Document) -> None:
    if errors := document.structural_errors:
        fragments.append(
            f"- **Parse warnings**: {'; '.join(str(error) for error in errors)}\n"
        )


def _entity(document: Document, name: str) -> Component:
    return document.find(name) or Component(name=name)


def _raw_data(payload: Any) -> str:
    return "".join(
        [
            "---\n<details>\n<summary>Raw Data (JSON)</summary>\n\n```json\n",
            json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            "\n```\n</details>",
        ]
    )


def _dav_raw_data(objects: Sequence[DavObject]) -> str:
    return _raw_data([obj.model_dump() for obj in objects])


def _numbered(
    objects: Sequence[DavObject],
    formatter: Callable[[DavObject, str], str],
    label: str,
) -> list[str]:
    fragments = []
    for index, obj in enumerate(objects, start=1):
        fragment = formatter(obj, label)
        fragments.append(f"### {index}. {fragment.removeprefix('## ')}\n")
    return fragments


def format_event(event: DavObject, calendar_name: str = UNKNOWN_CALENDAR) -> str:
    """Format a single calendar event to Markdown."""
    document = Document.from_text(event.data)
    vevent = _entity(document, "VEVENT")
    fragments = [f"## {vevent.text('SUMMARY') or UNTITLED_EVENT}\n\n"]

    start = format_datetime(prop.value if (prop := vevent.get("DTSTART")) else None)
    end = format_datetime(prop.value if (prop := vevent.get("DTEND")) else None)
    fragments.append(f"- **When**: {start}")
    if end and end != start:
        fragments.append(f" to {end}")
    fragments.append("\n")

    if location := vevent.text("LOCATION"):
        fragments.append(f"- **Where**: {location}\n")
    if description := vevent.text("DESCRIPTION"):
        fragments.append(f"- **Description**: {description}\n")
    if (rrule := vevent.get("RRULE")) and isinstance(rrule.value, RecurValue):
        fragments.append(f"- **Recurring**: {rrule.value.rule}\n")
    if organizer := vevent.get("ORGANIZER"):
        fragments.append(
            f"- **Organizer**: {CalAddress.from_property(organizer).email}\n"
        )

    attendees = []
    for prop in vevent.get_all("ATTENDEE"):
        attendee = CalAddress.from_property(prop)
        status = f" ({attendee.status})" if attendee.status else ""
        attendees.append(f"{attendee.display_name}{status}")
    _multi(fragments, "Attendee", "Attendees", "person(s)", attendees)

    reminders = []
    for valarm in vevent.subcomponents("VALARM"):
        trigger = prop.value if (prop := valarm.get("TRIGGER")) else None
        reminders.append(
            f"{valarm.text('ACTION', 'Unknown action')}: {_format_trigger(trigger)}"
        )
    _multi(fragments, "Reminder", "Reminders", "alarm(s)", reminders)

    _parse_warnings(fragments, document)
    fragments.append(f"- **Calendar**: {calendar_name}\n")
    fragments.append(f"- **URL**: {event.url}\n")
    return "".join(fragments)


def format_event_list(
    events: Sequence[DavObject], calendar_name: str = UNKNOWN_CALENDAR
) -> Report:
    """Format a list of calendar events to Markdown."""
    if not events:
        return Report.from_text(NO_EVENTS)
    fragments = [f"Found events: **{len(events)}**\n\n"]
    fragments.extend(_numbered(events, format_event, calendar_name))
    fragments.append(_dav_raw_data(events))
    return Report.from_text("".join(fragments))


def _format_priority(priority: int) -> str:
    """Format a priority where 1 is the highest and 9 the lowest."""
    if 1 <= priority <= 3:
        return f"🔴 High ({priority})"
    if 4 <= priority <= 6:
        return f"🟡 Medium ({priority})"
    return f"🟢 Low ({priority})"


def _integer(component: Component, name: str) -> int:
    if (prop := component.get(name)) and isinstance(prop.value, IntegerValue):
        return prop.value.value
    return 0


def format_todo(todo: DavObject, calendar_name: str = UNKNOWN_CALENDAR) -> str:
    """Format a single to-do to Markdown."""
    document = Document.from_text(todo.data)
    vtodo = _entity(document, "VTODO")
    status = vtodo.text("STATUS") or DEFAULT_STATUS
    emoji = STATUS_EMOJI.get(status.upper(), STATUS_EMOJI[DEFAULT_STATUS])
    fragments = [
        f"## {emoji} {vtodo.text('SUMMARY') or UNTITLED_TASK}\n\n",
        f"- **Status**: {status}\n",
    ]
    if due := vtodo.get("DUE"):
        fragments.append(f"- **Due**: {format_datetime(due.value)}\n")
    if priority := _integer(vtodo, "PRIORITY"):
        fragments.append(f"- **Priority**: {_format_priority(priority)}\n")
    if (percent := _integer(vtodo, "PERCENT-COMPLETE")) > 0:
        fragments.append(f"- **Progress**: {percent}%\n")
    if description := vtodo.text("DESCRIPTION"):
        fragments.append(f"- **Description**: {description}\n")
    if start := vtodo.get("DTSTART"):
        fragments.append(f"- **Start**: {format_datetime(start.value)}\n")
    if completed := vtodo.get("COMPLETED"):
        fragments.append(f"- **Completed**: {format_datetime(completed.value)}\n")
    _parse_warnings(fragments, document)
    fragments.append(f"- **Calendar**: {calendar_name}\n")
    fragments.append(f"- **URL**: {todo.url}\n")
    fragments.append(f"- **ETag**: {todo.etag} *(required for updates)*\n")
    return "".join(fragments)


def format_todo_list(
    todos: Sequence[DavObject], calendar_name: str = UNKNOWN_CALENDAR
) -> Report:
    """Format a list of to-dos to Markdown."""
    if not todos:
        return Report.from_text(NO_TODOS)
    fragments = [f"Found todos: **{len(todos)}**\n\n"]
    fragments.extend(_numbered(todos, format_todo, calendar_name))
    fragments.append(_dav_raw_data(todos))
    return Report.from_text("".join(fragments))


def _structured(prop: Property) -> StructuredValue:
    if isinstance(prop.value, StructuredValue):
        return prop.value
    # A value kept as raw text is shown as a single part
    return StructuredValue(((str(prop.value),),))


def _full_name(vcard: Component) -> str | None:
    if not (prop := vcard.get("N")):
        return None
    name = _structured(prop)
    if not name.part(N_GIVEN) and not name.part(N_FAMILY):
        return None
    parts = (
        name.part(index)
        for index in (N_PREFIX, N_GIVEN, N_ADDITIONAL, N_FAMILY, N_SUFFIX)
    )
    return " ".join(part for part in parts if part)


def _address(prop: Property) -> str:
    adr = _structured(prop)
    parts = (
        adr.part(index)
        for index in (
            ADR_STREET,
            ADR_LOCALITY,
            ADR_REGION,
            ADR_POSTAL_CODE,
            ADR_COUNTRY,
        )
    )
    return ", ".join(part for part in parts if part)


def format_contact(
    contact: DavObject, address_book_name: str = UNKNOWN_ADDRESS_BOOK
) -> str:
    """Format a single contact to Markdown."""
    document = Document.from_text(contact.data)
    vcard = _entity(document, "VCARD")
    fragments = [f"## {vcard.text('FN') or UNNAMED_CONTACT}\n\n"]

    if full_name := _full_name(vcard):
        fragments.append(f"- **Full Name**: {full_name}\n")
    if org := vcard.get("ORG"):
        if organization := str(_structured(org)):
            fragments.append(f"- **Organization**: {organization}\n")
    if title := vcard.text("TITLE"):
        fragments.append(f"- **Title**: {title}\n")

    _multi(
        fragments,
        "Email",
        "Emails",
        "email(s)",
        [f"{prop.text}{_type_tags(prop)}" for prop in vcard.get_all("EMAIL")],
    )
    _multi(
        fragments,
        "Phone",
        "Phones",
        "phone(s)",
        [f"{prop.text}{_type_tags(prop)}" for prop in vcard.get_all("TEL")],
    )
    _multi(
        fragments,
        "Address",
        "Addresses",
        "address(es)",
        [
            f"{address}{_type_tags(prop)}"
            for prop in vcard.get_all("ADR")
            if (address := _address(prop))
        ],
    )

    if note := vcard.text("NOTE"):
        fragments.append(f"- **Note**: {note}\n")
    _parse_warnings(fragments, document)
    fragments.append(f"- **Address Book**: {address_book_name}\n")
    fragments.append(f"- **URL**: {contact.url}\n")
    return "".join(fragments)


def format_contact_list(
    contacts: Sequence[DavObject], address_book_name: str = UNKNOWN_ADDRESS_BOOK
) -> Report:
    """Format a list of contacts to Markdown."""
    if not contacts:
        return Report.from_text(
            f"No contacts found in {address_book_name}.{NO_CONTACTS_HINT}"
        )
    fragments = [f"Found contacts: **{len(contacts)}**\n\n"]
    fragments.extend(_numbered(contacts, format_contact, address_book_name))
    fragments.append(_dav_raw_data(contacts))
    fragments.append(CONTACT_LIST_HINT)
    return Report.from_text("".join(fragments))


def format_calendar_list(calendars: Sequence[Collection]) -> Report:
    """Format a list of calendars to Markdown."""
    if not calendars:
        return Report.from_text(NO_CALENDARS)
    fragments = [f"Available calendars: **{len(calendars)}**\n\n"]
    for index, calendar in enumerate(calendars, start=1):
        fragments.append(
            f"### {index}. {calendar.display_name or UNNAMED_CALENDAR}\n\n"
        )
        if calendar.description:
            fragments.append(f"- **Description**: {calendar.description}\n")
        if calendar.components:
            fragments.append(f"- **Components**: {', '.join(calendar.components)}\n")
        if calendar.color:
            fragments.append(f"- **Color**: {calendar.color}\n")
        fragments.append(f"- **URL**: {calendar.url}\n\n")
    fragments.append(
        _raw_data(
            [
                calendar.model_dump(by_alias=True, include=CALENDAR_FIELDS)
                for calendar in calendars
            ]
        )
    )
    return Report.from_text("".join(fragments))


def format_addressbook_list(address_books: Sequence[Collection]) -> Report:
    """Format a list of address books to Markdown."""
    if not address_books:
        return Report.from_text(NO_ADDRESS_BOOKS)
    fragments = [f"Available address books: **{len(address_books)}**\n\n"]
    for index, address_book in enumerate(address_books, start=1):
        fragments.append(
            f"### {index}. {address_book.display_name or UNNAMED_ADDRESS_BOOK}\n\n"
        )
        if address_book.description:
            fragments.append(f"- **Description**: {address_book.description}\n")
        fragments.append(f"- **URL**: {address_book.url}\n\n")
    fragments.append(
        _raw_data(
            [
                address_book.model_dump(by_alias=True, include=ADDRESS_BOOK_FIELDS)
                for address_book in address_books
            ]
        )
    )
    return Report.from_text("".join(fragments))


def format_success(operation: str, details: Mapping[str, Any] | None = None) -> Report:
    """Format the result of a create, update or delete operation."""
    details = dict(details or {})
    fragments = [f"✅ **{operation} successful**\n\n"]
    if url := details.get("url"):
        fragments.append(f"- **URL**: {url}\n")
    if etag := details.get("etag"):
        fragments.append(f"- **ETag**: {etag}\n")
    if message := details.get("message"):
        fragments.append(f"- **Message**: {message}\n")
    fragments.append("\n")
    fragments.append(_raw_data({"success": True, **details}))
    return Report.from_text("".join(fragments))


_ERROR_HINTS: list[tuple[tuple[str, ...], str, tuple[str, ...]]] = [
    (
        ("not found",),
        "The specified resource was not found.",
        ("Check the URL", "Ensure the resource exists", "Refresh the resource list"),
    ),
    (
        ("auth", "401"),
        "Authentication failed.",
        (
            "Check username and password",
            "Ensure the server is reachable",
            "Verify server settings in .env file",
        ),
    ),
    (
        ("etag", "412"),
        "The resource was modified in the meantime.",
        ("Reload the current version of the resource", "Use the current ETag"),
    ),
]


def format_error(error: BaseException | str, context: str = "") -> Report:
    """Format an error with actionable hints where the cause is recognized."""
    message = str(error)
    fragments = [f"❌ **Error{f' in {context}' if context else ''}**\n\n"]
    for keywords, summary, solutions in _ERROR_HINTS:
        if any(keyword in message for keyword in keywords):
            fragments.append(f"{summary}\n\n**Possible solutions:**\n")
            fragments.extend(f"- {solution}\n" for solution in solutions)
            break
    else:
        fragments.append(f"{message}\n")

    details = message
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        details = "".join(traceback.format_exception(error)).rstrip()
    fragments.append(
        "\n---\n<details>\n<summary>Technical Details</summary>\n\n"
        f"```\n{details}\n```\n</details>"
    )
    _LOGGER.debug("Formatted error for %s: %s", context, message)
    return Report.from_text("".join(fragments))
