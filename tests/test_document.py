"""Tests for decoding documents into a typed component tree."""

import dataclasses
import datetime
import pathlib

import pytest

from vformat import settings
from vformat.diagnostics import DiagnosticKind
from vformat.document import Document
from vformat.exceptions import ParseError
from vformat.values import (
    DateTimeValue,
    IntegerValue,
    ListValue,
    RecurValue,
    StructuredValue,
    TextValue,
    ZoneState,
)

TESTDATA_PATH = pathlib.Path(__file__).parent / "parsing/testdata/valid"
TESTDATA_FILES = sorted(TESTDATA_PATH.glob("*.[iv]*"))
TESTDATA_IDS = [x.stem for x in TESTDATA_FILES]


def _event(*lines: str) -> str:
    return "\r\n".join(
        ["BEGIN:VCALENDAR", "VERSION:2.0", "BEGIN:VEVENT", *lines, "END:VEVENT"]
        + ["END:VCALENDAR", ""]
    )


@pytest.mark.parametrize("filename", TESTDATA_FILES, ids=TESTDATA_IDS)
def test_decode_valid_files(filename: pathlib.Path) -> None:
    """Test that valid documents decode without any diagnostics."""
    document = Document.from_text(filename.read_text())
    assert document.diagnostics == ()
    assert not document.has_errors
    for component in document.walk():
        assert not component.is_text_fallback


def test_escaped_summary() -> None:
    """Test escaped commas in a summary are decoded."""
    document = Document.from_text(
        _event("SUMMARY:Meeting: Q4 Strategy\\, Budget & Planning")
    )
    event = document.find("VEVENT")
    assert event
    assert event.get("SUMMARY").value == TextValue(  # type: ignore[union-attr]
        "Meeting: Q4 Strategy, Budget & Planning"
    )
    assert event.text("SUMMARY") == "Meeting: Q4 Strategy, Budget & Planning"


def test_folded_description() -> None:
    """Test a description folded over several lines is one value."""
    document = Document.from_text(
        _event(
            "DESCRIPTION:The quarterly planning meeting will cover the budget",
            "  for the next year\\, hiring plans and the product roadmap for t",
            " he launch.\\nPlease bring the numbers from last quarter so we can com",
            " pare.",
        )
    )
    event = document.find("VEVENT")
    assert event
    assert event.text("DESCRIPTION") == (
        "The quarterly planning meeting will cover the budget for the next "
        "year, hiring plans and the product roadmap for the launch.\n"
        "Please bring the numbers from last quarter so we can compare."
    )


def test_utc_and_unresolved_timezones() -> None:
    """Test a UTC instant and a TZID with no matching VTIMEZONE."""
    document = Document.from_text(
        _event(
            "DTSTART:20251015T100000Z",
            "DTEND;TZID=Europe/Berlin:20251015T100000",
        )
    )
    event = document.find("VEVENT")
    assert event
    assert event.get("DTSTART").value == DateTimeValue(  # type: ignore[union-attr]
        datetime.datetime(2025, 10, 15, 10, tzinfo=datetime.timezone.utc),
        zone=ZoneState.UTC,
    )
    dtend = event.get("DTEND").value  # type: ignore[union-attr]
    assert dtend == DateTimeValue(
        datetime.datetime(2025, 10, 15, 10),
        zone=ZoneState.UNRESOLVED,
        tzid="Europe/Berlin",
    )
    assert [diag.kind for diag in document.diagnostics] == [
        DiagnosticKind.UNRESOLVED_TZID
    ]
    assert not document.has_errors


def test_resolved_timezone() -> None:
    """Test a TZID is resolved with the VTIMEZONE in the same document."""
    document = Document.from_text(
        (TESTDATA_PATH / "recurring_vtimezone.ics").read_text()
    )
    event = document.find("VEVENT")
    assert event
    dtstart = event.get("DTSTART").value  # type: ignore[union-attr]
    assert isinstance(dtstart, DateTimeValue)
    assert dtstart.zone == ZoneState.RESOLVED
    assert dtstart.tzid == "Europe/Berlin"
    assert dtstart.value == datetime.datetime(
        2025, 10, 15, 8, tzinfo=datetime.timezone.utc
    )
    assert event.get("RRULE").value == RecurValue(  # type: ignore[union-attr]
        "FREQ=WEEKLY;BYDAY=MO,WE,FR"
    )
    exdate = event.get("EXDATE").value  # type: ignore[union-attr]
    assert isinstance(exdate, ListValue)
    assert [item.zone for item in exdate.items] == [  # type: ignore[union-attr]
        ZoneState.RESOLVED,
        ZoneState.RESOLVED,
    ]


def test_invalid_value_falls_back_to_text() -> None:
    """Test a value that does not fit its type is kept as raw text."""
    document = Document.from_text(
        _event("DTSTART:next tuesday", "PRIORITY:99", "SUMMARY:Still here")
    )
    event = document.find("VEVENT")
    assert event
    assert event.get("DTSTART").value == TextValue(  # type: ignore[union-attr]
        "next tuesday", fallback=True
    )
    assert event.get("PRIORITY").value == IntegerValue(99)  # type: ignore[union-attr]
    assert event.text("SUMMARY") == "Still here"
    assert event.is_text_fallback
    assert [diag.kind for diag in document.diagnostics] == [
        DiagnosticKind.INVALID_VALUE
    ]
    assert not document.has_errors


def test_contact() -> None:
    """Test decoding a vCard."""
    document = Document.from_text((TESTDATA_PATH / "contact_v3.vcf").read_text())
    vcard = document.find("vcard")
    assert vcard
    assert vcard.text("FN") == "Dr. Jane Q. Doe"
    name = vcard.get("N").value  # type: ignore[union-attr]
    assert isinstance(name, StructuredValue)
    assert name.part(1) == "Jane"
    emails = vcard.get_all("EMAIL")
    assert [email.text for email in emails] == [
        "jane@acme.example",
        "jane@home.example",
    ]
    assert emails[0].group == "item1"
    assert emails[0].param_values("TYPE") == ("INTERNET", "WORK")
    assert emails[0].param("type") == "INTERNET,WORK"
    assert emails[1].param("TYPE") == "HOME"
    assert vcard.text("NOTE") == "Met at the conference\nFollow up in May"
    assert vcard.get("BDAY").value == DateTimeValue(  # type: ignore[union-attr]
        datetime.date(1985, 4, 12)
    )


def test_type_parameters_accumulate() -> None:
    """Test repeated TYPE parameters are merged and other parameters replaced."""
    document = Document.from_text(
        "BEGIN:VCARD\n"
        "EMAIL;TYPE=WORK;TYPE=PREF,WORK;X-LABEL=a;X-LABEL=b:jane@example.com\n"
        "END:VCARD\n"
    )
    vcard = document.find("VCARD")
    assert vcard
    email = vcard.get("EMAIL")
    assert email
    assert email.params["TYPE"] == ("WORK", "PREF")
    assert email.params["X-LABEL"] == "b"


def test_query_helpers() -> None:
    """Test finding components and properties."""
    document = Document.from_text(
        (TESTDATA_PATH / "event_with_alarm.ics").read_text()
    )
    [calendar] = document.components
    assert calendar.name == "VCALENDAR"
    assert calendar.first("VEVENT") is document.find("VEVENT")
    assert calendar.first("VTODO") is None
    assert [c.name for c in document.walk()] == ["VCALENDAR", "VEVENT", "VALARM"]
    assert len(document.find_all("VALARM")) == 1
    event = document.find("VEVENT")
    assert event
    assert len(event.get_all("ATTENDEE")) == 2
    assert event.get("X-MISSING") is None
    assert event.get_all("X-MISSING") == ()
    assert event.text("X-MISSING", "default") == "default"
    assert event.subcomponents("VALARM")[0].text("ACTION") == "DISPLAY"
    assert event.get("CATEGORIES").value == ListValue(  # type: ignore[union-attr]
        (TextValue("Work"), TextValue("Planning"))
    )


def test_document_is_immutable() -> None:
    """Test the decoded tree can't be modified."""
    document = Document.from_text(_event("SUMMARY:Frozen"))
    event = document.find("VEVENT")
    assert event
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.name = "VTODO"  # type: ignore[misc]
    with pytest.raises(TypeError):
        event.properties["SUMMARY"] = ()  # type: ignore[index]
    with pytest.raises(TypeError):
        event.get("SUMMARY").params["X"] = "y"  # type: ignore[index, union-attr]
    with pytest.raises(dataclasses.FrozenInstanceError):
        document.diagnostics = ()  # type: ignore[misc]


@pytest.mark.parametrize(
    ("content", "kinds"),
    [
        ("", [DiagnosticKind.EMPTY_DOCUMENT]),
        (
            "BEGIN:VCALENDAR\nBEGIN:VEVENT\nEND:VCALENDAR\n",
            [DiagnosticKind.MISMATCHED_END, DiagnosticKind.UNTERMINATED],
        ),
        ("BEGIN:VCARD\nFN:A\nEND:VCARD\nEND:VCARD\n", [DiagnosticKind.UNEXPECTED_END]),
    ],
)
def test_structural_errors(content: str, kinds: list[DiagnosticKind]) -> None:
    """Test structural problems are recorded on the document."""
    document = Document.from_text(content)
    assert [diag.kind for diag in document.structural_errors] == kinds
    assert document.has_errors


def test_strict_mode() -> None:
    """Test strict mode raises for structural problems."""
    content = "BEGIN:VCALENDAR\nBEGIN:VEVENT\nSUMMARY:A\n"
    with settings.strict_mode():
        with pytest.raises(ParseError) as exc_info:
            Document.from_text(content)
    assert exc_info.value.detailed_error
    assert "Missing END:VEVENT" in exc_info.value.detailed_error

    # Problems with individual values are still tolerated
    with settings.strict_mode():
        document = Document.from_text(_event("DTSTART:bogus"))
    assert [diag.kind for diag in document.diagnostics] == [
        DiagnosticKind.INVALID_VALUE
    ]

    assert Document.from_text(content).has_errors


def test_from_bytes() -> None:
    """Test decoding UTF-8 bytes."""
    document = Document.from_bytes(
        b"\xef\xbb\xbfBEGIN:VCARD\r\nFN:J\xc3\xbcrgen\r\nEND:VCARD\r\n"
    )
    vcard = document.find("VCARD")
    assert vcard
    assert vcard.text("FN") == "Jürgen"

    with pytest.raises(ParseError):
        Document.from_bytes(b"BEGIN:VCARD\r\nFN:\xff\xfe\r\nEND:VCARD\r\n")


@pytest.mark.parametrize(
    "content",
    [
        "BEGIN:A\nBEGIN:B\nBEGIN:C\nEND:A\nEND:B\n",
        "END:X\nEND:Y\nBEGIN:Z\n",
        "BEGIN:A\nEND:B\nEND:C\nBEGIN:D\nBEGIN:E\nEND:E\n",
        "garbage\n\n  \nBEGIN\nBEGIN:\nEND:\n",
    ],
)
def test_always_a_tree(content: str) -> None:
    """Test any input produces a tree where every component is closed."""
    document = Document.from_text(content)
    names = [component.name for component in document.walk()]
    assert len(names) == content.count("BEGIN:") - content.count("BEGIN:\n")
