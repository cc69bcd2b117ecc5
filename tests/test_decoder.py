"""Tests for decoding property values as their declared types."""

import datetime

import pytest

from vformat.decoder import decode_params, decode_property, decode_value
from vformat.diagnostics import DiagnosticKind
from vformat.parsing.property import ParsedProperty, ParsedPropertyParameter
from vformat.values import (
    DateTimeValue,
    DurationValue,
    ListValue,
    TextValue,
    ValueKind,
    ZoneState,
)


def test_decode_params() -> None:
    """Test converting parameters into a mapping."""
    assert decode_params(None) == {}
    assert decode_params(
        [
            ParsedPropertyParameter(name="cn", values=["Doe, John"]),
            ParsedPropertyParameter(name="TYPE", values=["WORK", "WORK"]),
            ParsedPropertyParameter(name="type", values=["pref"]),
            ParsedPropertyParameter(name="PARTSTAT", values=["TENTATIVE"]),
            ParsedPropertyParameter(name="PARTSTAT", values=["ACCEPTED"]),
        ]
    ) == {
        "CN": "Doe, John",
        "TYPE": ("WORK", "pref"),
        "PARTSTAT": "ACCEPTED",
    }


@pytest.mark.parametrize(
    ("prop", "kind"),
    [
        (ParsedProperty(name="SUMMARY", value="20251015T100000Z"), ValueKind.TEXT),
        (ParsedProperty(name="DTSTART", value="20251015T100000Z"), ValueKind.DATE_TIME),
        (ParsedProperty(name="TRIGGER", value="-PT15M"), ValueKind.DURATION),
        (
            ParsedProperty(name="TRIGGER", value="20251015T100000Z"),
            ValueKind.DATE_TIME,
        ),
        (ParsedProperty(name="PRIORITY", value="1"), ValueKind.INTEGER),
        (ParsedProperty(name="EXDATE", value="20251015T100000Z"), ValueKind.LIST),
        (ParsedProperty(name="N", value="Doe;Jane"), ValueKind.STRUCTURED),
        (ParsedProperty(name="RRULE", value="FREQ=DAILY"), ValueKind.RECUR),
        (ParsedProperty(name="X-PRIORITY", value="1"), ValueKind.TEXT),
    ],
)
def test_kind_follows_declared_type(prop: ParsedProperty, kind: ValueKind) -> None:
    """Test the value type comes from the property, not the look of the text."""
    assert decode_value(prop).kind == kind


def test_value_parameter() -> None:
    """Test a VALUE parameter selects a registered value type."""
    prop = ParsedProperty(
        name="DTSTART",
        value="20251015",
        params=[ParsedPropertyParameter(name="VALUE", values=["DATE"])],
    )
    assert decode_value(prop) == DateTimeValue(datetime.date(2025, 10, 15))

    prop = ParsedProperty(
        name="TRIGGER",
        value="-PT15M",
        params=[ParsedPropertyParameter(name="VALUE", values=["DATE-TIME"])],
    )
    with pytest.raises(ValueError):
        decode_value(prop)


def test_unsupported_value_parameter() -> None:
    """Test an unknown VALUE parameter falls back to the declared type."""
    prop = ParsedProperty(
        name="TRIGGER",
        value="-PT15M",
        params=[ParsedPropertyParameter(name="VALUE", values=["URI"])],
    )
    assert decode_value(prop) == DurationValue(datetime.timedelta(minutes=-15))


def test_decode_property() -> None:
    """Test decoding a property keeps its parameters and group."""
    prop, diagnostics = decode_property(
        ParsedProperty(
            name="EMAIL",
            value="jane@example.com",
            params=[ParsedPropertyParameter(name="TYPE", values=["WORK"])],
            group="item1",
        )
    )
    assert diagnostics == []
    assert prop.name == "EMAIL"
    assert prop.value == TextValue("jane@example.com")
    assert prop.params == {"TYPE": "WORK"}
    assert prop.group == "item1"


def test_decode_property_fallback() -> None:
    """Test a value that does not fit its type is kept as the raw text."""
    prop, diagnostics = decode_property(
        ParsedProperty(name="EXDATE", value="20251015T100000Z,tomorrow\\,maybe")
    )
    assert prop.value == TextValue("20251015T100000Z,tomorrow\\,maybe", fallback=True)
    assert len(diagnostics) == 1
    assert diagnostics[0].kind == DiagnosticKind.INVALID_VALUE
    assert not diagnostics[0].structural
    assert "EXDATE" in diagnostics[0].message


def test_decode_property_unresolved_timezone() -> None:
    """Test each value in an undefined timezone is reported."""
    prop, diagnostics = decode_property(
        ParsedProperty(
            name="EXDATE",
            value="20251017T100000,20251020T100000",
            params=[ParsedPropertyParameter(name="TZID", values=["Mars/Olympus"])],
        )
    )
    assert isinstance(prop.value, ListValue)
    assert [item.zone for item in prop.value.items] == [  # type: ignore[union-attr]
        ZoneState.UNRESOLVED,
        ZoneState.UNRESOLVED,
    ]
    assert [diag.kind for diag in diagnostics] == [
        DiagnosticKind.UNRESOLVED_TZID,
        DiagnosticKind.UNRESOLVED_TZID,
    ]
    assert "Mars/Olympus" in diagnostics[0].message


def test_decode_with_timezones() -> None:
    """Test a TZID is resolved with the given timezones."""
    timezone = datetime.timezone(datetime.timedelta(hours=-5), "EST")
    prop, diagnostics = decode_property(
        ParsedProperty(
            name="DTSTART",
            value="20251015T100000",
            params=[ParsedPropertyParameter(name="TZID", values=["America/New_York"])],
        ),
        {"America/New_York": timezone},
    )
    assert diagnostics == []
    assert prop.value == DateTimeValue(
        datetime.datetime(2025, 10, 15, 10, 0, tzinfo=timezone),
        zone=ZoneState.RESOLVED,
        tzid="America/New_York",
    )
