"""Tests for DURATION and UTC-OFFSET values."""

import datetime

import pytest

from vformat.decoder import decode_value
from vformat.parsing.property import ParsedProperty
from vformat.types.duration import DurationEncoder, parse_duration
from vformat.types.utc_offset import UtcOffsetEncoder
from vformat.values import DateTimeValue, DurationValue


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("-PT15M", datetime.timedelta(minutes=-15)),
        ("PT1H", datetime.timedelta(hours=1)),
        ("P1W", datetime.timedelta(weeks=1)),
        ("P1DT2H30M", datetime.timedelta(days=1, hours=2, minutes=30)),
        ("+P2D", datetime.timedelta(days=2)),
        ("PT0S", datetime.timedelta(0)),
    ],
)
def test_parse_duration(value: str, expected: datetime.timedelta) -> None:
    """Test parsing durations."""
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["P", "PT", "P1DT", "15M", "PT1.5H", "P1W2D"])
def test_invalid_duration(value: str) -> None:
    """Test values that are not durations."""
    with pytest.raises(ValueError):
        parse_duration(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime.timedelta(minutes=-15), "-PT15M"),
        (datetime.timedelta(weeks=1), "P1W"),
        (datetime.timedelta(days=1, hours=2), "P1DT2H"),
        (datetime.timedelta(days=8), "P8D"),
        (datetime.timedelta(seconds=90), "PT1M30S"),
        (datetime.timedelta(0), "PT0S"),
    ],
)
def test_encode_duration(value: datetime.timedelta, expected: str) -> None:
    """Test encoding durations."""
    assert DurationEncoder.__encode_property_value__(value) == expected


def test_trigger() -> None:
    """Test a TRIGGER is a duration, falling back to a date and time."""
    value = decode_value(ParsedProperty(name="TRIGGER", value="-PT15M"))
    assert value == DurationValue(datetime.timedelta(minutes=-15))
    value = decode_value(ParsedProperty(name="TRIGGER", value="20251015T090000Z"))
    assert isinstance(value, DateTimeValue)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("+0200", datetime.timedelta(hours=2)),
        ("-0500", datetime.timedelta(hours=-5)),
        ("+0530", datetime.timedelta(hours=5, minutes=30)),
        ("+013045", datetime.timedelta(hours=1, minutes=30, seconds=45)),
    ],
)
def test_utc_offset(value: str, expected: datetime.timedelta) -> None:
    """Test parsing and encoding UTC offsets."""
    prop = ParsedProperty(name="TZOFFSETTO", value=value)
    assert decode_value(prop) == DurationValue(expected)
    assert UtcOffsetEncoder.__encode_property_value__(expected) == value


def test_invalid_utc_offset() -> None:
    """Test an offset without a sign."""
    with pytest.raises(ValueError):
        decode_value(ParsedProperty(name="TZOFFSETTO", value="0200"))
