"""Tests for structured values such as N, ADR and ORG."""

from vformat.decoder import decode_value
from vformat.parsing.property import ParsedProperty
from vformat.types.structured import StructuredEncoder
from vformat.values import StructuredValue


def test_name() -> None:
    """Test decoding a full structured name."""
    value = decode_value(ParsedProperty(name="N", value="Doe;Jane;Quinn;Dr.;PhD"))
    assert value == StructuredValue(
        (("Doe",), ("Jane",), ("Quinn",), ("Dr.",), ("PhD",))
    )


def test_name_padded_to_arity() -> None:
    """Test missing trailing parts are filled in with empty values."""
    value = decode_value(ParsedProperty(name="N", value="Mustermann;Max"))
    assert value == StructuredValue((("Mustermann",), ("Max",), ("",), ("",), ("",)))
    assert isinstance(value, StructuredValue)
    assert value.part(2) == ""


def test_extra_parts_are_kept() -> None:
    """Test a value with more parts than expected is not truncated."""
    value = decode_value(ParsedProperty(name="N", value="a;b;c;d;e;f"))
    assert isinstance(value, StructuredValue)
    assert len(value.parts) == 6


def test_multiple_values_in_a_part() -> None:
    """Test a part holding a comma separated list of values."""
    value = decode_value(ParsedProperty(name="N", value="Doe;John;Paul,George;;"))
    assert isinstance(value, StructuredValue)
    assert value.parts[2] == ("Paul", "George")
    assert value.part(2) == "Paul George"


def test_address() -> None:
    """Test decoding an address."""
    value = decode_value(
        ParsedProperty(name="ADR", value=";;123 Main St;Springfield;IL;62701;USA")
    )
    assert isinstance(value, StructuredValue)
    assert len(value.parts) == 7
    assert value.part(2) == "123 Main St"
    assert value.part(6) == "USA"
    assert str(value) == "123 Main St, Springfield, IL, 62701, USA"


def test_escaped_separators() -> None:
    """Test escaped separators are part of the text."""
    value = decode_value(ParsedProperty(name="ORG", value="Acme\\, Inc.;R\\;D"))
    assert value == StructuredValue((("Acme, Inc.",), ("R;D",)))
    assert str(value) == "Acme, Inc., R;D"


def test_encode() -> None:
    """Test encoding structured values."""
    encode = StructuredEncoder.__encode_property_value__
    assert encode(["Doe", "Jane", "", "", ""]) == "Doe;Jane;;;"
    assert encode(["Doe", ["Paul", "George"]]) == "Doe;Paul,George"
    assert encode(["R;D", "a,b"]) == "R\\;D;a\\,b"
    assert encode("Acme, Inc.") == "Acme\\, Inc."
