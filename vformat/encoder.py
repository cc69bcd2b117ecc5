"""Library for encoding user supplied values as property text.

Values are escaped exactly once. `escape_text` returns an `EscapedText`, a
str subclass that marks the value as already escaped, and passing one back
in raises `EncodeError`:

```python
from vformat.encoder import encode_contentline, escape_text

escape_text("Budget, Q4; draft")
encode_contentline("SUMMARY", "Budget, Q4; draft")
```

Escaped fragments are never folded. Complete content lines returned by
`encode_contentline` are folded at 75 octets unless folding was turned off
with `vformat.settings.output_folding(False)`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from .exceptions import EncodeError
from .parsing.component import fold_contentline
from .parsing.const import CRLF
from .parsing.property import ParsedProperty, ParsedPropertyParameter
from .properties import property_type
from .types import DATA_TYPE
from .types.text import escape

__all__ = [
    "EscapedText",
    "encode_contentline",
    "encode_field",
    "escape_text",
]

_LOGGER = logging.getLogger(__name__)

_RE_NAME = re.compile("[A-Za-z0-9-]+")


class EscapedText(str):
    """Text that has already been escaped for use as a property value."""


def _check_not_escaped(value: Any) -> None:
    if isinstance(value, EscapedText):
        raise EncodeError(f"Value is already escaped: {value!r}")


def _check_items_not_escaped(value: Any) -> None:
    """Reject escaped text in a value or anywhere in a sequence of values."""
    if isinstance(value, str):
        _check_not_escaped(value)
    elif isinstance(value, Sequence):
        for item in value:
            _check_items_not_escaped(item)


def escape_text(value: str | None) -> EscapedText:
    """Escape text for use as a TEXT property value.

    Backslash, semicolon, comma and newline are escaped and every other
    character is kept as it is. None and the empty string both become an
    empty value.
    """
    if value is None:
        return EscapedText("")
    _check_not_escaped(value)
    return EscapedText(escape(str(value)))


def _encode_single(name: str, value_types: Sequence[str], value: Any) -> str:
    errors = []
    for value_type in value_types:
        if not (encoder := DATA_TYPE.encode_property_value.get(value_type)):
            errors.append(f"no encoder for {value_type}")
            continue
        try:
            return encoder(value)
        except (ValueError, TypeError) as err:
            _LOGGER.debug("Encoding '%s' as %s failed: %s", name, value_type, err)
            errors.append(str(err))
    raise EncodeError(
        f"Unable to encode property '{name}': {value!r}, errors: {errors}"
    )


def encode_field(name: str, value: Any) -> EscapedText:
    """Encode a value as the text of the named property.

    The declared type of the property decides how the value is encoded:
    text is escaped, dates and times are converted to the iCalendar form
    (values with an offset are converted to UTC) and integers are checked.
    List properties accept a sequence of items and structured properties
    such as N and ADR accept a sequence of parts.

    Raises EncodeError for a property that is not known, for a value that
    was already escaped, or for a value that does not fit the type.
    """
    if (prop_type := property_type(name)) is None:
        raise EncodeError(f"Unknown property '{name}', unable to determine its type")
    if value is None:
        return EscapedText("")
    _check_items_not_escaped(value)
    if prop_type.multi:
        items = [value] if isinstance(value, str) else list(value)
        return EscapedText(
            ",".join(
                _encode_single(name, prop_type.value_types, item) for item in items
            )
        )
    return EscapedText(_encode_single(name, prop_type.value_types, value))


def _encode_params(
    params: Mapping[str, str | Sequence[str]],
) -> list[ParsedPropertyParameter]:
    result = []
    for param_name, param_value in params.items():
        if not _RE_NAME.fullmatch(param_name):
            raise EncodeError(f"Invalid parameter name '{param_name}'")
        values = [param_value] if isinstance(param_value, str) else list(param_value)
        for item in values:
            if '"' in item or "\n" in item or "\r" in item:
                raise EncodeError(
                    f"Parameter '{param_name}' value can't be encoded: {item!r}"
                )
        result.append(ParsedPropertyParameter(name=param_name.upper(), values=values))
    return result


def encode_contentline(
    name: str,
    value: Any,
    params: Mapping[str, str | Sequence[str]] | None = None,
    group: str | None = None,
) -> str:
    """Encode a complete content line, folded at 75 octets.

    The group is the vCard group prefix, e.g. 'item1' for 'item1.EMAIL'.
    """
    if not _RE_NAME.fullmatch(name):
        raise EncodeError(f"Invalid property name '{name}'")
    if group is not None and not _RE_NAME.fullmatch(group):
        raise EncodeError(f"Invalid property group '{group}'")
    prop = ParsedProperty(
        name=name.upper(),
        value=encode_field(name, value),
        params=_encode_params(params) if params else None,
        group=group,
    )
    return CRLF.join(fold_contentline(prop.ics()))
