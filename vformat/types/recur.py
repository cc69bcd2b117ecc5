"""Library for decoding and encoding RECUR values.

Recurrence rules are reported as a descriptor and are never expanded into
instances. The rule is checked with `dateutil.rrule` so that an invalid rule
is reported as plain text rather than as a recurrence.
"""

from __future__ import annotations

import datetime
import logging

from dateutil import rrule

from vformat.parsing.property import ParsedProperty
from vformat.values import RecurValue

from .data_types import DATA_TYPE, DecodeContext

_LOGGER = logging.getLogger(__name__)

# The rule is only validated, so any fixed start works
_VALIDATION_DTSTART = datetime.datetime(2000, 1, 1)
_RRULE_PREFIX = "RRULE:"


def validate_rule(value: str) -> str:
    """Return the normalized rule, raising ValueError if it is not valid."""
    rule = value.strip()
    if rule.upper().startswith(_RRULE_PREFIX):
        rule = rule[len(_RRULE_PREFIX) :]
    if not rule.upper().startswith("FREQ=") and ";FREQ=" not in rule.upper():
        raise ValueError(f"Recurrence rule has no FREQ: {value}")
    try:
        rrule.rrulestr(rule, dtstart=_VALIDATION_DTSTART, ignoretz=True, cache=False)
    except (ValueError, TypeError, KeyError) as err:
        raise ValueError(f"Invalid recurrence rule '{value}': {err}") from err
    return rule


@DATA_TYPE.register("RECUR")
class RecurEncoder:
    """Encode a recurrence rule."""

    @classmethod
    def __parse_property_value__(
        cls, prop: ParsedProperty, context: DecodeContext
    ) -> RecurValue:
        """Parse the rule, without expanding it."""
        return RecurValue(validate_rule(prop.value))

    @classmethod
    def __encode_property_value__(cls, value: str) -> str:
        """Validate and encode a rule string."""
        return validate_rule(value)
