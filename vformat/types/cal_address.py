"""Library for reading calendar user addresses such as ORGANIZER and ATTENDEE.

The value of these properties is a uri, usually a 'mailto:' address, and
the details of the calendar user are carried in parameters.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from vformat.component import Property

_LOGGER = logging.getLogger(__name__)

MAILTO = "mailto:"


class ParticipationStatus(str, enum.Enum):
    """Participation status for a calendar user."""

    NEEDS_ACTION = "NEEDS-ACTION"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    # Additional statuses for Events and Todos
    TENTATIVE = "TENTATIVE"
    DELEGATED = "DELEGATED"
    # Additional status for TODOs
    COMPLETED = "COMPLETED"


class Role(str, enum.Enum):
    """Role for the calendar user."""

    CHAIR = "CHAIR"
    REQUIRED = "REQ-PARTICIPANT"
    OPTIONAL = "OPT-PARTICIPANT"
    NON_PARTICIPANT = "NON-PARTICIPANT"


class CalAddress(BaseModel):
    """A value type for a property that contains a calendar user address."""

    uri: str = Field(alias="value")
    """The calendar user address as a uri."""

    common_name: Optional[str] = Field(alias="CN", default=None)
    """The common name associated with the calendar user."""

    user_type: Optional[str] = Field(alias="CUTYPE", default=None)
    """The type of calendar user specified by the property."""

    status: Optional[str] = Field(alias="PARTSTAT", default=None)
    """The participation status for the calendar user.

    Common values are defined in ParticipationStatus, though also supports
    other values not known by this library so it uses a string.
    """

    role: Optional[str] = Field(alias="ROLE", default=None)
    """The participation role for the calendar user."""

    rsvp: Optional[bool] = Field(alias="RSVP", default=None)
    """Whether there is an expectation of a reply from the calendar user."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("rsvp", mode="before")
    @classmethod
    def _parse_rsvp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper() == "TRUE"
        return value

    @property
    def email(self) -> str:
        """Return the address without a 'mailto:' scheme."""
        if self.uri.lower().startswith(MAILTO):
            return self.uri[len(MAILTO) :]
        return self.uri

    @property
    def display_name(self) -> str:
        """Return the common name, falling back to the address."""
        return self.common_name or self.email

    @classmethod
    def from_property(cls, prop: Property) -> CalAddress:
        """Create a CalAddress from a decoded ORGANIZER or ATTENDEE property."""
        data: dict[str, Any] = {"value": str(prop.value)}
        for name in cls.parameter_names():
            if (value := prop.param(name)) is not None:
                data[name] = value
        _LOGGER.debug("Parsed calendar address %s", data.get("value"))
        return cls.model_validate(data)

    @classmethod
    def parameter_names(cls) -> list[str]:
        """Return the parameter names read into the model."""
        return [
            field.alias
            for field in cls.model_fields.values()
            if field.alias and field.alias != "value"
        ]
