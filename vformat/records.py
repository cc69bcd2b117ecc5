"""Data records exchanged with the calling layer.

Calendar objects and contacts arrive from a CalDAV or CardDAV store as a
`DavObject` and reports are returned as a `Report`, a single text block in
the content envelope used by the tool layer.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Collection",
    "DavObject",
    "Report",
    "TextContent",
]


class DavObject(BaseModel):
    """A calendar object or vCard with its location on the server."""

    url: str
    """The location of the object, used for updates and deletes."""

    etag: Optional[str] = None
    """The entity tag of the fetched version, required for updates."""

    data: str = ""
    """The raw iCalendar or vCard text."""

    model_config = ConfigDict(frozen=True)


class Collection(BaseModel):
    """A calendar or address book."""

    url: str
    display_name: Optional[str] = Field(alias="displayName", default=None)
    description: Optional[str] = None
    components: Optional[list[str]] = None
    """The component types a calendar supports, e.g. VEVENT or VTODO."""

    color: Optional[str] = Field(alias="calendarColor", default=None)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TextContent(BaseModel):
    """A block of text content."""

    type: Literal["text"] = "text"
    text: str


class Report(BaseModel):
    """A rendered report."""

    content: list[TextContent]

    @classmethod
    def from_text(cls, text: str) -> Report:
        """Create a report holding a single text block."""
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        """Return the text of all content blocks."""
        return "".join(block.text for block in self.content)
