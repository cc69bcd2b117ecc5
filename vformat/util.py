"""Utility methods used by multiple components."""

from __future__ import annotations

import datetime
from importlib import metadata
import uuid

__all__ = [
    "dtstamp_factory",
    "uid_factory",
    "prodid_factory",
]


PRODID = "vformat"
try:
    VERSION = metadata.version("vformat")
except metadata.PackageNotFoundError:
    VERSION = "0.0.0"


def dtstamp_factory() -> datetime.datetime:
    """Factory method for new event timestamps to facilitate mocking."""
    return datetime.datetime.now(tz=datetime.UTC)


def uid_factory() -> str:
    """Factory method for new uids to facilitate mocking."""
    return str(uuid.uuid1())


def prodid_factory() -> str:
    """Return the library version to facilitate mocking."""
    return f"-//{PRODID}//{VERSION}//EN"
