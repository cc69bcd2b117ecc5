"""Library for decoding and encoding rfc5545 and rfc6350 value types."""

# Import all types for the registry
from . import boolean, date, date_time, duration, integer  # noqa: F401
from . import recur, structured, text, utc_offset  # noqa: F401
from .cal_address import CalAddress, ParticipationStatus, Role
from .data_types import DATA_TYPE, DecodeContext

__all__ = [
    "CalAddress",
    "DATA_TYPE",
    "DecodeContext",
    "ParticipationStatus",
    "Role",
]
