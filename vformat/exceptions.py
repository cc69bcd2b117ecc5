"""Exceptions for vformat library."""


class VFormatError(Exception):
    """Base exception for all vformat errors."""


class ParseError(VFormatError):
    """Exception raised when a document can't be decoded.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the diagnostics recorded while
    building the component tree, useful for debugging purposes.

    Decoding is tolerant by default and records problems as diagnostics on
    the returned document, so this is only raised in strict mode or when the
    input bytes are not valid UTF-8.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the ParseError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class EncodeError(VFormatError, ValueError):
    """Exception raised when a field value is encoded incorrectly.

    This indicates a programming error by the caller, such as escaping text
    that was already escaped or encoding a value for a property whose type
    is not known.
    """
