class ExtractionError(Exception):
    """Raised by a format handler when a file cannot be converted to text."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no handler is registered for a file extension."""
