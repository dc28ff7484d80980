class StorageError(Exception):
    """Raised when an object cannot be read from or written to storage."""


class ObjectNotFoundError(StorageError):
    """Raised when the requested object does not exist."""
