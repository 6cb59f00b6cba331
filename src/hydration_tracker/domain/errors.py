"""Error types for intake persistence."""


class StorageError(Exception):
    """Raised when the durable storage medium is unavailable."""


class StorageReadError(StorageError):
    """Raised when stored values cannot be read."""


class StorageWriteError(StorageError):
    """Raised when values cannot be written."""


class ParseError(ValueError):
    """Raised when a stored intake value is not a non-negative integer."""
