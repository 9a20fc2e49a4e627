class StorageError(Exception):
    """Base exception for all storage-related errors."""


class PersistenceError(StorageError):
    """Raised when a backing file cannot be read or written."""


class DuplicateUserError(StorageError):
    """Raised when registering a username that already exists."""
