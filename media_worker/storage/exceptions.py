class StorageError(Exception):
    """Raised when an object storage call fails."""


class StorageObjectNotFoundError(StorageError):
    """Raised when the requested object does not exist in the bucket."""
