class IngestionError(Exception):
    """Base exception for all ingestion-related errors."""


class InvalidEventError(IngestionError):
    """Raised when a storage notification payload cannot be turned into an UploadEvent."""


class MalformedKeyError(IngestionError):
    """Raised when an object key does not follow the report attachment layout."""


class AmbiguousReportError(IngestionError):
    """Raised when a unique report is required but several rows share its id."""
