from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path


class BaseStorageGateway(ABC):
    """Contract for all object storage adapters.

    Raises:
        StorageError: from every operation, chained to the provider error.
    """

    @abstractmethod
    def download(self, bucket: str, key: str, destination: Path) -> Path:
        """Copy an object to a local file and return its path."""

    @abstractmethod
    def upload(self, bucket: str, source: Path, key: str, content_type: str) -> None:
        """Store a local file under ``key`` with the given content type."""

    @abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        """Remove an object."""

    @abstractmethod
    def signed_url(self, bucket: str, key: str, expires_at: datetime) -> str:
        """Issue a read-only URL for an object, valid until ``expires_at``."""
