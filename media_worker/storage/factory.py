from media_worker.config.settings import Settings
from media_worker.storage.base import BaseStorageGateway
from media_worker.storage.local_adapter import LocalStorageAdapter
from media_worker.storage.s3_adapter import S3StorageAdapter


class StorageGatewayFactory:
    """Creates the configured object storage adapter."""

    BACKENDS = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorageGateway:
        backend = settings.storage_backend.lower()
        if backend == "s3":
            return S3StorageAdapter.from_settings(settings)
        if backend == "local":
            return LocalStorageAdapter(settings.local_storage_root)
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
