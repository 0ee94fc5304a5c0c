import shutil
from datetime import datetime
from pathlib import Path

from media_worker.storage.base import BaseStorageGateway
from media_worker.storage.exceptions import StorageError, StorageObjectNotFoundError


class LocalStorageAdapter(BaseStorageGateway):
    """Keeps objects as files under ``{root}/{bucket}/{key}``.

    Meant for development and integration tests; signed URLs are ``file://``
    URIs with the expiry as a query parameter.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    def download(self, bucket: str, key: str, destination: Path) -> Path:
        source = self._resolve(bucket, key)
        if not source.is_file():
            raise StorageObjectNotFoundError(f"Object not found: {bucket}/{key}")
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise StorageError(f"local download failed for {bucket}/{key}: {exc}") from exc
        return destination

    def upload(self, bucket: str, source: Path, key: str, content_type: str) -> None:
        target = self._resolve(bucket, key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            raise StorageError(f"local upload failed for {bucket}/{key}: {exc}") from exc

    def delete(self, bucket: str, key: str) -> None:
        target = self._resolve(bucket, key)
        if not target.is_file():
            raise StorageObjectNotFoundError(f"Object not found: {bucket}/{key}")
        try:
            target.unlink()
        except OSError as exc:
            raise StorageError(f"local delete failed for {bucket}/{key}: {exc}") from exc

    def signed_url(self, bucket: str, key: str, expires_at: datetime) -> str:
        target = self._resolve(bucket, key)
        if not target.is_file():
            raise StorageObjectNotFoundError(f"Object not found: {bucket}/{key}")
        return f"{target.as_uri()}?expires={int(expires_at.timestamp())}"

    def _resolve(self, bucket: str, key: str) -> Path:
        root = (self._root / bucket).resolve()
        path = (root / key).resolve()
        if not path.is_relative_to(root):
            raise StorageError(f"key '{key}' escapes bucket '{bucket}'")
        return path
