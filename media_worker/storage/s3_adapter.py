from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from media_worker.config.settings import Settings
from media_worker.storage.base import BaseStorageGateway
from media_worker.storage.exceptions import StorageError, StorageObjectNotFoundError

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


class S3StorageAdapter(BaseStorageGateway):
    """Object storage through an S3-compatible API (AWS S3, MinIO, GCS interoperability)."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3StorageAdapter":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url or None,
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            config=Config(signature_version=settings.s3_signature_version),
        )
        return cls(client)

    def download(self, bucket: str, key: str, destination: Path) -> Path:
        try:
            self._client.download_file(bucket, key, str(destination))
        except (BotoCoreError, ClientError) as exc:
            raise self._translate("download", bucket, key, exc) from exc
        return destination

    def upload(self, bucket: str, source: Path, key: str, content_type: str) -> None:
        try:
            self._client.upload_file(
                str(source), bucket, key, ExtraArgs={"ContentType": content_type}
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._translate("upload", bucket, key, exc) from exc

    def delete(self, bucket: str, key: str) -> None:
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise self._translate("delete", bucket, key, exc) from exc

    def signed_url(self, bucket: str, key: str, expires_at: datetime) -> str:
        expires_in = int((expires_at - datetime.now(timezone.utc)).total_seconds())
        if expires_in <= 0:
            raise StorageError(f"signed URL expiry {expires_at.isoformat()} is in the past")
        try:
            url: str = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._translate("sign", bucket, key, exc) from exc
        return url

    @staticmethod
    def _translate(action: str, bucket: str, key: str, exc: Exception) -> StorageError:
        message = f"s3 {action} failed for s3://{bucket}/{key}: {exc}"
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                return StorageObjectNotFoundError(message)
        return StorageError(message)
