from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from media_worker.config.settings import Settings
from media_worker.storage.exceptions import StorageError, StorageObjectNotFoundError
from media_worker.storage.s3_adapter import S3StorageAdapter


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def _make_adapter() -> tuple[S3StorageAdapter, MagicMock]:
    client = MagicMock()
    return S3StorageAdapter(client), client


class TestTransfers:
    def test_download_writes_to_destination(self) -> None:
        adapter, client = _make_adapter()

        result = adapter.download("uploads", "a/b.png", Path("/work/b.png"))

        client.download_file.assert_called_once_with("uploads", "a/b.png", "/work/b.png")
        assert result == Path("/work/b.png")

    def test_upload_sets_content_type(self) -> None:
        adapter, client = _make_adapter()

        adapter.upload("uploads", Path("/work/full_b.jpg"), "a/full_b.jpg", "image/jpeg")

        client.upload_file.assert_called_once_with(
            "/work/full_b.jpg",
            "uploads",
            "a/full_b.jpg",
            ExtraArgs={"ContentType": "image/jpeg"},
        )

    def test_delete_removes_object(self) -> None:
        adapter, client = _make_adapter()

        adapter.delete("uploads", "a/b.png")

        client.delete_object.assert_called_once_with(Bucket="uploads", Key="a/b.png")


class TestSignedUrl:
    def test_signs_get_object_until_expiry(self) -> None:
        adapter, client = _make_adapter()
        client.generate_presigned_url.return_value = "https://signed"
        expires_at = datetime.now(timezone.utc) + timedelta(days=10)

        url = adapter.signed_url("uploads", "a/full_b.jpg", expires_at)

        assert url == "https://signed"
        call = client.generate_presigned_url.call_args
        assert call.args == ("get_object",)
        assert call.kwargs["Params"] == {"Bucket": "uploads", "Key": "a/full_b.jpg"}
        expires_in = call.kwargs["ExpiresIn"]
        assert 9 * 86400 < expires_in <= 10 * 86400

    def test_expiry_in_the_past_raises(self) -> None:
        adapter, client = _make_adapter()

        with pytest.raises(StorageError, match="in the past"):
            adapter.signed_url("uploads", "a/b.png", datetime(2000, 1, 1, tzinfo=timezone.utc))

        client.generate_presigned_url.assert_not_called()

    def test_signs_with_configured_expiry_without_offset(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SIGNED_URL_EXPIRES_AT", "2500-03-01T00:00:00")
        adapter, client = _make_adapter()
        client.generate_presigned_url.return_value = "https://signed"

        url = adapter.signed_url("uploads", "a/b.png", Settings().signed_url_expires_at)

        assert url == "https://signed"
        assert client.generate_presigned_url.call_args.kwargs["ExpiresIn"] > 0


class TestErrorTranslation:
    def test_missing_object_raises_not_found(self) -> None:
        adapter, client = _make_adapter()
        client.download_file.side_effect = _client_error("404", "HeadObject")

        with pytest.raises(StorageObjectNotFoundError, match="s3://uploads/a/b.png"):
            adapter.download("uploads", "a/b.png", Path("/work/b.png"))

    def test_access_denied_raises_storage_error(self) -> None:
        adapter, client = _make_adapter()
        client.upload_file.side_effect = _client_error("AccessDenied", "PutObject")

        with pytest.raises(StorageError, match="upload failed") as exc_info:
            adapter.upload("uploads", Path("/work/x.jpg"), "a/x.jpg", "image/jpeg")

        assert not isinstance(exc_info.value, StorageObjectNotFoundError)
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_connection_error_raises_storage_error(self) -> None:
        adapter, client = _make_adapter()
        client.delete_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")

        with pytest.raises(StorageError, match="delete failed"):
            adapter.delete("uploads", "a/b.png")


class TestFromSettings:
    @patch("media_worker.storage.s3_adapter.boto3.client")
    def test_builds_client_from_settings(self, mock_client: MagicMock) -> None:
        settings = MagicMock(
            s3_endpoint_url="https://storage.googleapis.com",
            aws_region="auto",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            s3_signature_version="s3",
        )

        adapter = S3StorageAdapter.from_settings(settings)

        assert isinstance(adapter, S3StorageAdapter)
        kwargs = mock_client.call_args.kwargs
        assert mock_client.call_args.args == ("s3",)
        assert kwargs["endpoint_url"] == "https://storage.googleapis.com"
        assert kwargs["aws_access_key_id"] == "key"
        assert kwargs["config"].signature_version == "s3"
