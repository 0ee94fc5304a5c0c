import pytest

from media_worker.ingestion.events import ResourceState, UploadEvent
from media_worker.ingestion.exceptions import InvalidEventError


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "bucket": "uploads",
        "name": "org1/reports/R1/F1/A1/photo.png",
        "contentType": "image/png",
        "resourceState": "exists",
        "metageneration": "1",
    }
    payload.update(overrides)
    return payload


class TestFromPayload:
    def test_parses_object_notification(self) -> None:
        event = UploadEvent.from_payload(_payload())

        assert event.bucket == "uploads"
        assert event.name == "org1/reports/R1/F1/A1/photo.png"
        assert event.content_type == "image/png"
        assert event.resource_state is ResourceState.EXISTS
        assert event.metageneration == 1

    def test_unwraps_data_envelope(self) -> None:
        event = UploadEvent.from_payload({"data": _payload(metageneration=3)})

        assert event.bucket == "uploads"
        assert event.metageneration == 3

    def test_parses_deletion(self) -> None:
        event = UploadEvent.from_payload(_payload(resourceState="not_exists"))
        assert event.resource_state is ResourceState.NOT_EXISTS

    def test_missing_resource_state_defaults_to_exists(self) -> None:
        payload = _payload()
        del payload["resourceState"]
        assert UploadEvent.from_payload(payload).resource_state is ResourceState.EXISTS

    def test_missing_metageneration_defaults_to_one(self) -> None:
        payload = _payload()
        del payload["metageneration"]
        assert UploadEvent.from_payload(payload).metageneration == 1

    def test_missing_content_type_is_none(self) -> None:
        payload = _payload()
        del payload["contentType"]
        assert UploadEvent.from_payload(payload).content_type is None

    def test_non_string_content_type_is_none(self) -> None:
        assert UploadEvent.from_payload(_payload(contentType=42)).content_type is None


class TestFromPayloadRejects:
    def test_missing_bucket(self) -> None:
        with pytest.raises(InvalidEventError, match="bucket"):
            UploadEvent.from_payload(_payload(bucket=""))

    def test_missing_name(self) -> None:
        payload = _payload()
        del payload["name"]
        with pytest.raises(InvalidEventError, match="name"):
            UploadEvent.from_payload(payload)

    def test_unknown_resource_state(self) -> None:
        with pytest.raises(InvalidEventError, match="resourceState"):
            UploadEvent.from_payload(_payload(resourceState="archived"))

    def test_non_numeric_metageneration(self) -> None:
        with pytest.raises(InvalidEventError, match="metageneration"):
            UploadEvent.from_payload(_payload(metageneration="abc"))

    def test_zero_metageneration(self) -> None:
        with pytest.raises(InvalidEventError, match="positive"):
            UploadEvent.from_payload(_payload(metageneration=0))

    def test_non_object_payload(self) -> None:
        with pytest.raises(InvalidEventError, match="JSON object"):
            UploadEvent.from_payload(["not", "a", "dict"])  # type: ignore[arg-type]
