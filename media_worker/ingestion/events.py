from dataclasses import dataclass
from enum import Enum
from typing import Any

from media_worker.ingestion.exceptions import InvalidEventError


class ResourceState(str, Enum):
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


@dataclass(frozen=True)
class UploadEvent:
    """Storage notification for a single finalized (or deleted) object."""

    bucket: str
    name: str
    content_type: str | None
    resource_state: ResourceState = ResourceState.EXISTS
    metageneration: int = 1

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "UploadEvent":
        """Build an event from a storage object notification.

        Accepts the bare object resource or an envelope carrying it under
        ``data``. Finalize-only runtimes omit ``resourceState``; it then
        defaults to ``exists``.

        Raises:
            InvalidEventError: if required fields are missing or malformed.
        """
        if not isinstance(payload, dict):
            raise InvalidEventError("event payload must be a JSON object")
        if isinstance(payload.get("data"), dict):
            payload = payload["data"]

        bucket = payload.get("bucket")
        name = payload.get("name")
        if not bucket or not isinstance(bucket, str):
            raise InvalidEventError("event is missing 'bucket'")
        if not name or not isinstance(name, str):
            raise InvalidEventError("event is missing 'name'")

        content_type = payload.get("contentType")
        if content_type is not None and not isinstance(content_type, str):
            content_type = None

        return cls(
            bucket=bucket,
            name=name,
            content_type=content_type,
            resource_state=_parse_resource_state(payload.get("resourceState")),
            metageneration=_parse_metageneration(payload.get("metageneration")),
        )


def _parse_resource_state(raw: object) -> ResourceState:
    if raw is None:
        return ResourceState.EXISTS
    try:
        return ResourceState(str(raw).lower())
    except ValueError:
        raise InvalidEventError(f"unknown resourceState '{raw}'") from None


def _parse_metageneration(raw: object) -> int:
    if raw is None:
        return 1
    if isinstance(raw, bool):
        raise InvalidEventError(f"invalid metageneration '{raw}'")
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise InvalidEventError(f"invalid metageneration '{raw}'") from None
    if value < 1:
        raise InvalidEventError(f"metageneration must be positive, got {value}")
    return value
