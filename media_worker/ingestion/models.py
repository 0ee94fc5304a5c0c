from dataclasses import dataclass
from enum import Enum
from typing import Any

from media_worker.imaging.models import PhotoDimensions
from media_worker.ingestion.classifier import SkipReason
from media_worker.ingestion.paths import DerivedPaths, ObjectIdentity


@dataclass(frozen=True)
class AttachmentRecord:
    """Row appended to a report's files once an upload is processed.

    Photo attachments point at the derived outputs and carry the compressed
    image size; plain file attachments point at the original object.
    """

    storage_reference: str
    attachment_id: str
    field_id: str
    storage_reference_thumb: str | None = None
    full_photo_url: str | None = None
    thumb_photo_url: str | None = None
    photo_height: int | None = None
    photo_width: int | None = None
    file_url: str | None = None

    @classmethod
    def for_photo(
        cls,
        identity: ObjectIdentity,
        derived: DerivedPaths,
        dimensions: PhotoDimensions,
        full_photo_url: str,
        thumb_photo_url: str,
    ) -> "AttachmentRecord":
        return cls(
            storage_reference=derived.full_key,
            storage_reference_thumb=derived.thumb_key,
            attachment_id=identity.attachment_id,
            field_id=identity.field_id,
            full_photo_url=full_photo_url,
            thumb_photo_url=thumb_photo_url,
            photo_height=dimensions.height,
            photo_width=dimensions.width,
        )

    @classmethod
    def for_file(cls, identity: ObjectIdentity, file_url: str) -> "AttachmentRecord":
        return cls(
            storage_reference=identity.key,
            attachment_id=identity.attachment_id,
            field_id=identity.field_id,
            file_url=file_url,
        )

    @property
    def is_photo(self) -> bool:
        return self.storage_reference_thumb is not None


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineOutcome:
    """Terminal status of one invocation."""

    status: OutcomeStatus
    object_name: str
    reason: SkipReason | None = None
    stage: str | None = None
    error: Exception | None = None
    files_written: int = 0

    @classmethod
    def succeeded(cls, object_name: str, files_written: int) -> "PipelineOutcome":
        return cls(OutcomeStatus.SUCCEEDED, object_name, files_written=files_written)

    @classmethod
    def skipped(cls, object_name: str, reason: SkipReason) -> "PipelineOutcome":
        return cls(OutcomeStatus.SKIPPED, object_name, reason=reason)

    @classmethod
    def failed(
        cls,
        object_name: str,
        stage: str,
        error: Exception,
        files_written: int = 0,
    ) -> "PipelineOutcome":
        return cls(
            OutcomeStatus.FAILED,
            object_name,
            stage=stage,
            error=error,
            files_written=files_written,
        )

    @property
    def error_message(self) -> str:
        if self.error is None:
            return ""
        return f"{type(self.error).__name__}: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view returned to the invoking runtime."""
        return {
            "status": self.status.value,
            "object": self.object_name,
            "reason": self.reason.value if self.reason else None,
            "stage": self.stage,
            "error": self.error_message or None,
            "files_written": self.files_written,
        }
