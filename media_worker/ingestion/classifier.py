from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from media_worker.ingestion.events import ResourceState, UploadEvent
from media_worker.ingestion.paths import COMPRESSED_PREFIX, THUMB_PREFIX

# Organization branding uploaded next to report files.
RESERVED_FILE_NAME = "logo.png"


class DecisionKind(str, Enum):
    SKIP = "skip"
    IMAGE = "image"
    FILE = "file"


class SkipReason(str, Enum):
    DELETION_ECHO = "deletion_echo"
    METADATA_ONLY_TOUCH = "metadata_only_touch"
    EXCLUDED_FILENAME = "excluded_filename"
    ALREADY_PROCESSED = "already_processed"


@dataclass(frozen=True)
class ProcessingDecision:
    kind: DecisionKind
    reason: SkipReason | None = None

    @property
    def skipped(self) -> bool:
        return self.kind is DecisionKind.SKIP


IMAGE = ProcessingDecision(DecisionKind.IMAGE)
FILE = ProcessingDecision(DecisionKind.FILE)


def _skip(reason: SkipReason) -> ProcessingDecision:
    return ProcessingDecision(DecisionKind.SKIP, reason)


def classify(event: UploadEvent) -> ProcessingDecision:
    """Decide whether and how an upload event is processed.

    Rules are evaluated in order and the first match wins: deletions,
    metadata-only updates and the reserved logo are skipped; images are
    processed unless they are our own outputs; anything else is a file.
    """
    if event.resource_state is ResourceState.NOT_EXISTS:
        return _skip(SkipReason.DELETION_ECHO)
    if event.metageneration > 1:
        return _skip(SkipReason.METADATA_ONLY_TOUCH)

    file_name = PurePosixPath(event.name).name
    if file_name == RESERVED_FILE_NAME:
        return _skip(SkipReason.EXCLUDED_FILENAME)

    if (event.content_type or "").startswith("image/"):
        if file_name.startswith((COMPRESSED_PREFIX, THUMB_PREFIX)):
            return _skip(SkipReason.ALREADY_PROCESSED)
        return IMAGE
    return FILE
