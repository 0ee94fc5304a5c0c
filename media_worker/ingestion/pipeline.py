from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from media_worker.database.models import ReportRecord
from media_worker.imaging.models import PhotoDimensions
from media_worker.ingestion.events import UploadEvent
from media_worker.ingestion.models import AttachmentRecord
from media_worker.ingestion.paths import DerivedPaths, ObjectIdentity


@dataclass(slots=True)
class PipelineContext:
    event: UploadEvent
    work_dir: Path
    identity: ObjectIdentity | None = None
    derived: DerivedPaths | None = None
    local_path: Path | None = None
    thumb_local_path: Path | None = None
    dimensions: PhotoDimensions | None = None
    attachment: AttachmentRecord | None = None
    reports: list[ReportRecord] = field(default_factory=list)
    files_written: int = 0

    def require_identity(self) -> ObjectIdentity:
        if self.identity is None:
            raise ValueError("PipelineContext.identity must be set before this step")
        return self.identity

    def require_derived(self) -> DerivedPaths:
        if self.derived is None:
            raise ValueError("PipelineContext.derived must be set before this step")
        return self.derived

    def require_local_path(self) -> Path:
        if self.local_path is None:
            raise ValueError("PipelineContext.local_path must be set before this step")
        return self.local_path


class PipelineStep(ABC):
    name: ClassVar[str]

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
