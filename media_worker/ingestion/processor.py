import tempfile
from collections.abc import Sequence
from pathlib import Path

from media_worker.config.settings import Settings
from media_worker.database.repositories.reports_repository import ReportsRepository
from media_worker.imaging.base import BaseImageTransformer
from media_worker.ingestion.classifier import DecisionKind, classify
from media_worker.ingestion.events import UploadEvent
from media_worker.ingestion.models import PipelineOutcome
from media_worker.ingestion.pipeline import PipelineContext, PipelineStep
from media_worker.ingestion.steps import (
    AppendAttachmentStep,
    CompressStep,
    DecodeKeyStep,
    DeleteOriginalStep,
    DownloadStep,
    FindReportsStep,
    NormalizeStep,
    SignDerivedStep,
    SignOriginalStep,
    ThumbnailStep,
    UploadFullStep,
    UploadThumbStep,
)
from media_worker.logging.logger import Log
from media_worker.storage.base import BaseStorageGateway

WORK_DIR_STAGE = "work_dir"


class IngestionPipeline:
    """Classifies an upload event and runs the matching step chain.

    Image chain: decode -> download -> normalize -> compress -> upload full
    -> thumbnail -> upload thumb -> sign both -> find reports -> append ->
    delete original. File chain: decode -> sign original -> find reports ->
    append.

    The first failing step stops its chain. Nothing raises out of
    ``process``: the result is a PipelineOutcome naming the failed stage.
    Side effects of steps that already ran are not rolled back.
    """

    def __init__(
        self,
        image_steps: Sequence[PipelineStep],
        file_steps: Sequence[PipelineStep],
        work_root: Path | None = None,
    ) -> None:
        self._chains = {
            DecisionKind.IMAGE: list(image_steps),
            DecisionKind.FILE: list(file_steps),
        }
        self._work_root = work_root

    def process(self, event: UploadEvent) -> PipelineOutcome:
        decision = classify(event)
        if decision.reason is not None:
            Log.info(
                f"Skipping {event.name}: {decision.reason.value}",
                bucket=event.bucket,
            )
            return PipelineOutcome.skipped(event.name, decision.reason)

        Log.info(f"Processing {event.name} as {decision.kind.value}", bucket=event.bucket)
        try:
            workspace = tempfile.TemporaryDirectory(prefix="media-worker-", dir=self._work_root)
        except OSError as exc:
            Log.exception(
                f"Processing {event.name} failed at {WORK_DIR_STAGE}: {exc}",
                bucket=event.bucket,
                stage=WORK_DIR_STAGE,
            )
            return PipelineOutcome.failed(event.name, WORK_DIR_STAGE, exc)
        with workspace as tmp:
            context = PipelineContext(event=event, work_dir=Path(tmp))
            return self._run_chain(self._chains[decision.kind], context)

    def _run_chain(
        self, steps: Sequence[PipelineStep], context: PipelineContext
    ) -> PipelineOutcome:
        event = context.event
        for step in steps:
            try:
                context = step.run(context)
            except Exception as exc:
                Log.exception(
                    f"Processing {event.name} failed at {step.name}: {exc}",
                    bucket=event.bucket,
                    stage=step.name,
                )
                return PipelineOutcome.failed(
                    event.name, step.name, exc, files_written=context.files_written
                )
        Log.info(f"Processed {event.name}", bucket=event.bucket)
        return PipelineOutcome.succeeded(event.name, context.files_written)


def build_pipeline(
    settings: Settings,
    storage: BaseStorageGateway,
    transformer: BaseImageTransformer,
    reports_repo: ReportsRepository,
) -> IngestionPipeline:
    """Wire both step chains from injected adapters."""
    expires_at = settings.signed_url_expires_at
    find_reports = FindReportsStep(
        reports_repo, require_unique=settings.require_unique_report
    )
    append = AppendAttachmentStep(reports_repo)
    image_steps: list[PipelineStep] = [
        DecodeKeyStep(with_derived_paths=True),
        DownloadStep(storage),
        NormalizeStep(transformer),
        CompressStep(transformer),
        UploadFullStep(storage),
        ThumbnailStep(transformer),
        UploadThumbStep(storage),
        SignDerivedStep(storage, expires_at),
        find_reports,
        append,
        DeleteOriginalStep(storage),
    ]
    file_steps: list[PipelineStep] = [
        DecodeKeyStep(),
        SignOriginalStep(storage, expires_at),
        find_reports,
        append,
    ]
    return IngestionPipeline(image_steps, file_steps, work_root=settings.work_dir)
