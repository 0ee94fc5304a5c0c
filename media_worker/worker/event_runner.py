from typing import Any

from media_worker.database.repositories.ingestion_failures_repository import (
    IngestionFailuresRepository,
)
from media_worker.ingestion.events import UploadEvent
from media_worker.ingestion.exceptions import InvalidEventError
from media_worker.ingestion.models import OutcomeStatus, PipelineOutcome
from media_worker.ingestion.processor import IngestionPipeline
from media_worker.logging.logger import Log


class EventRunner:
    """Run one storage notification through the pipeline and report the outcome."""

    def __init__(
        self,
        pipeline: IngestionPipeline,
        failures_repo: IngestionFailuresRepository | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._failures_repo = failures_repo

    def run(self, payload: dict[str, Any]) -> PipelineOutcome:
        """Execute a single event. Never raises for pipeline failures."""
        try:
            event = UploadEvent.from_payload(payload)
        except InvalidEventError as exc:
            Log.error(f"Rejected storage event: {exc}")
            return PipelineOutcome.failed(_payload_name(payload), "parse_event", exc)

        outcome = self._pipeline.process(event)
        if outcome.status is OutcomeStatus.FAILED:
            self._record_failure(event.bucket, outcome)
        return outcome

    def _record_failure(self, bucket: str, outcome: PipelineOutcome) -> None:
        """Persist a dead-letter row; a broken dead-letter store only warns."""
        if self._failures_repo is None:
            return
        try:
            self._failures_repo.record(bucket, outcome)
        except Exception as exc:
            Log.warning(
                f"Could not record failure of {outcome.object_name}: {exc}",
                bucket=bucket,
            )


def _payload_name(payload: Any) -> str:
    """Best-effort object name of a rejected payload, inside a ``data`` envelope or not."""
    if not isinstance(payload, dict):
        return ""
    if isinstance(payload.get("data"), dict):
        payload = payload["data"]
    name = payload.get("name", "")
    return name if isinstance(name, str) else str(name)
