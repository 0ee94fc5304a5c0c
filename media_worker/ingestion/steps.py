from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from media_worker.database.repositories.reports_repository import ReportsRepository
from media_worker.imaging.base import BaseImageTransformer
from media_worker.ingestion.exceptions import AmbiguousReportError
from media_worker.ingestion.models import AttachmentRecord
from media_worker.ingestion.paths import decode_key, derive_paths
from media_worker.ingestion.pipeline import PipelineContext, PipelineStep
from media_worker.logging.logger import Log
from media_worker.storage.base import BaseStorageGateway

JPEG_CONTENT_TYPE = "image/jpeg"


class DecodeKeyStep(PipelineStep):
    name = "decode_key"

    def __init__(self, with_derived_paths: bool = False) -> None:
        self._with_derived_paths = with_derived_paths

    def run(self, context: PipelineContext) -> PipelineContext:
        context.identity = decode_key(context.event.name)
        if self._with_derived_paths:
            context.derived = derive_paths(context.identity)
        return context


class DownloadStep(PipelineStep):
    name = "download"

    def __init__(self, storage: BaseStorageGateway) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        identity = context.require_identity()
        destination = context.work_dir / identity.file_name
        context.local_path = self._storage.download(
            context.event.bucket, identity.key, destination
        )
        Log.info(f"Downloaded {identity.key}", bucket=context.event.bucket)
        return context


class NormalizeStep(PipelineStep):
    """Converts non-JPEG uploads to JPEG; JPEG uploads pass through."""

    name = "normalize"

    def __init__(self, transformer: BaseImageTransformer) -> None:
        self._transformer = transformer

    def run(self, context: PipelineContext) -> PipelineContext:
        local_path = context.require_local_path()
        content_type = context.event.content_type or ""
        if content_type.startswith(JPEG_CONTENT_TYPE):
            Log.debug(f"{local_path.name} is already a JPEG")
            return context
        context.local_path = self._transformer.to_jpeg(local_path)
        Log.info(f"Converted {local_path.name} ({content_type}) to JPEG")
        return context


class CompressStep(PipelineStep):
    name = "compress"

    def __init__(self, transformer: BaseImageTransformer) -> None:
        self._transformer = transformer

    def run(self, context: PipelineContext) -> PipelineContext:
        local_path = context.require_local_path()
        self._transformer.compress(local_path)
        context.dimensions = self._transformer.dimensions(local_path)
        Log.info(
            f"Compressed {local_path.name} to "
            f"{context.dimensions.width}x{context.dimensions.height}"
        )
        return context


class UploadFullStep(PipelineStep):
    name = "upload_full"

    def __init__(self, storage: BaseStorageGateway) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        derived = context.require_derived()
        self._storage.upload(
            context.event.bucket,
            context.require_local_path(),
            derived.full_key,
            JPEG_CONTENT_TYPE,
        )
        Log.info(f"Uploaded {derived.full_key}", bucket=context.event.bucket)
        return context


class ThumbnailStep(PipelineStep):
    name = "thumbnail"

    def __init__(self, transformer: BaseImageTransformer) -> None:
        self._transformer = transformer

    def run(self, context: PipelineContext) -> PipelineContext:
        derived = context.require_derived()
        destination = context.work_dir / derived.thumb_name
        self._transformer.thumbnail(context.require_local_path(), destination)
        context.thumb_local_path = destination
        Log.info(f"Created thumbnail {derived.thumb_name}")
        return context


class UploadThumbStep(PipelineStep):
    name = "upload_thumb"

    def __init__(self, storage: BaseStorageGateway) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        derived = context.require_derived()
        if context.thumb_local_path is None:
            raise ValueError("PipelineContext.thumb_local_path must be set before upload")
        self._storage.upload(
            context.event.bucket,
            context.thumb_local_path,
            derived.thumb_key,
            JPEG_CONTENT_TYPE,
        )
        Log.info(f"Uploaded {derived.thumb_key}", bucket=context.event.bucket)
        return context


class SignDerivedStep(PipelineStep):
    """Signs both outputs concurrently and builds the photo attachment."""

    name = "sign_derived"

    def __init__(self, storage: BaseStorageGateway, expires_at: datetime) -> None:
        self._storage = storage
        self._expires_at = expires_at

    def run(self, context: PipelineContext) -> PipelineContext:
        identity = context.require_identity()
        derived = context.require_derived()
        if context.dimensions is None:
            raise ValueError("PipelineContext.dimensions must be set before signing")
        bucket = context.event.bucket
        with ThreadPoolExecutor(max_workers=2) as executor:
            full_future = executor.submit(
                self._storage.signed_url, bucket, derived.full_key, self._expires_at
            )
            thumb_future = executor.submit(
                self._storage.signed_url, bucket, derived.thumb_key, self._expires_at
            )
            full_url = full_future.result()
            thumb_url = thumb_future.result()
        context.attachment = AttachmentRecord.for_photo(
            identity,
            derived,
            context.dimensions,
            full_photo_url=full_url,
            thumb_photo_url=thumb_url,
        )
        return context


class SignOriginalStep(PipelineStep):
    name = "sign_original"

    def __init__(self, storage: BaseStorageGateway, expires_at: datetime) -> None:
        self._storage = storage
        self._expires_at = expires_at

    def run(self, context: PipelineContext) -> PipelineContext:
        identity = context.require_identity()
        file_url = self._storage.signed_url(
            context.event.bucket, identity.key, self._expires_at
        )
        context.attachment = AttachmentRecord.for_file(identity, file_url)
        return context


class FindReportsStep(PipelineStep):
    name = "find_reports"

    def __init__(self, reports_repo: ReportsRepository, require_unique: bool = False) -> None:
        self._reports_repo = reports_repo
        self._require_unique = require_unique

    def run(self, context: PipelineContext) -> PipelineContext:
        report_id = context.require_identity().report_id
        reports = self._reports_repo.find_by_report_id(report_id)
        if self._require_unique and len(reports) > 1:
            raise AmbiguousReportError(
                f"{len(reports)} reports share report_id '{report_id}'"
            )
        if not reports:
            Log.warning(f"No report found for report_id '{report_id}'")
        context.reports = reports
        return context


class AppendAttachmentStep(PipelineStep):
    """Writes the attachment under every matched report."""

    name = "append_attachment"

    def __init__(self, reports_repo: ReportsRepository) -> None:
        self._reports_repo = reports_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.attachment is None:
            raise ValueError("PipelineContext.attachment must be set before append")
        for report in context.reports:
            self._reports_repo.append_file(report, context.attachment)
            context.files_written += 1
        Log.info(
            f"Appended {context.attachment.storage_reference} "
            f"to {context.files_written} report(s)"
        )
        return context


class DeleteOriginalStep(PipelineStep):
    name = "delete_original"

    def __init__(self, storage: BaseStorageGateway) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        identity = context.require_identity()
        self._storage.delete(context.event.bucket, identity.key)
        Log.info(f"Deleted original {identity.key}", bucket=context.event.bucket)
        return context
