from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ReportRecord:
    """Represents a row from the reports table (only the columns we match on)."""

    id: int
    report_id: str


@dataclass
class ReportFileRecord:
    """Represents a row from the report_files table.

    The pipeline only inserts these rows; this type is what reads and
    verification get back from ``ReportsRepository.list_files``.
    """

    id: int
    report_pk: int
    storage_reference: str
    attachment_id: str
    field_id: str
    storage_reference_thumb: str | None = None
    full_photo_url: str | None = None
    thumb_photo_url: str | None = None
    photo_height: int | None = None
    photo_width: int | None = None
    file_url: str | None = None
    created_at: datetime | None = None
