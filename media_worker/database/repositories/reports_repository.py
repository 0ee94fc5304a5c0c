from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from media_worker.database.models import ReportFileRecord, ReportRecord
from media_worker.ingestion.models import AttachmentRecord


class ReportsRepository:
    """Database operations for the reports and report_files tables."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_report_id(self, report_id: str) -> list[ReportRecord]:
        """Return every report whose business id equals ``report_id``.

        Matches on the denormalized ``report_id`` column, not the primary
        key, so duplicates are all returned.
        """
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, report_id
                    FROM reports
                    WHERE report_id = %s
                    ORDER BY id
                    """,
                    (report_id,),
                )
                rows = cur.fetchall()

        return [ReportRecord(id=row["id"], report_id=row["report_id"]) for row in rows]

    def append_file(self, report: ReportRecord, attachment: AttachmentRecord) -> int:
        """Insert an attachment row under ``report`` and return its id."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO report_files
                    (report_pk, storage_reference, storage_reference_thumb,
                     attachment_id, field_id, full_photo_url, thumb_photo_url,
                     photo_height, photo_width, file_url)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        report.id,
                        attachment.storage_reference,
                        attachment.storage_reference_thumb,
                        attachment.attachment_id,
                        attachment.field_id,
                        attachment.full_photo_url,
                        attachment.thumb_photo_url,
                        attachment.photo_height,
                        attachment.photo_width,
                        attachment.file_url,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Insert into report_files for report {report.id} returned no id")
        return int(row[0])

    def list_files(self, report: ReportRecord) -> list[ReportFileRecord]:
        """List attachment rows of a report, oldest first.

        Read side of ``append_file`` for inspection and verification; the
        pipeline itself never reads attachments back.
        """
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, report_pk, storage_reference, storage_reference_thumb,
                           attachment_id, field_id, full_photo_url, thumb_photo_url,
                           photo_height, photo_width, file_url, created_at
                    FROM report_files
                    WHERE report_pk = %s
                    ORDER BY id
                    """,
                    (report.id,),
                )
                rows = cur.fetchall()

        return [ReportFileRecord(**row) for row in rows]
