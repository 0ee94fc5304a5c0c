from psycopg_pool import ConnectionPool

from media_worker.ingestion.models import PipelineOutcome


class IngestionFailuresRepository:
    """Dead-letter rows for invocations that ended in a failed outcome."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def record(self, bucket: str, outcome: PipelineOutcome) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO ingestion_failures (bucket, object_name, stage, error_message)
                VALUES (%s, %s, %s, %s)
                """,
                (bucket, outcome.object_name, outcome.stage, outcome.error_message),
            )
            conn.commit()
