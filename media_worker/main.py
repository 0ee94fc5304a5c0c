import json
import sys
from functools import lru_cache
from typing import Any

from psycopg_pool import ConnectionPool

from media_worker.config.settings import Settings
from media_worker.database.connection import create_pool
from media_worker.database.repositories.ingestion_failures_repository import (
    IngestionFailuresRepository,
)
from media_worker.database.repositories.reports_repository import ReportsRepository
from media_worker.imaging.factory import ImageTransformerFactory
from media_worker.ingestion.processor import build_pipeline
from media_worker.logging.logger import Log
from media_worker.storage.factory import StorageGatewayFactory
from media_worker.worker.event_runner import EventRunner


def build_runner(settings: Settings, pool: ConnectionPool) -> EventRunner:
    """Build an EventRunner around an already-open connection pool."""
    storage = StorageGatewayFactory.create(settings)
    transformer = ImageTransformerFactory.create(settings)
    reports_repo = ReportsRepository(pool)
    pipeline = build_pipeline(settings, storage, transformer, reports_repo)
    failures_repo = IngestionFailuresRepository(pool) if settings.record_failures else None
    return EventRunner(pipeline, failures_repo)


@lru_cache(maxsize=1)
def _warm_runner() -> EventRunner:
    # One runner per serverless instance; clients live as long as the process.
    settings = Settings()
    Log.configure(settings.log_level)
    return build_runner(settings, create_pool(settings))


def handler(event: dict[str, Any], context: object = None) -> dict[str, Any]:
    """Serverless entry point: one storage notification per call."""
    return _warm_runner().run(event).to_dict()


def main() -> None:
    """Local harness: read JSON events from stdin, one per line -> print outcomes."""
    settings = Settings()
    Log.configure(settings.log_level)
    pool = create_pool(settings)

    try:
        runner = build_runner(settings, pool)
        for line in sys.stdin:
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as exc:
                Log.error(f"Skipping invalid JSON line: {exc}")
                continue
            print(json.dumps(runner.run(payload).to_dict()), flush=True)
    finally:
        pool.close()


if __name__ == "__main__":
    main()
