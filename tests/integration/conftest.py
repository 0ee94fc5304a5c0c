import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from media_worker.config.settings import Settings
from media_worker.database.connection import create_pool
from media_worker.database.models import ReportRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS reports (
    id BIGSERIAL PRIMARY KEY,
    report_id TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS report_files (
    id BIGSERIAL PRIMARY KEY,
    report_pk BIGINT NOT NULL REFERENCES reports (id) ON DELETE CASCADE,
    storage_reference TEXT NOT NULL,
    storage_reference_thumb TEXT,
    attachment_id TEXT NOT NULL,
    field_id TEXT NOT NULL,
    full_photo_url TEXT,
    thumb_photo_url TEXT,
    photo_height INTEGER,
    photo_width INTEGER,
    file_url TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE TABLE IF NOT EXISTS ingestion_failures (
    id BIGSERIAL PRIMARY KEY,
    bucket TEXT NOT NULL,
    object_name TEXT NOT NULL,
    stage TEXT,
    error_message TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "reports_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[ConnectionPool, None, None]:
    pool = create_pool(test_settings)
    try:
        pool.wait(timeout=5)
    except Exception as e:
        pool.close()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        with pool.connection() as conn:
            conn.execute(SCHEMA)
            conn.commit()
        yield pool
    finally:
        pool.close()


@pytest.fixture
def db_conn(integration_pool: ConnectionPool) -> Generator[psycopg.Connection[Any], None, None]:
    with integration_pool.connection() as conn:
        yield conn


@pytest.fixture
def report_id() -> str:
    return f"R-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def seed_reports(
    db_conn: psycopg.Connection[Any],
    report_id: str,
    request: pytest.FixtureRequest,
) -> Generator[list[ReportRecord], None, None]:
    """Insert reports sharing one business id; count via indirect param, default 1."""
    count = getattr(request, "param", 1)
    records: list[ReportRecord] = []
    with db_conn.cursor() as cur:
        for _ in range(count):
            cur.execute(
                "INSERT INTO reports (report_id) VALUES (%s) RETURNING id",
                (report_id,),
            )
            row = cur.fetchone()
            assert row is not None
            records.append(ReportRecord(id=row[0], report_id=report_id))
    db_conn.commit()
    try:
        yield records
    finally:
        db_conn.execute("DELETE FROM reports WHERE report_id = %s", (report_id,))
        db_conn.commit()
