from datetime import datetime, timezone
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "reports"
    db_username: str = "reports"
    db_password: str = "secret"
    db_pool_max_size: int = 4

    storage_backend: str = "s3"
    s3_endpoint_url: str | None = None
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_signature_version: str = "s3"
    local_storage_root: Path = Path("/app/storage")
    signed_url_expires_at: datetime = datetime(2500, 3, 1, tzinfo=timezone.utc)

    image_engine: str = "imagemagick"
    imagemagick_mogrify_bin: str = "mogrify"
    imagemagick_convert_bin: str = "convert"
    work_dir: Path | None = None

    require_unique_report: bool = False
    record_failures: bool = True

    @field_validator("signed_url_expires_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # values without an offset are read as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
