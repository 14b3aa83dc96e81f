from __future__ import annotations
import os
from pydantic import BaseModel

GITHUB_REPOSITORY_PATTERN = r"^https?://(www\.)?github\.com/[a-zA-Z0-9-]+/[a-zA-Z0-9-._]+/?$"

DEFAULT_EMAIL_SUFFIXES = (".com",)

def parse_suffixes(raw: str | None) -> list[str]:
    """Comma-separated suffixes; blank or empty input means the defaults."""
    return [s.strip() for s in (raw or "").split(",") if s.strip()] or list(DEFAULT_EMAIL_SUFFIXES)

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "ideathon-registry")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Ideathon Registry")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/ideathon_dev")
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    sql_echo: bool = os.getenv("SQL_ECHO", "0") == "1"
    redis_url: str = os.getenv("REDIS_URL", "redis://redis:6379/0")

    # Acknowledgment delivery
    ack_delivery: str = os.getenv("ACK_DELIVERY", "queue")  # queue|log
    ack_queue_name: str = os.getenv("ACK_QUEUE_NAME", "notifications")
    ack_job_timeout_seconds: int = int(os.getenv("ACK_JOB_TIMEOUT_SECONDS", "30"))

    # Registration policy (field-shape heuristics, tunable per deployment)
    pitch_min_length: int = int(os.getenv("PITCH_MIN_LENGTH", "50"))
    pitch_max_length: int = int(os.getenv("PITCH_MAX_LENGTH", "1000"))
    email_suffixes: list[str] = parse_suffixes(os.getenv("EMAIL_SUFFIXES"))
    mobile_digits: int = int(os.getenv("MOBILE_DIGITS", "10"))
    repository_url_pattern: str = os.getenv("REPOSITORY_URL_PATTERN", GITHUB_REPOSITORY_PATTERN)

    # Deadline urgency thresholds (days)
    urgent_within_days: int = int(os.getenv("URGENT_WITHIN_DAYS", "3"))
    approaching_within_days: int = int(os.getenv("APPROACHING_WITHIN_DAYS", "7"))

settings = Settings()
