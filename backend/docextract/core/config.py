# docextract/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "DocExtract"
    env: str = "local"

    # CORS (comma separated)
    CORS_ALLOW_ORIGINS: str | None = None

    # =========================
    # Upload / runtime controls
    # =========================
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10MB
    EXTRACTION_TIMEOUT_SECONDS: float = 30.0
    EXTRACTION_MAX_WORKERS: int = 4
    EXTRACTION_EXECUTOR: str = "process"  # "process" | "thread"

    # =========================
    # Quality gate (threshold table v1)
    # =========================
    QUALITY_MIN_LENGTH: int = 200
    QUALITY_MIN_WORD_COUNT: int = 20
    QUALITY_MIN_READABLE_RATIO: float = 0.75
    QUALITY_MAX_DIGIT_DENSITY: float = 0.3
    QUALITY_MAX_REPEAT_RUN: int = 15
    QUALITY_MAX_GARBAGE_MARKERS: int = 4
    QUALITY_MIN_DOMAIN_TERMS: int = 3

    # Heuristic fallbacks
    FALLBACK_MAX_SENTENCES: int = 400
    FALLBACK_MAX_WORD_RUNS: int = 200

    # =========================
    # Content generation seam
    # =========================
    GENERATION_MIN_LENGTH: int = 300
    INTEGRITY_MIN_LENGTH_RATIO: float = 0.5
    INTEGRITY_MAX_LENGTH_RATIO: float = 3.0
    INTEGRITY_MIN_TERM_PRESERVATION: float = 0.4

    # Logging: per-attempt extraction lines can be tuned on their own
    LOG_LEVEL: str = "INFO"
    EXTRACTION_LOG_LEVEL: str | None = None

    # Background jobs
    CELERY_BROKER_URL: str = "memory://"
    CELERY_RESULT_BACKEND: str = "cache+memory://"

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
