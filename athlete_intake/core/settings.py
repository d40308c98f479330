# athlete_intake/core/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Athlete Intake"
    app_env: str = "local"  # local | development | production

    # --- Storage (S3 / R2 / MinIO) ---
    S3_REGION: str = "auto"
    S3_ENDPOINT: Optional[str] = None
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None
    S3_BUCKET: Optional[str] = Field(None, description="Bucket receiving the multipart uploads")
    S3_FORCE_PATH_STYLE: bool = True
    S3_CONNECT_TIMEOUT: int = 5
    S3_READ_TIMEOUT: int = 30

    # When the bucket is publicly readable, file links are built on this base
    PUBLIC_FILE_BASE_URL: Optional[str] = None

    # --- Multipart ---
    MPU_PART_SIZE_MB: int = 10
    MPU_MAX_PARTS: int = 10_000
    PRESIGN_EXPIRY_SEC: int = 60 * 60
    UPLOAD_KEY_PREFIX: str = "uploads/"

    # --- E-mail (Resend) ---
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_TIMEOUT_SEC: int = 15
    FROM_EMAIL: Optional[str] = None
    OWNER_EMAIL: Optional[str] = None
    EMAIL_SUBJECT: str = "New video submission"

    # --- HTTP ---
    ALLOWED_ORIGINS: str = "*"
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_SUBMIT: str = "10/minute"
    RATE_LIMIT_UPLOAD: str = "120/minute"

    # --- Logging / metrics ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def part_size_bytes(self) -> int:
        return self.MPU_PART_SIZE_MB * 1024 * 1024

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance (FastAPI dependency, overridable in tests)."""
    return Settings()


# from athlete_intake.core.settings import settings
settings = get_settings()
