"""
Configuration module for the maternal health tracker.
Uses Pydantic BaseSettings for validation - misconfiguration fails fast at construction.
"""
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ALLOWED_ENVIRONMENTS = ("development", "production")


class Settings(BaseSettings):
    """
    Application settings with validation.
    Every field has a default, so the tracker runs without a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage Configuration
    maternal_svc_db_dir: str = Field(default="data", description="Database directory")
    maternal_svc_db_file: str = Field(default="maternal_health.db", description="Database filename")
    maternal_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")
    maternal_svc_record_key_prefix: str = Field(
        default="healthRecords_",
        description="Prefix of the per-patient key the record collection is stored under",
    )

    # Dashboard Configuration
    maternal_svc_recent_limit: int = Field(default=3, description="Records shown on the overview screen")
    maternal_svc_full_term_weeks: int = Field(default=40, description="Length of a full-term pregnancy in weeks")
    maternal_svc_clamp_progress: bool = Field(
        default=False,
        description="Clamp percent complete to 100 when the current week is past full term",
    )
    maternal_svc_environment: str = Field(
        default="development",
        description="development re-raises invariant violations, production logs and skips them",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="Log output format (json or text)")

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """
        Validate dashboard settings at startup with clear error messages.
        """
        errors = []

        if self.maternal_svc_recent_limit < 1:
            errors.append("MATERNAL_SVC_RECENT_LIMIT must be at least 1")
        if self.maternal_svc_full_term_weeks < 1:
            errors.append("MATERNAL_SVC_FULL_TERM_WEEKS must be at least 1")
        if self.maternal_svc_environment not in ALLOWED_ENVIRONMENTS:
            errors.append(
                f"MATERNAL_SVC_ENVIRONMENT must be one of {', '.join(ALLOWED_ENVIRONMENTS)}, "
                f"got '{self.maternal_svc_environment}'"
            )
        if not self.maternal_svc_record_key_prefix:
            errors.append("MATERNAL_SVC_RECORD_KEY_PREFIX must not be empty")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            logger.critical(error_msg)
            raise ValueError(error_msg)

        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.maternal_svc_db_dir) / self.maternal_svc_db_file)

    @property
    def is_production(self) -> bool:
        return self.maternal_svc_environment == "production"

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.maternal_svc_db_dir).mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    get_settings.cache_clear()
