"""Application configuration using pydantic-settings."""

import re

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Matches the lowercase UUID4 strings produced by models.utils.generate_uuid
DEFAULT_RECORD_ID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./trades.db"

    # CORS origins allowed to call the API (JSON list in the environment)
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Order handling
    RECORD_ID_PATTERN: str = DEFAULT_RECORD_ID_PATTERN
    STRICT_SELL_VALIDATION: bool = False

    @field_validator("RECORD_ID_PATTERN")
    @classmethod
    def validate_record_id_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile so startup fails loudly."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"RECORD_ID_PATTERN is not a valid regex: {e}") from e
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()


settings = Settings()
