"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables (and an optional
``.env`` file) following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="Async SQLAlchemy connection string for the voters database",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Maintenance batching
    fetch_page_size: int = Field(
        default=1000,
        description="Rows per window when paging through the whole voters table",
        gt=0,
    )
    delete_batch_size: int = Field(
        default=100,
        description="Voter ids per set-membership delete during deduplication",
        gt=0,
    )

    # Google Sheets vote mirror
    google_service_account_key: str | None = Field(
        default=None,
        description="Service account credentials as a JSON string",
    )
    google_sheet_id: str | None = Field(
        default=None,
        description="Spreadsheet id that mirrors the voted column",
    )
    google_sheet_name: str = Field(
        default="Sheet1",
        description="Worksheet name inside the mirrored spreadsheet",
    )
    sheets_timeout: float = Field(
        default=10.0,
        description="Google Sheets request timeout in seconds",
        gt=0,
    )

    @property
    def sheets_enabled(self) -> bool:
        """Whether both the credentials and the target sheet are configured."""
        return bool(self.google_service_account_key and self.google_sheet_id)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (all origins when empty)",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list, defaulting to any origin."""
        if not self.cors_origins.strip():
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # API
    api_prefix: str = Field(
        default="/api",
        description="Prefix for all API routes",
    )
    port: int = Field(
        default=3001,
        description="Port used by the serve command",
        gt=0,
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
