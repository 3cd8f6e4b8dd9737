"""
Configuration module for Clinic Service API.
Uses Pydantic BaseSettings for validation - app fails fast if config is inconsistent.
"""
import sys
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Values are read from the environment or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    clinic_svc_db_dir: str = Field(default="data", description="Database directory")
    clinic_svc_db_file: str = Field(default="clinic.db", description="Database filename")
    clinic_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    clinic_svc_host: str = Field(default="0.0.0.0", description="API host")
    clinic_svc_port: int = Field(default=8000, description="API port")
    clinic_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Pagination Configuration
    clinic_svc_default_page_size: int = Field(default=20, description="Page size used when none is requested")
    clinic_svc_max_page_size: int = Field(default=500, description="Largest page size a client may request")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="Log output format: json or text")

    @model_validator(mode="after")
    def validate_pagination(self) -> "Settings":
        """
        Validate pagination limits at startup and fail fast with clear error messages.
        """
        errors = []

        if self.clinic_svc_default_page_size < 1:
            errors.append("CLINIC_SVC_DEFAULT_PAGE_SIZE must be at least 1")

        if self.clinic_svc_max_page_size < self.clinic_svc_default_page_size:
            errors.append(
                "CLINIC_SVC_MAX_PAGE_SIZE must not be smaller than CLINIC_SVC_DEFAULT_PAGE_SIZE"
            )

        if self.log_format.lower() not in ("json", "text"):
            logger.warning(
                f"Unknown LOG_FORMAT '{self.log_format}' - falling back to json"
            )

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            logger.critical(error_msg)
            sys.exit(1)

        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.clinic_svc_db_dir) / self.clinic_svc_db_file)

    @property
    def json_logs(self) -> bool:
        """Whether logs should be emitted as single-line JSON."""
        return self.log_format.lower() != "text"

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.clinic_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if config is inconsistent
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.clinic_svc_db_busy_timeout

API_HOST = settings.clinic_svc_host
API_PORT = settings.clinic_svc_port
API_RELOAD = settings.clinic_svc_reload

DEFAULT_PAGE_SIZE = settings.clinic_svc_default_page_size
MAX_PAGE_SIZE = settings.clinic_svc_max_page_size
