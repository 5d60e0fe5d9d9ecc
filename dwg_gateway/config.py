"""
Configuration settings for the DWG → DXF conversion gateway.

This module handles environment variables, application settings,
and configuration validation using Pydantic Settings.
"""

import tempfile

from pydantic import field_validator
from pydantic_settings import BaseSettings

from dwg_gateway.utils.validation import ValidationUtils


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden using environment variables
    with the same name (case-insensitive).
    """

    # Application settings
    APP_NAME: str = "DWG to DXF Converter API"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Logging settings
    LOG_LEVEL: str = "INFO"

    # Upload settings
    UPLOAD_FIELD_NAME: str = "file"
    SOURCE_EXTENSION: str = ".dwg"
    MAX_UPLOAD_SIZE: int = 100 * 1024 * 1024  # 100MB

    # Temporary artifacts, None means the platform temp directory
    TEMP_DIR: str | None = None

    # External tool settings
    CONVERTER_PATH: str = "/usr/local/bin/dwg2dxf"
    TARGET_EXTENSION: str = ".dxf"
    CONVERSION_TIMEOUT: int = 300  # 5 minutes
    DISCONNECT_POLL_INTERVAL: float = 0.5

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        allowed_envs = ["development", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level setting."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("SOURCE_EXTENSION", "TARGET_EXTENSION")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Normalize extensions to lowercase with a leading dot."""
        return ValidationUtils.validate_extensions([v])[0]

    @field_validator("MAX_UPLOAD_SIZE")
    @classmethod
    def validate_max_upload_size(cls, v: int) -> int:
        """Validate maximum upload size."""
        return ValidationUtils.validate_file_size(v, max_size=1024 * 1024 * 1024)

    @field_validator("CONVERSION_TIMEOUT")
    @classmethod
    def validate_conversion_timeout(cls, v: int) -> int:
        """Validate conversion timeout."""
        return ValidationUtils.validate_timeout(v)

    @field_validator("DISCONNECT_POLL_INTERVAL")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DISCONNECT_POLL_INTERVAL must be positive")
        return v

    @property
    def temp_dir(self) -> str:
        """Directory holding per-request temporary files."""
        return self.TEMP_DIR or tempfile.gettempdir()

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get application settings.

    Returns:
        Settings: Application settings instance
    """
    return settings


# Note: Environment-specific configurations should be set via environment variables
# Example .env for a container deployment:
#
#   ENVIRONMENT=production
#   LOG_LEVEL=WARNING
#   CONVERTER_PATH=/usr/local/bin/dwg2dxf
#   MAX_UPLOAD_SIZE=52428800
#   CONVERSION_TIMEOUT=120
