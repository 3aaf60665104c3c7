"""
Pydantic validators for environment configuration.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_MAX_BUFFER_BYTES


class LoggingSettings(BaseModel):
    """Logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text", "colored"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_file_path(self) -> 'LoggingSettings':
        """file_path is required when enable_file=True."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        return self


class HTTPFluentSettings(BaseSettings):
    """
    http-fluent configuration from environment variables.

    Reads from:
    1. Environment variables (HTTP_FLUENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        HTTP_FLUENT_MAX_BUFFER_BYTES=10000000
        HTTP_FLUENT_TIMEOUT_MS=5000
        HTTP_FLUENT_LOG_ENABLED=true
        HTTP_FLUENT_LOG_LEVEL=DEBUG
        HTTP_FLUENT_LOG_FORMAT=json

    Usage:
        >>> settings = HTTPFluentSettings()
        >>> settings.max_buffer_bytes
        50000000
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_FLUENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    max_buffer_bytes: int = Field(default=DEFAULT_MAX_BUFFER_BYTES, gt=0)
    timeout_ms: Optional[float] = Field(default=None, gt=0, description="Idle timeout in milliseconds")

    # Logging (off unless LOG_ENABLED)
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enabled:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_correlation_id=self.log_enable_correlation_id,
        )
