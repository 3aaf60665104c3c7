"""
Configuration loader from environment variables and .env files.
"""

from typing import Optional

from ..config import RequestConfig
from ..logging.config import LoggingConfig
from .validator import HTTPFluentSettings
from ...utils.sanitizer import mask_headers


def load_from_env(env_file: Optional[str] = None, **overrides) -> RequestConfig:
    """
    Load RequestConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (HTTP_FLUENT_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: ./.env if present)
        **overrides: Explicit overrides, same names as the settings fields
            (max_buffer_bytes, timeout_ms, log_level, ...) plus `headers`

    Raises:
        pydantic.ValidationError: invalid environment values

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(timeout_ms=3000, headers={"User-Agent": "app/1.0"})
    """
    if env_file is None:
        settings = HTTPFluentSettings()
    else:
        settings = HTTPFluentSettings(_env_file=env_file)

    # log_* overrides are applied before LoggingSettings validates them
    log_overrides = {
        key: value for key, value in overrides.items()
        if key.startswith('log_') and key in HTTPFluentSettings.model_fields
    }
    if log_overrides:
        settings = settings.model_copy(update=log_overrides)

    # Build logging config (if enabled)
    logging_config = None
    logging_settings = settings.to_logging_settings()
    if logging_settings:
        logging_config = LoggingConfig.create(
            level=logging_settings.level,
            format=logging_settings.format,
            enable_console=logging_settings.enable_console,
            enable_file=logging_settings.enable_file,
            file_path=logging_settings.file_path,
            max_bytes=logging_settings.max_bytes,
            backup_count=logging_settings.backup_count,
            enable_correlation_id=logging_settings.enable_correlation_id,
        )

    return RequestConfig.create(
        max_buffer_bytes=overrides.get('max_buffer_bytes', settings.max_buffer_bytes),
        timeout_ms=overrides.get('timeout_ms', settings.timeout_ms),
        headers=overrides.get('headers'),
        logging=logging_config,
    )


def print_config_summary(config: RequestConfig, mask_secrets: bool = True):
    """
    Print configuration summary.

    Example:
        >>> print_config_summary(load_from_env())
        RequestConfig:
          max_buffer_bytes: 50000000
          timeout_ms: None
          ...
    """
    headers = dict(config.headers)
    if mask_secrets:
        headers = mask_headers(headers)

    print("RequestConfig:")
    print(f"  max_buffer_bytes: {config.max_buffer_bytes}")
    print(f"  timeout_ms: {config.timeout_ms}")
    print(f"  headers: {headers}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
