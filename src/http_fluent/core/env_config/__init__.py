"""
Environment and file configuration for http-fluent.

Example:
    >>> from http_fluent.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> # HTTP_FLUENT_* variables and .env
    >>> config = load_from_env()
    >>>
    >>> # With overrides
    >>> config = load_from_env(timeout_ms=3000)
    >>>
    >>> # From a file
    >>> config = ConfigFileLoader.from_file("http_fluent.yaml")
"""

from .loader import load_from_env, print_config_summary
from .validator import HTTPFluentSettings, LoggingSettings
from .file_loader import ConfigFileLoader, ConfigValidationError

__all__ = [
    "load_from_env",
    "print_config_summary",
    "HTTPFluentSettings",
    "LoggingSettings",
    "ConfigFileLoader",
    "ConfigValidationError",
]
