"""
Logging system for http-fluent.

Example:
    >>> from http_fluent.core.logging import LoggingConfig
    >>> from http_fluent import RequestConfig, request
    >>>
    >>> config = RequestConfig.create(
    ...     logging=LoggingConfig.create(level="DEBUG", format="json")
    ... )
    >>> response = await request("https://api.example.com/users", config=config).send()
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import HTTPFluentLogger, get_request_logger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "HTTPFluentLogger",
    "get_request_logger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
