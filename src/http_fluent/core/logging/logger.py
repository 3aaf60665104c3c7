"""
Main logger for http-fluent.

Wraps a stdlib logger, masks sensitive keyword fields and wires the
configured handlers, formatter and filters.
"""

import logging
from typing import Any, Dict, List, Optional

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class HTTPFluentLogger:
    """
    Structured logger used by Request.send().

    Keyword fields become `extra` on the record, after masking.

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
        >>> logger = HTTPFluentLogger(config)
        >>> logger.info("Request started", method="GET", url="https://api.com")

    With configure=False nothing is installed on the underlying logger, the
    records just flow to whatever the application configured for `name`.
    """

    def __init__(
        self,
        config: Optional[LoggingConfig] = None,
        name: str = "http_fluent",
        configure: bool = True,
    ):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if configure:
            self._install()

    def _install(self) -> None:
        level = self._get_level(self.config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Reinitialising a logger with the same name replaces its handlers
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(
                level=level,
                formatter=formatter,
                filters=filters
            ))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    def _log(self, level: int, message: str, fields: Dict[str, Any], exc_info: bool = False) -> None:
        if self._closed or not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with extra fields."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with the active exception's traceback."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close installed handlers. Idempotent.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            finally:
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# One configured logger per name; rebuilt when a different config arrives
_named_loggers: Dict[str, HTTPFluentLogger] = {}


def get_request_logger(config: Optional[LoggingConfig], name: str) -> HTTPFluentLogger:
    """
    Logger for one send().

    Without a config the records go, unconfigured, to the stdlib logger
    `name` (the package installs a NullHandler on "http_fluent").
    With a config the logger for `name` is built once and reused while the
    same config object is passed in.
    """
    if config is None:
        return HTTPFluentLogger(name=name, configure=False)

    cached = _named_loggers.get(name)
    if cached is not None and cached.config is config and not cached._closed:
        return cached

    if cached is not None:
        cached.close()

    logger = HTTPFluentLogger(config, name=name)
    _named_loggers[name] = logger
    return logger
